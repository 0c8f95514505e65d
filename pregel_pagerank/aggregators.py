# aggregators.py
#
# Project: Pregel PageRank Engine
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Per-superstep reduction buffers.
#
#   Each worker gets its own MessageBuffer and ConvergenceAggregator for a
#   superstep and fills them without locking.  At the barrier the
#   coordinator merges all partials into one.  Totals are taken with
#   math.fsum, which is exactly rounded, so the merged result does not
#   depend on how vertices were partitioned or in which order workers
#   finished.

import math
from collections import defaultdict


class MessageBuffer:
    """Messages emitted during one superstep, grouped by destination."""

    def __init__(self):
        self._messages = defaultdict(list)
        self._dangling = []

    def send(self, target, value):
        self._messages[target].append(value)

    def send_dangling(self, value):
        self._dangling.append(value)

    def merge(self, other):
        """Append every message held by `other` into this buffer."""
        for target, values in other._messages.items():
            self._messages[target].extend(values)
        self._dangling.extend(other._dangling)

    def combined(self):
        """
        Sum messages per destination.

        Returns:
            dict: target -> summed message value
        """
        return {target: math.fsum(values) for target, values in self._messages.items()}

    def dangling_mass(self):
        return math.fsum(self._dangling)

    def __len__(self):
        return sum(len(values) for values in self._messages.values())


class ConvergenceAggregator:
    """
    Global sum of |delta| over every vertex in a superstep.

    accumulate() is called once per vertex; total_and_reset() returns the
    round's total and clears the aggregator for the next superstep.
    """

    def __init__(self):
        self._deltas = []

    def accumulate(self, delta):
        self._deltas.append(delta)

    def merge(self, other):
        self._deltas.extend(other._deltas)

    def total(self):
        return math.fsum(self._deltas)

    def total_and_reset(self):
        total = self.total()
        self._deltas = []
        return total
