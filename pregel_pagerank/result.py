# result.py
#
# Project: Pregel PageRank Engine
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Outcome of one PageRank run, shared by every compute model.

import enum

from pregel_pagerank.errors import NonConvergence


class EngineState(enum.Enum):
    INIT = "init"
    RUNNING = "running"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    DONE = "done"


class PageRankResult:
    """
    Final ranks plus how the run ended.

    Attributes:
        method (str): Compute model that produced the ranks
        ranks (dict): vertex_id -> raw final value (not renormalized)
        outcome (EngineState): CONVERGED or EXHAUSTED
        iterations (int): Supersteps / iterations performed after init
        aggregates (list[float]): L1 change of every iteration, in order
    """

    def __init__(self, method, ranks, outcome, iterations, aggregates=()):
        self.method = method
        self.ranks = ranks
        self.outcome = outcome
        self.iterations = iterations
        self.aggregates = list(aggregates)

    @property
    def converged(self):
        return self.outcome is EngineState.CONVERGED

    def require_converged(self):
        """Raise NonConvergence if the run stopped at the iteration cap."""
        if not self.converged:
            last = self.aggregates[-1] if self.aggregates else None
            raise NonConvergence(self.method, self.iterations, last)
        return self

    def __repr__(self):
        return (f"PageRankResult(method={self.method!r}, outcome={self.outcome.name}, "
                f"iterations={self.iterations}, vertices={len(self.ranks)})")
