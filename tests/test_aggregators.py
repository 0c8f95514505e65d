import itertools
import random

import pytest

from pregel_pagerank.aggregators import ConvergenceAggregator, MessageBuffer


def test_messages_summed_per_destination():
    buf = MessageBuffer()
    buf.send("A", 0.25)
    buf.send("B", 0.5)
    buf.send("A", 0.125)
    assert buf.combined() == {"A": 0.375, "B": 0.5}
    assert len(buf) == 3


def test_dangling_mass():
    buf = MessageBuffer()
    assert buf.dangling_mass() == 0.0
    buf.send_dangling(0.1)
    buf.send_dangling(0.2)
    assert buf.dangling_mass() == pytest.approx(0.3)


def test_merge_keeps_every_message():
    left, right = MessageBuffer(), MessageBuffer()
    left.send("A", 1.0)
    right.send("A", 2.0)
    right.send("B", 3.0)
    right.send_dangling(0.5)
    left.merge(right)
    assert left.combined() == {"A": 3.0, "B": 3.0}
    assert left.dangling_mass() == 0.5


def test_sum_does_not_depend_on_arrival_order():
    values = [1e16, 1.0, -1e16, 0.1, 0.2, 0.3, 1e-8]
    results = set()
    for perm in itertools.permutations(values):
        buf = MessageBuffer()
        for v in perm:
            buf.send("A", v)
        results.add(buf.combined()["A"])
    assert len(results) == 1


def test_sum_does_not_depend_on_partitioning():
    rng = random.Random(42)
    values = [rng.random() / 7.0 for _ in range(1000)]

    whole = MessageBuffer()
    for v in values:
        whole.send("A", v)

    merged = MessageBuffer()
    for start in range(0, len(values), 37):
        part = MessageBuffer()
        for v in reversed(values[start:start + 37]):
            part.send("A", v)
        merged.merge(part)

    assert merged.combined() == whole.combined()


def test_aggregator_total_and_reset():
    agg = ConvergenceAggregator()
    for delta in (0.1, 0.2, 0.3):
        agg.accumulate(delta)
    assert agg.total_and_reset() == pytest.approx(0.6)
    assert agg.total_and_reset() == 0.0


def test_aggregator_merge_is_order_independent():
    rng = random.Random(7)
    deltas = [rng.random() * 1e-6 for _ in range(500)]

    a = ConvergenceAggregator()
    for d in deltas:
        a.accumulate(d)

    b = ConvergenceAggregator()
    for chunk in (deltas[300:], deltas[:100], deltas[100:300]):
        partial = ConvergenceAggregator()
        for d in chunk:
            partial.accumulate(d)
        b.merge(partial)

    assert a.total() == b.total()
