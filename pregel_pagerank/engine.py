# engine.py
#
# Project: Pregel PageRank Engine
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Superstep coordinator: a single-process simulation of Pregel's
#   bulk-synchronous execution model.
#
#   State machine:  INIT -> RUNNING -> (CONVERGED | EXHAUSTED) -> DONE
#
#   One superstep:
#     1. Deliver.  The previous superstep's buffer is summed per
#        destination, and danglingMass/N is added to every vertex.
#     2. Compute.  The vertex program runs for every vertex, active or
#        not.  Vertices are split into contiguous partitions, one per
#        worker thread.  Each worker writes into its own MessageBuffer and
#        ConvergenceAggregator and reads only its vertices' prior values.
#     3. Barrier.  All workers finish; values and active flags are
#        committed, partial buffers and aggregates are merged in partition
#        order and become the next superstep's inbox.
#     4. Halt test on the merged aggregate.
#
#   Superstep t's output is a pure function of superstep t-1's delivered
#   messages, so results are identical for any worker count.
#
# References:
#   [1] Malewicz, G. et al. (2010).
#       "Pregel: A System for Large-Scale Graph Processing."  SIGMOD 2010.
#   [2] Valiant, L. (1990).
#       "A Bridging Model for Parallel Computation."  CACM 33(8).

from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from tqdm import tqdm

from pregel_pagerank.aggregators import ConvergenceAggregator, MessageBuffer
from pregel_pagerank.result import EngineState, PageRankResult
from pregel_pagerank.utils import print_step, print_success, print_warning
from pregel_pagerank.vertex_program import pagerank_program


class Vertex:
    __slots__ = ('id', 'value', 'out_edges', 'active')

    def __init__(self, vertex_id, out_edges):
        self.id = vertex_id
        self.value = 0.0
        self.out_edges = out_edges
        self.active = True

    def __repr__(self):
        return f"Vertex({self.id!r}, value={self.value!r}, active={self.active})"


class SuperstepState:
    """Counters for the most recently completed superstep."""

    def __init__(self):
        self.superstep = 0
        self.aggregate = None
        self.halted = False
        self.active_vertices = 0
        self.reactivated = 0


_PartitionResult = namedtuple('_PartitionResult', ['updates', 'outbox', 'aggregator', 'reactivated'])


def partition_vertices(vertex_ids, num_workers):
    """
    Split vertex ids into at most `num_workers` contiguous partitions.

    Args:
        vertex_ids (list): Vertex ids in graph order
        num_workers (int): Number of worker threads

    Returns:
        list[list]: Non-empty partitions
    """
    if not vertex_ids:
        return []
    size = -(-len(vertex_ids) // num_workers)
    return [vertex_ids[i:i + size] for i in range(0, len(vertex_ids), size)]


class SuperstepCoordinator:
    """
    Drives the vertex program over a Graph in synchronized supersteps.

    Args:
        graph (Graph): Immutable topology
        config (PageRankConfig): Validated run options
        program (callable): Vertex program, see vertex_program.pagerank_program
        verbose (bool): Print one line per superstep
    """

    def __init__(self, graph, config, program=pagerank_program, verbose=False):
        self.graph = graph
        self.config = config
        self.program = program
        self.verbose = verbose

        self.state = EngineState.INIT
        self.outcome = None
        self.superstep_state = SuperstepState()
        self.vertices = {vertex_id: Vertex(vertex_id, graph.out_edges(vertex_id)) for vertex_id in graph}
        self._partitions = partition_vertices(list(self.vertices), config.num_workers)
        self._inbox = MessageBuffer()
        self._aggregates = []

    # ---------------------------------------------------------------
    # Worker side
    # ---------------------------------------------------------------

    def _compute_partition(self, vertex_ids, superstep, delivered, dangling_share):
        """Run the vertex program over one partition.  Must not mutate vertices."""
        n = len(self.vertices)
        outbox = MessageBuffer()
        aggregator = ConvergenceAggregator()
        updates = []
        reactivated = 0

        for vertex_id in vertex_ids:
            vertex = self.vertices[vertex_id]
            incoming = delivered.get(vertex_id, 0.0) + dangling_share
            if not vertex.active and incoming != 0.0:
                reactivated += 1

            update = self.program(
                vertex_id, vertex.value, incoming, superstep, n,
                self.config.damping, vertex.out_edges, self.config.per_vertex_tolerance,
            )
            for message in update.messages:
                outbox.send(message.target, message.value)
            if not vertex.out_edges:
                outbox.send_dangling(update.dangling)
            aggregator.accumulate(update.delta)
            updates.append((vertex, update))

        return _PartitionResult(updates, outbox, aggregator, reactivated)

    # ---------------------------------------------------------------
    # Coordinator side
    # ---------------------------------------------------------------

    def _superstep(self, superstep, delivered, dangling_share):
        """Dispatch all partitions, wait at the barrier, then commit."""
        work = partial(self._compute_partition, superstep=superstep,
                       delivered=delivered, dangling_share=dangling_share)

        if len(self._partitions) > 1:
            with ThreadPoolExecutor(max_workers=len(self._partitions)) as pool:
                results = list(pool.map(work, self._partitions))
        else:
            results = [work(p) for p in self._partitions]

        # barrier: every partition has finished superstep `superstep`
        outbox = MessageBuffer()
        aggregator = ConvergenceAggregator()
        reactivated = 0
        for result in results:
            for vertex, update in result.updates:
                vertex.value = update.value
                vertex.active = not update.halt
            outbox.merge(result.outbox)
            aggregator.merge(result.aggregator)
            reactivated += result.reactivated

        return outbox, aggregator.total_and_reset(), reactivated

    def _finish(self, outcome):
        self.outcome = outcome
        self.state = outcome
        self.superstep_state.halted = True
        if self.verbose:
            if outcome is EngineState.CONVERGED:
                print_success(f"Converged after {self.superstep_state.superstep} supersteps")
            else:
                print_warning(f"Iteration cap reached after {self.superstep_state.superstep} supersteps")
        self.state = EngineState.DONE

    def initialize(self):
        """INIT -> RUNNING: set every vertex to 1/N and send the first messages."""
        if self.state is not EngineState.INIT:
            raise RuntimeError(f"initialize() called in state {self.state.name}")

        if not self.vertices:
            self._finish(EngineState.CONVERGED)
            return

        outbox, _, _ = self._superstep(0, {}, 0.0)
        self._inbox = outbox
        self.superstep_state.active_vertices = len(self.vertices)
        self.state = EngineState.RUNNING

    def step(self):
        """
        Run one superstep (t >= 1) and evaluate the halting conditions.

        Returns:
            float: Sum of |delta| over all vertices for this superstep
        """
        if self.state is not EngineState.RUNNING:
            raise RuntimeError(f"step() called in state {self.state.name}")

        state = self.superstep_state
        state.superstep += 1
        n = len(self.vertices)

        delivered = self._inbox.combined()
        dangling_share = self._inbox.dangling_mass() / n
        outbox, aggregate, reactivated = self._superstep(state.superstep, delivered, dangling_share)

        self._inbox = outbox
        self._aggregates.append(aggregate)
        state.aggregate = aggregate
        state.reactivated = reactivated
        state.active_vertices = sum(1 for v in self.vertices.values() if v.active)

        if self.verbose:
            print_step(f"Superstep {state.superstep}: L1 change={aggregate:.3e}, "
                       f"active={state.active_vertices}/{n}, reactivated={reactivated}")

        self._evaluate_halt()
        return aggregate

    def _evaluate_halt(self):
        config = self.config
        state = self.superstep_state
        if config.tolerance > 0 and state.aggregate < config.tolerance:
            self._finish(EngineState.CONVERGED)
        elif state.superstep >= config.max_iterations:
            self._finish(EngineState.EXHAUSTED)

    def run(self, progress=False):
        """
        Run to completion.

        Args:
            progress (bool): Show a tqdm bar over supersteps

        Returns:
            PageRankResult
        """
        if self.state is EngineState.INIT:
            self.initialize()

        bar = None
        if progress:
            bar = tqdm(
                total=self.config.max_iterations,
                desc="  Supersteps",
                unit="step",
                bar_format="  {l_bar}{bar:30}{r_bar}",
                ncols=90,
            )
        try:
            while self.state is EngineState.RUNNING:
                aggregate = self.step()
                if bar is not None:
                    bar.update(1)
                    bar.set_postfix(l1=f"{aggregate:.2e}")
        finally:
            if bar is not None:
                bar.close()

        return self.result()

    def values(self):
        """Raw vertex values.  Never renormalized."""
        return {vertex_id: vertex.value for vertex_id, vertex in self.vertices.items()}

    def result(self):
        if self.state is not EngineState.DONE:
            raise RuntimeError(f"result() called in state {self.state.name}")
        return PageRankResult("pregel", self.values(), self.outcome,
                              self.superstep_state.superstep, self._aggregates)
