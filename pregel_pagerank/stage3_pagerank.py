# stage3_pagerank.py
#
# Project: Pregel PageRank Engine
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Stage 3: PageRank compute models behind one contract,
#
#       compute(graph, config, method) -> {vertex_id: rank}
#
#   "pregel"     vertex-centric BSP engine (engine.SuperstepCoordinator)
#   "reference"  power iteration on a sparse stochastic matrix
#   "networkx"   nx.pagerank, an independent third-party reference
#
#   The reference solver's iteration k computes exactly what the engine's
#   superstep k computes, so both stop at the same point for the same
#   tolerance and iteration cap.
#
# References:
#   [1] Page, L., Brin, S., Motwani, R., & Winograd, T. (1999).
#       "The PageRank Citation Ranking: Bringing Order to the Web."
#       http://ilpubs.stanford.edu:8090/422/1/1999-66.pdf
#
#   [2] Langville, A. & Meyer, C. (2004).
#       "A Survey of Eigenvector Methods of Web Information Retrieval."
#       http://citeseer.ist.psu.edu/713792.html
#
# Implementation approach adapted from NetworkX 3.6.1 `_pagerank_scipy`:
#   https://github.com/networkx/networkx/blob/main/networkx/algorithms/link_analysis/pagerank_alg.py
#
# NetworkX License (3-clause BSD):
#   Copyright (c) 2004-2025, NetworkX Developers
#   Aric Hagberg <hagberg@lanl.gov>
#   Dan Schult <dschult@colgate.edu>
#   Pieter Swart <swart@lanl.gov>
#   All rights reserved.
#   Redistribution and use in source and binary forms, with or without
#   modification, are permitted provided that the above copyright notice,
#   this list of conditions, and the following disclaimer are retained.
#   See full license: https://github.com/networkx/networkx/blob/main/LICENSE.txt
#
# Key ideas borrowed from NetworkX:
#   1. Represent the graph as a scipy sparse matrix (CSR format).
#   2. Row-normalize the adjacency matrix into a right-stochastic matrix
#      so that A[i][j] = (edges i->j)/C(i).
#   3. Use left matrix-vector multiplication (x @ A) to compute all
#      incoming contributions in one shot.
#   4. Handle dangling nodes by collecting their total rank and
#      redistributing it uniformly to all vertices.

import numpy as np
import scipy.sparse as sp
import networkx as nx

from pregel_pagerank.engine import SuperstepCoordinator
from pregel_pagerank.errors import ConfigurationError, NonConvergence
from pregel_pagerank.result import EngineState, PageRankResult
from pregel_pagerank.stage1_read import id_sort_key
from pregel_pagerank.utils import print_stage, print_step, print_success, print_summary_box, Timer


def build_transition_matrix(graph, vertices):
    """
    Build the row-stochastic transition matrix.

    Parallel edges are NOT deduplicated: csr_matrix sums duplicate
    (row, col) entries, so two edges u->v give A[u][v] = 2/C(u), matching
    the engine sending one message per edge.

    Args:
        graph (Graph): Loaded graph
        vertices (list): Vertex ids; defines row/column order

    Returns:
        tuple: (A as CSR matrix, indices of dangling vertices)
    """
    n = len(vertices)
    index = {vertex: i for i, vertex in enumerate(vertices)}

    rows, cols = [], []
    for source in vertices:
        src_idx = index[source]
        for target in graph.out_edges(source):
            rows.append(src_idx)
            cols.append(index[target])

    data = np.ones(len(rows), dtype=np.float64)
    A = sp.csr_matrix((data, (rows, cols)), shape=(n, n))

    out_degree = np.array(A.sum(axis=1)).flatten()       # row sums
    is_dangling = np.where(out_degree == 0)[0]           # save before modifying
    out_degree[out_degree == 0] = 1.0                    # avoid /0 for dangling
    A = sp.diags(1.0 / out_degree) @ A
    return sp.csr_matrix(A), is_dangling


def solve_reference(graph, config):
    """
    PageRank by power iteration, starting from the uniform vector.

    Each iteration computes:
        x_new = d * (x @ A + dangling_sum / N) + (1-d)/N

    and stops when the L1 change drops below config.tolerance (if > 0) or
    after config.max_iterations.  Values are returned as computed, with no
    renormalization.

    Args:
        graph (Graph): Loaded graph
        config (PageRankConfig): Run options

    Returns:
        PageRankResult
    """
    vertices = list(graph)
    n = len(vertices)
    if n == 0:
        return PageRankResult("reference", {}, EngineState.CONVERGED, 0)

    A, is_dangling = build_transition_matrix(graph, vertices)
    damping = config.damping

    x = np.full(n, 1.0 / n, dtype=np.float64)
    teleport = np.full(n, (1.0 - damping) / n, dtype=np.float64)

    outcome = EngineState.EXHAUSTED
    aggregates = []
    iterations = 0
    for iterations in range(1, config.max_iterations + 1):
        x_prev = x
        dangling_sum = x_prev[is_dangling].sum()
        x = damping * (x_prev @ A + dangling_sum / n) + teleport

        diff = float(np.abs(x - x_prev).sum())
        aggregates.append(diff)
        if config.tolerance > 0 and diff < config.tolerance:
            outcome = EngineState.CONVERGED
            break

    ranks = {vertices[i]: float(x[i]) for i in range(n)}
    return PageRankResult("reference", ranks, outcome, iterations, aggregates)


def solve_pregel(graph, config, progress=False, verbose=False):
    """Run the vertex-centric engine to completion."""
    coordinator = SuperstepCoordinator(graph, config, verbose=verbose)
    return coordinator.run(progress=progress)


def solve_networkx(graph, config):
    """
    PageRank from networkx, used as an independent check.

    A MultiDiGraph keeps parallel edges, which networkx weights by count.
    networkx stops when the L1 change is below N * tol, so tol is scaled to
    give the same criterion as the other models.

    Raises:
        ConfigurationError: tolerance is 0 (networkx needs a stopping rule)
        NonConvergence: networkx hit max_iterations
    """
    if config.tolerance <= 0:
        raise ConfigurationError("the networkx model needs tolerance > 0")

    n = len(graph)
    if n == 0:
        return PageRankResult("networkx", {}, EngineState.CONVERGED, 0)

    G = nx.MultiDiGraph()
    G.add_nodes_from(graph)
    for source in graph:
        for target in graph.out_edges(source):
            G.add_edge(source, target)

    try:
        ranks = nx.pagerank(G, alpha=config.damping, max_iter=config.max_iterations,
                            tol=config.tolerance / n)
    except nx.PowerIterationFailedConvergence as err:
        raise NonConvergence("networkx", config.max_iterations) from err

    # networkx does not report its iteration count
    return PageRankResult("networkx", {v: float(r) for v, r in ranks.items()},
                          EngineState.CONVERGED, None)


COMPUTE_MODELS = {
    "pregel": solve_pregel,
    "reference": solve_reference,
    "networkx": solve_networkx,
}


def compute(graph, config, method="pregel"):
    """
    Compute PageRank with the named model.

    Returns:
        dict: vertex_id -> rank
    """
    try:
        solver = COMPUTE_MODELS[method]
    except KeyError:
        raise ConfigurationError(
            f"unknown method {method!r}, expected one of {sorted(COMPUTE_MODELS)}") from None
    return solver(graph, config).ranks


def compute_pagerank(graph, config, method="pregel", progress=False):
    """
    Stage entry point: run one model with progress output and a top-5 box.

    Args:
        graph (Graph): Loaded graph
        config (PageRankConfig): Run options
        method (str): Key of COMPUTE_MODELS
        progress (bool): tqdm bar for the pregel engine

    Returns:
        PageRankResult
    """
    if method not in COMPUTE_MODELS:
        raise ConfigurationError(f"unknown method {method!r}, expected one of {sorted(COMPUTE_MODELS)}")

    print_stage("PageRank", f"Computing PageRank scores ({method})")

    with Timer(f"Total Stage 3 ({method})"):
        print_step(f"damping={config.damping}, max_iterations={config.max_iterations}, "
                   f"tolerance={config.tolerance:g}")
        if method == "pregel":
            print_step(f"Running supersteps with {config.num_workers} worker(s)...")
            result = solve_pregel(graph, config, progress=progress)
        else:
            result = COMPUTE_MODELS[method](graph, config)

        if result.iterations is None:
            print_success("Converged")
        elif result.converged:
            print_success(f"Converged after {result.iterations} iterations")
        else:
            print_step(f"Warning: tolerance not met in {result.iterations} iterations")
        if result.aggregates:
            print_step(f"Final L1 change={result.aggregates[-1]:.3e}")

        top5 = sorted(result.ranks.items(), key=lambda item: (-item[1], id_sort_key(item[0])))[:5]
        print_summary_box(f"Top 5 Vertices ({method})", {
            f"{vertex}": f"{score:.8f}" for vertex, score in top5
        })

    return result
