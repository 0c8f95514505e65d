import numpy as np
from pregel_pagerank.utils import print_stage, print_step, print_summary_box, print_side_by_side_boxes, Timer


def build_incoming(graph):
    """
    Build incoming edge lists from the graph's outgoing edges.

    Args:
        graph (Graph): Loaded graph

    Returns:
        dict: vertex_id -> list of source vertex_ids (one entry per edge)
    """
    incoming = {vertex_id: [] for vertex_id in graph}

    for source in graph:
        for target in graph.out_edges(source):
            incoming[target].append(source)

    return incoming


def compute_degree_stats(degrees):
    """
    Summarize a list of per-vertex degrees.

    Args:
        degrees (list[int]): Degree per vertex

    Returns:
        dict: Computed statistics (empty for an empty graph)
    """
    if not degrees:
        return {}

    values = np.array(degrees)

    return {
        "Min": int(np.min(values)),
        "Max": int(np.max(values)),
        "Average": f"{np.mean(values):.2f}",
        "Median": f"{np.median(values):.2f}",
        "Q1 (20th)": f"{np.percentile(values, 20):.2f}",
        "Q2 (40th)": f"{np.percentile(values, 40):.2f}",
        "Q3 (60th)": f"{np.percentile(values, 60):.2f}",
        "Q4 (80th)": f"{np.percentile(values, 80):.2f}",
    }


def count_special_edges(graph):
    """
    Count self-loops and parallel edges.

    Returns:
        tuple: (self_loops, parallel_edges) where parallel_edges counts
               every copy beyond the first of a repeated (source, target)
    """
    self_loops = 0
    parallel = 0
    for source in graph:
        targets = graph.out_edges(source)
        self_loops += sum(1 for t in targets if t == source)
        parallel += len(targets) - len(set(targets))
    return self_loops, parallel


def run_stats(graph):
    """
    Build incoming edges and compute degree statistics for both directions.

    Args:
        graph (Graph): Loaded graph

    Returns:
        tuple: (incoming dict, out_stats dict, in_stats dict, summary dict)
    """
    print_stage("Stats", "Computing degree statistics")

    with Timer("Total Stage 2"):
        print_step("Building incoming edge index...")
        incoming = build_incoming(graph)

        out_stats = compute_degree_stats([graph.out_degree(v) for v in graph])
        in_stats = compute_degree_stats([len(incoming[v]) for v in graph])
        print_side_by_side_boxes("Out-degree", out_stats, "In-degree", in_stats)

        self_loops, parallel = count_special_edges(graph)
        summary = {
            "Vertices": len(graph),
            "Edges": graph.num_edges,
            "Dangling vertices": len(graph.dangling()),
            "Self-loops": self_loops,
            "Parallel edges": parallel,
        }
        print_summary_box("Graph Summary", summary)

    return incoming, out_stats, in_stats, summary
