# stage4_validation.py
#
# Project: Pregel PageRank Engine
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Stage 4: Compare two PageRank results (typically the Pregel engine
#   against the reference solver) using score-level and rank-level
#   agreement metrics, and optionally plot them.
#
#   Two results are "equivalent" when
#     - they rank the same vertex set,
#     - every per-vertex value agrees within the tolerance (1e-5),
#     - the descending rank order is identical (ties broken by vertex id),
#     - both sum to 1.0 within the tolerance.
#
# References:
#   [1] Spearman, C. (1904).
#       "The Proof and Measurement of Association between Two Things."
#       American Journal of Psychology, 15(1), 72-101.
#
#   [2] Kendall, M. (1938).
#       "A New Measure of Rank Correlation."
#       Biometrika, 30(1/2), 81-93.

import math
import os
from collections import namedtuple

import numpy as np
from scipy.stats import spearmanr, kendalltau, rankdata
import matplotlib
matplotlib.use('Agg')  # non-interactive backend for saving to file
import matplotlib.pyplot as plt

from pregel_pagerank.stage1_read import id_sort_key
from pregel_pagerank.utils import (
    print_stage, print_step, print_success, print_warning, print_summary_box,
    print_side_by_side_boxes, Timer,
)

ValidationReport = namedtuple('ValidationReport', [
    'mae', 'max_error', 'max_error_vertex', 'spearman', 'kendall',
    'order_matches', 'expected_sum', 'actual_sum', 'equivalent',
])


def rank_order(ranks, precision=10):
    """
    Vertex ids by descending rank, ties broken by ascending id.

    Values are rounded to `precision` decimal places first so that two
    mathematically equal ranks that differ in the last bit still tie.
    """
    return sorted(ranks, key=lambda vertex: (-round(ranks[vertex], precision), id_sort_key(vertex)))


def _correlation(fn, a, b):
    # scipy returns nan with a warning when either side is constant
    if len(a) < 2 or np.ptp(a) == 0 or np.ptp(b) == 0:
        return float('nan')
    return float(fn(a, b)[0])


def compare_results(expected, actual, tolerance=1.0e-5):
    """
    Compute agreement metrics between two rank mappings.

    Args:
        expected (dict): vertex_id -> rank (reference)
        actual (dict): vertex_id -> rank (model under test)
        tolerance (float): Per-vertex and sum tolerance

    Returns:
        ValidationReport
    """
    expected_sum = math.fsum(expected.values())
    actual_sum = math.fsum(actual.values())

    if set(expected) != set(actual):
        return ValidationReport(float('nan'), float('inf'), None, float('nan'), float('nan'),
                                False, expected_sum, actual_sum, False)

    vertices = rank_order(expected)
    if not vertices:
        return ValidationReport(0.0, 0.0, None, float('nan'), float('nan'),
                                True, expected_sum, actual_sum, True)

    expected_scores = np.array([expected[v] for v in vertices])
    actual_scores = np.array([actual[v] for v in vertices])

    abs_errors = np.abs(expected_scores - actual_scores)
    mae = float(abs_errors.mean())
    max_err = float(abs_errors.max())
    max_err_vertex = vertices[int(abs_errors.argmax())]

    rho = _correlation(spearmanr, expected_scores, actual_scores)
    tau = _correlation(kendalltau, expected_scores, actual_scores)

    order_matches = rank_order(expected) == rank_order(actual)
    equivalent = (
        max_err <= tolerance
        and order_matches
        and abs(expected_sum - 1.0) <= tolerance
        and abs(actual_sum - 1.0) <= tolerance
    )
    return ValidationReport(mae, max_err, max_err_vertex, rho, tau,
                            order_matches, expected_sum, actual_sum, equivalent)


def print_comparison(expected, actual, report, labels=("Reference", "Pregel"), top=5):
    """Print the metrics box and the side-by-side top-N lists."""
    exp_label, act_label = labels
    print_summary_box("Validation Metrics", {
        "MAE (score)": f"{report.mae:.2e}",
        "Max error": f"{report.max_error:.2e} ({report.max_error_vertex})",
        "Spearman rho [1]": f"{report.spearman:.6f}",
        "Kendall tau  [2]": f"{report.kendall:.6f}",
        f"Sum ({exp_label})": f"{report.expected_sum:.10f}",
        f"Sum ({act_label})": f"{report.actual_sum:.10f}",
        "Rank order match": "yes" if report.order_matches else "no",
    })

    exp_top = rank_order(expected)[:top]
    act_top = rank_order(actual)[:top]
    print_side_by_side_boxes(
        f"{act_label} Top {top}", {f"#{i+1} {v}": f"{actual[v]:.8f}" for i, v in enumerate(act_top)},
        f"{exp_label} Top {top}", {f"#{i+1} {v}": f"{expected[v]:.8f}" for i, v in enumerate(exp_top)},
    )


def verify_results(expected, actual, labels=("Reference", "Pregel"), tolerance=1.0e-5, top=5):
    """
    Stage entry point: compare, print, and report equivalence.

    Returns:
        ValidationReport
    """
    print_stage("Verify", f"Comparing {labels[1]} against {labels[0]}")

    with Timer("Verification"):
        report = compare_results(expected, actual, tolerance=tolerance)
        if set(expected) != set(actual):
            print_warning("Vertex sets differ")
        else:
            print_comparison(expected, actual, report, labels=labels, top=top)

        if report.equivalent:
            print_success(f"{labels[1]} matches {labels[0]} within {tolerance:g}")
        else:
            print_warning(f"{labels[1]} does NOT match {labels[0]} within {tolerance:g}")

    return report


def plot_validation(expected, actual, out_dir, labels=("Reference", "Pregel")):
    """
    Save rank-vs-rank and score-vs-score scatter plots.

    Points on the diagonal mean identical ranking / identical scores.

    Returns:
        str: Path of the written PNG
    """
    exp_label, act_label = labels
    vertices = list(expected)
    expected_scores = np.array([expected[v] for v in vertices])
    actual_scores = np.array([actual[v] for v in vertices])

    expected_ranks = rankdata(-expected_scores, method='ordinal')
    actual_ranks = rankdata(-actual_scores, method='ordinal')

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

    ax1.scatter(expected_ranks, actual_ranks, s=4, alpha=0.5, c='steelblue')
    rank_max = max(len(vertices), 1)
    ax1.plot([1, rank_max], [1, rank_max], 'r--', linewidth=1, label='Perfect agreement')
    ax1.set_xlabel(f'{exp_label} Rank')
    ax1.set_ylabel(f'{act_label} Rank')
    ax1.set_title('Rank vs Rank')
    ax1.legend(loc='upper left')

    ax2.scatter(expected_scores, actual_scores, s=4, alpha=0.5, c='darkorange')
    lo = min(expected_scores.min(), actual_scores.min())
    hi = max(expected_scores.max(), actual_scores.max())
    ax2.plot([lo, hi], [lo, hi], 'r--', linewidth=1, label='y = x')
    ax2.set_xlabel(f'{exp_label} PageRank Score')
    ax2.set_ylabel(f'{act_label} PageRank Score')
    ax2.set_title('Score vs Score')
    ax2.legend(loc='upper left')

    fig.suptitle(f'{act_label} vs {exp_label} PageRank', fontsize=14, fontweight='bold')
    fig.tight_layout()

    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, f'validation_{act_label.lower()}.png')
    fig.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return path


def plot_convergence(results, out_dir):
    """
    Plot the per-iteration L1 change of each result on a log scale.

    Args:
        results (list[PageRankResult]): Runs to plot; runs without an
            iteration history are skipped
        out_dir (str): Output directory

    Returns:
        str: Path of the written PNG
    """
    fig, ax = plt.subplots(figsize=(8, 5))
    for result in results:
        if result.aggregates:
            steps = np.arange(1, len(result.aggregates) + 1)
            # log scale cannot show an exact zero
            values = np.maximum(np.array(result.aggregates), np.finfo(float).tiny)
            ax.semilogy(steps, values, marker='.', label=result.method)
    ax.set_xlabel('Superstep / iteration')
    ax.set_ylabel('L1 change')
    ax.set_title('Convergence')
    ax.legend(loc='upper right')
    fig.tight_layout()

    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, 'convergence.png')
    fig.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print_step(f"Convergence plot saved to {path}")
    return path
