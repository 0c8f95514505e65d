import math
import os

import pytest

from pregel_pagerank.stage3_pagerank import solve_pregel, solve_reference
from pregel_pagerank.stage4_validation import (
    compare_results, plot_convergence, plot_validation, rank_order, verify_results,
)


def test_rank_order_descending_with_id_tie_break():
    ranks = {"b": 0.25, "a": 0.25, "c": 0.5}
    assert rank_order(ranks) == ["c", "a", "b"]


def test_rank_order_mixed_id_types():
    ranks = {2: 0.25, "b": 0.25, 1: 0.25, "a": 0.25}
    assert rank_order(ranks) == [1, 2, "a", "b"]


def test_rank_order_ignores_last_bit_noise():
    ranks = {"b": 0.1 + 0.2, "a": 0.3}
    assert ranks["b"] != ranks["a"]
    assert rank_order(ranks) == ["a", "b"]


def test_identical_results_are_equivalent():
    ranks = {"x": 0.5, "y": 0.3, "z": 0.2}
    report = compare_results(ranks, dict(ranks))
    assert report.equivalent
    assert report.max_error == 0.0
    assert report.order_matches
    assert report.spearman == pytest.approx(1.0)
    assert report.kendall == pytest.approx(1.0)


def test_value_mismatch_detected():
    expected = {"x": 0.5, "y": 0.3, "z": 0.2}
    actual = {"x": 0.5, "y": 0.299, "z": 0.201}
    report = compare_results(expected, actual)
    assert not report.equivalent
    assert report.max_error == pytest.approx(0.001)
    assert report.max_error_vertex in {"y", "z"}
    assert report.order_matches


def test_order_mismatch_detected():
    expected = {"x": 0.5, "y": 0.25, "z": 0.25}
    actual = {"x": 0.5, "y": 0.249999, "z": 0.250001}
    report = compare_results(expected, actual)
    assert report.max_error <= 1e-5
    assert not report.order_matches
    assert not report.equivalent


def test_mass_leak_detected():
    report = compare_results({"x": 0.5, "y": 0.4}, {"x": 0.5, "y": 0.4})
    assert report.order_matches
    assert not report.equivalent


def test_different_vertex_sets():
    report = compare_results({"x": 1.0}, {"y": 1.0})
    assert not report.equivalent
    assert report.max_error == math.inf


def test_constant_ranking_has_no_correlation():
    ranks = {v: 0.25 for v in "abcd"}
    report = compare_results(ranks, dict(ranks))
    assert report.equivalent
    assert math.isnan(report.spearman)


def test_empty_results():
    assert compare_results({}, {}).equivalent


def test_verify_results_prints_report(sample_graph, config, capsys):
    reference = solve_reference(sample_graph, config).ranks
    pregel = solve_pregel(sample_graph, config).ranks
    report = verify_results(reference, pregel)
    out = capsys.readouterr().out
    assert report.equivalent
    assert "Validation Metrics" in out
    assert "pregel" in out.lower()


def test_plots_written(sample_graph, config, tmp_path):
    reference = solve_reference(sample_graph, config)
    pregel = solve_pregel(sample_graph, config)
    out_dir = str(tmp_path / "docs")

    path = plot_validation(reference.ranks, pregel.ranks, out_dir, labels=("Reference", "Pregel"))
    assert os.path.basename(path) == "validation_pregel.png"
    assert os.path.getsize(path) > 0

    path = plot_convergence([reference, pregel], out_dir)
    assert os.path.exists(path)


def test_compare_and_plot_mixed_id_types(tmp_path):
    ranks = {1: 0.5, "x": 0.3, 2: 0.2}
    report = compare_results(ranks, dict(ranks))
    assert report.equivalent
    path = plot_validation(ranks, dict(ranks), str(tmp_path))
    assert os.path.exists(path)
