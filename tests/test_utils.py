import pytest

from pregel_pagerank.utils import Timer, print_error, print_side_by_side_boxes, print_summary_box


def test_summary_box_rows_are_aligned(capsys):
    print_summary_box("Stage 1 Summary", {"Vertices": 14, "Edges": 30}, width=30)
    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    assert len(lines) == 6
    assert "Vertices: 14" in lines[3]
    assert len(lines[3]) == len(lines[4]) == len(lines[0]) == 2 + 30 + 2


def test_side_by_side_pads_shorter_box(capsys):
    print_side_by_side_boxes("Left", {"a": 1, "b": 2, "c": 3}, "Right", {"x": 9}, col_width=20, gap=2)
    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    assert len(lines) == 7
    assert "c: 3" in lines[5]
    assert lines[5].rstrip().endswith("|")
    assert lines[2].count("+") == 4
    assert lines[4].count("+") == 2


def test_print_error_goes_to_stderr(capsys):
    print_error("boom")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "boom" in captured.err


def test_timer_reports_only_on_success(capsys):
    with Timer("Load") as timer:
        pass
    assert timer.elapsed >= 0
    assert "Load completed" in capsys.readouterr().out

    with pytest.raises(KeyError):
        with Timer("Broken"):
            raise KeyError("x")
    assert "Broken" not in capsys.readouterr().out
