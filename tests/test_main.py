import os

import pytest

import main


def test_main_default_methods(sample_path, capsys):
    assert main.main([sample_path]) == 0
    out = capsys.readouterr().out
    assert "Pregel PageRank Engine" in out
    assert "matches Reference" in out


def test_main_all_methods_with_plots(sample_path, tmp_path):
    out_dir = str(tmp_path / "plots")
    code = main.main([sample_path, "--methods", "pregel", "networkx",
                      "--workers", "3", "--tolerance", "1e-10", "--max-iterations", "1000",
                      "--plot-dir", out_dir])
    assert code == 0
    assert sorted(os.listdir(out_dir)) == [
        "convergence.png", "validation_networkx.png", "validation_pregel.png",
    ]


def test_main_bad_damping(sample_path, capsys):
    assert main.main([sample_path, "--damping", "1.5"]) == 2
    assert "damping" in capsys.readouterr().err


def test_main_malformed_file(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("A B\nB: C:D\n", encoding="utf-8")
    assert main.main([str(path)]) == 2
    assert "line 2" in capsys.readouterr().err


def test_main_strict_rejects_undeclared(sample_path, capsys):
    assert main.main([sample_path, "--strict"]) == 2
    assert "undeclared" in capsys.readouterr().err


def test_main_missing_file(tmp_path):
    assert main.main([str(tmp_path / "nope.txt")]) == 2


def test_main_invalid_utf8(tmp_path, capsys):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"A B\n\xff\xfe C\n")
    assert main.main([str(path)]) == 2
    assert "line 2" in capsys.readouterr().err


def test_main_bad_gcs_url(capsys):
    assert main.main(["gs://bucket-only"]) == 2
    assert "gs://bucket/object" in capsys.readouterr().err


def test_main_networkx_non_convergence(sample_path):
    code = main.main([sample_path, "--methods", "networkx", "--max-iterations", "2"])
    assert code == 1


def test_main_unknown_method(sample_path):
    with pytest.raises(SystemExit):
        main.main([sample_path, "--methods", "jung"])
