"""
Tests for the `python -m qcir` entry point.
"""

from __future__ import annotations

import argparse

import pytest

from qcir.__main__ import build_demo_circuit, main, parse_term


def test_demo_summary(capsys):
    assert main(["--qubits", "3"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("*** Quantum Circuit Info ***\n")
    assert "# of qubit: 3\n" in out
    assert "# of step : 3\n" in out
    assert "Clifford  : yes\n" in out


def test_demo_circuit_is_ghz_chain():
    c = build_demo_circuit(2)
    assert [g.name for g in c] == ["H", "CNOT"]


def test_trotter_terms_appended(capsys):
    argv = ["--qubits", "2", "--term", "ZZ:1.0", "--term", "XI:0.5",
            "--angle", "0.1", "--repeats", "3"]
    assert main(argv) == 0
    out = capsys.readouterr().out
    assert "# of gate : 8\n" in out
    assert "Clifford  : no\n" in out


def test_diagonal_rejects_x_term(capsys):
    assert main(["--term", "XI:1.0", "--diagonal"]) == 1
    captured = capsys.readouterr()
    assert "not diagonal" in captured.err
    assert captured.out == ""


def test_bad_label_length_reported(capsys):
    assert main(["--qubits", "2", "--term", "ZZZ:1.0", "--repeats", "1"]) == 1
    assert "qcir:" in capsys.readouterr().err


def test_stim_file(tmp_path, capsys):
    path = tmp_path / "bell.stim"
    path.write_text("H 0\nCX 0 1\n")
    assert main(["--stim-path", str(path)]) == 0
    out = capsys.readouterr().out
    assert "# of gate : 2\n" in out
    assert "# of qubit: 2\n" in out


def test_missing_stim_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Could not find Stim file"):
        main(["--stim-path", str(tmp_path / "missing.stim")])


@pytest.mark.parametrize("text, expected", [
    ("ZZ:0.5", ("ZZ", 0.5)),
    ("XI", ("XI", 1.0)),
    ("Y:-2", ("Y", -2.0)),
])
def test_parse_term(text: str, expected):
    assert parse_term(text) == expected


@pytest.mark.parametrize("text", [":1.0", "ZZ:abc"])
def test_parse_term_rejects(text: str):
    with pytest.raises(argparse.ArgumentTypeError):
        parse_term(text)
