"""Tests for the external formatter hook."""

import subprocess

import pytest

from cpp2ts import constants
from cpp2ts.errors import FormatterError
from cpp2ts.formatter import NullFormatter, PrettierFormatter


class TestNullFormatter:
    def test_identity(self):
        assert NullFormatter().format("let x = 1") == "let x = 1"


class TestPrettierFormatter:
    def test_runs_prettier_with_fixed_options(self, monkeypatch):
        calls = []

        def fake_run(argv, **kwargs):
            calls.append((argv, kwargs["input"]))
            return subprocess.CompletedProcess(argv, 0, stdout="let x = 1\n", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)
        assert PrettierFormatter().format("let x  =  1") == "let x = 1\n"
        argv, stdin = calls[0]
        assert argv == [*constants.PRETTIER_COMMAND, *constants.PRETTIER_OPTIONS]
        assert "--no-semi" in argv
        assert stdin == "let x  =  1"

    def test_nonzero_exit_raises(self, monkeypatch):
        def fake_run(argv, **kwargs):
            return subprocess.CompletedProcess(argv, 2, stdout="", stderr="SyntaxError")

        monkeypatch.setattr(subprocess, "run", fake_run)
        with pytest.raises(FormatterError, match="SyntaxError"):
            PrettierFormatter().format("let (")

    def test_missing_binary_raises(self):
        formatter = PrettierFormatter(command=("cpp2ts-no-such-binary",), options=())
        with pytest.raises(FormatterError):
            formatter.format("let x = 1")
