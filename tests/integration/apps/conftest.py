from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

REPO_ROOT = Path(__file__).resolve().parents[3]


@pytest.fixture(autouse=True)
def _run_from_repo_root(monkeypatch) -> None:
    monkeypatch.chdir(REPO_ROOT)


@pytest.fixture
def parse_printed_config():
    def _parse(text: str) -> dict[str, Any]:
        return json.loads(text)

    return _parse


@pytest.fixture
def run_help(capsys):
    def _run(mod, expected: str) -> None:
        with pytest.raises(SystemExit) as exc:
            mod.main(["--help"])
        assert exc.value.code == 0
        assert expected in capsys.readouterr().out

    return _run


@pytest.fixture
def run_print_config(capsys, parse_printed_config):
    def _run(mod, *argv: str) -> dict[str, Any]:
        mod.main([*argv, "--print-config"])
        return parse_printed_config(capsys.readouterr().out)

    return _run
