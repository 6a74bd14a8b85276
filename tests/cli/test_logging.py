from __future__ import annotations

import logging

import pytest

from amm_quoter.cli import logging as log_cli
from amm_quoter.utils import logging_config


def test_normalize_logging_config_defaults() -> None:
    assert log_cli._normalize_logging_config(None) == log_cli.DEFAULT_LOGGING


def test_normalize_logging_config_overrides() -> None:
    normalized = log_cli._normalize_logging_config(
        {"level": "DEBUG", "format": "%(message)s", "file": "quote.log", "color": False}
    )
    assert normalized["level"] == "DEBUG"
    assert normalized["format"] == "%(message)s"
    assert normalized["file"] == "quote.log"
    assert normalized["color"] is False


def test_normalize_logging_config_ignores_none_values() -> None:
    normalized = log_cli._normalize_logging_config({"level": None})
    assert normalized["level"] == log_cli.DEFAULT_LOGGING["level"]


def test_normalize_logging_config_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError, match="colored"):
        log_cli._normalize_logging_config({"colored": False})


def test_setup_logging_from_config_uses_normalized(monkeypatch) -> None:
    captured: dict[str, object] = {}

    def _setup_logging(level, *, fmt_console, log_file, module_levels, colored):
        captured.update(
            level=level,
            fmt_console=fmt_console,
            log_file=log_file,
            module_levels=module_levels,
            colored=colored,
        )

    monkeypatch.setattr(log_cli, "setup_logging", _setup_logging)
    log_cli.setup_logging_from_config(
        {"level": "WARNING", "module_levels": {"amm_quoter.quoter": "DEBUG"}}
    )

    assert captured == {
        "level": "WARNING",
        "fmt_console": log_cli.DEFAULT_LOGGING["format"],
        "log_file": None,
        "module_levels": {"amm_quoter.quoter": "DEBUG"},
        "colored": True,
    }


@pytest.mark.parametrize(
    ("value", "expected"),
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), (logging.ERROR, logging.ERROR)],
)
def test_coerce_level(value, expected) -> None:
    assert logging_config.coerce_level(value) == expected


def test_parse_module_level() -> None:
    assert log_cli.parse_module_level(" amm_quoter.quoter = DEBUG ") == (
        "amm_quoter.quoter",
        "DEBUG",
    )
    for bad in ("amm_quoter.quoter", "=DEBUG", "amm_quoter.quoter="):
        with pytest.raises(ValueError, match="LOGGER=LEVEL"):
            log_cli.parse_module_level(bad)
