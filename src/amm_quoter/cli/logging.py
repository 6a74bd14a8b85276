"""Logging section of the CLI config: defaults, flags and setup."""

from __future__ import annotations

from typing import Any, Mapping

from amm_quoter.utils.logging_config import setup_logging

DEFAULT_LOGGING: dict[str, Any] = {
    "level": "INFO",
    "format": "%(asctime)s %(levelname)s %(shortname)s - %(message)s",
    "file": None,
    "color": True,
    "module_levels": {},
}


def parse_module_level(text: str) -> tuple[str, str]:
    """Split ``amm_quoter.quoter=DEBUG`` into logger name and level."""
    name, sep, level = text.partition("=")
    if not sep or not name.strip() or not level.strip():
        raise ValueError(f"expected LOGGER=LEVEL, got {text!r}")
    return name.strip(), level.strip()


def add_logging_args(parser) -> None:
    group = parser.add_argument_group("logging")
    group.add_argument("--log-level", default=None, help="Root level, e.g. DEBUG.")
    group.add_argument("--log-file", default=None, help="Also write logs to this file.")
    group.add_argument(
        "--log-module-level",
        dest="log_module_levels",
        action="append",
        default=None,
        metavar="LOGGER=LEVEL",
        help="Per-logger level, e.g. amm_quoter.quoter=DEBUG. Repeatable.",
    )
    group.add_argument(
        "--color",
        dest="log_color",
        action="store_true",
        help="Color level names on the console.",
    )
    group.add_argument(
        "--no-color",
        dest="log_color",
        action="store_false",
        help="Plain console output.",
    )
    parser.set_defaults(log_color=None)


def _normalize_logging_config(config: Mapping[str, Any] | None) -> dict[str, Any]:
    merged = dict(DEFAULT_LOGGING)
    for key, value in (config or {}).items():
        if key not in DEFAULT_LOGGING:
            raise ValueError(f"Unknown logging option: {key!r}")
        if value is not None:
            merged[key] = value
    return merged


def setup_logging_from_config(config: Mapping[str, Any] | None) -> None:
    log_cfg = _normalize_logging_config(config)
    setup_logging(
        log_cfg["level"],
        fmt_console=log_cfg["format"],
        log_file=log_cfg["file"],
        module_levels=log_cfg["module_levels"],
        colored=log_cfg["color"],
    )
