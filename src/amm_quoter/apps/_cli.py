"""Flags and output helpers shared by the quoting entrypoints."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from amm_quoter.cli.logging import parse_module_level


def add_print_config_arg(parser) -> None:
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print the merged config as JSON and exit without quoting.",
    )


def add_dry_run_arg(parser) -> None:
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build the request and log it, but do not load markets or quote.",
    )


def collect_logging_overrides(args) -> dict[str, Any]:
    """Map parsed ``--log-*`` flags onto the ``logging`` config block."""
    overrides: dict[str, Any] = {}
    if getattr(args, "log_level", None):
        overrides["level"] = args.log_level
    if getattr(args, "log_file", None):
        overrides["file"] = args.log_file
    if getattr(args, "log_color", None) is not None:
        overrides["color"] = args.log_color
    module_levels = getattr(args, "log_module_levels", None)
    if module_levels:
        overrides["module_levels"] = dict(
            parse_module_level(item) for item in module_levels
        )
    return overrides


def _jsonable(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, Mapping):
        return {str(k): _jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [_jsonable(v) for v in obj]
    return obj


def dump_json(obj: Any) -> str:
    """Deterministic, indented JSON for configs and dry-run plans."""
    return json.dumps(_jsonable(obj), indent=2, sort_keys=True)


def print_config(config: Mapping[str, Any]) -> None:
    print(dump_json(config))


def log_dry_run(logger, plan: Mapping[str, Any]) -> None:
    logger.info("DRY RUN: no quote was computed.")
    logger.info("DRY RUN plan:\n%s", dump_json(plan))
