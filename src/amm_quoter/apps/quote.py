#!/usr/bin/env python
"""Quote an options-AMM trade from a markets fixture file."""

from __future__ import annotations

import argparse
import logging
from enum import IntEnum
from typing import Any

from amm_quoter.apps._cli import (
    add_dry_run_arg,
    add_print_config_arg,
    collect_logging_overrides,
    log_dry_run,
    print_config,
)
from amm_quoter.cli import (
    DEFAULT_LOGGING,
    add_config_arg,
    add_logging_args,
    build_config,
    load_yaml_config,
    resolve_path,
    setup_logging_from_config,
)
from amm_quoter.errors import QuoteRejection
from amm_quoter.fixed_point import from_fixed, to_fixed
from amm_quoter.quoter import Quoter
from amm_quoter.registry import registry_from_config
from amm_quoter.reporting import (
    full_quote_frame,
    is_cost_curve_non_decreasing,
    iterations_frame,
    option_types_frame,
)
from amm_quoter.types import OptionType, TradeDirection, TradeRequest

MODES = ("quote", "full", "types")
REJECTION_EXIT_CODE = 2

DEFAULT_CONFIG: dict[str, Any] = {
    "logging": DEFAULT_LOGGING,
    "dry_run": False,
    "markets_file": "config/markets.yml",
    "mode": "quote",
    "request": {
        "market": None,
        "strike_id": None,
        "option_type": "LONG_CALL",
        "direction": "OPEN",
        "amount": "1",
        "iterations": 1,
        "force_close": False,
    },
}


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Quote premium and fees for an options-AMM trade."
    )
    add_config_arg(parser)
    add_logging_args(parser)
    add_print_config_arg(parser)
    add_dry_run_arg(parser)

    parser.add_argument("--markets-file", type=str, default=None)
    parser.add_argument("--mode", choices=MODES, default=None)
    parser.add_argument("--market", type=str, default=None)
    parser.add_argument("--strike-id", type=int, default=None)
    parser.add_argument(
        "--option-type",
        type=str,
        default=None,
        help="Option type name (e.g. LONG_CALL) or code 0-4.",
    )
    parser.add_argument(
        "--direction",
        type=str,
        default=None,
        help="OPEN/CLOSE or code 0-1.",
    )
    parser.add_argument("--amount", type=str, default=None, help="Decimal amount.")
    parser.add_argument("--iterations", type=int, default=None)
    parser.add_argument(
        "--force-close",
        dest="force_close",
        action="store_true",
        help="Quote a forced close.",
    )
    parser.add_argument(
        "--no-force-close",
        dest="force_close",
        action="store_false",
        help="Quote a regular trade.",
    )
    parser.set_defaults(force_close=None)
    return parser.parse_args(argv)


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    request: dict[str, Any] = {}

    if args.markets_file is not None:
        overrides["markets_file"] = args.markets_file
    if args.mode is not None:
        overrides["mode"] = args.mode
    if args.market is not None:
        request["market"] = args.market
    if args.strike_id is not None:
        request["strike_id"] = args.strike_id
    if args.option_type is not None:
        request["option_type"] = args.option_type
    if args.direction is not None:
        request["direction"] = args.direction
    if args.amount is not None:
        request["amount"] = args.amount
    if args.iterations is not None:
        request["iterations"] = args.iterations
    if args.force_close is not None:
        request["force_close"] = args.force_close
    if request:
        overrides["request"] = request
    if args.dry_run:
        overrides["dry_run"] = True

    logging_overrides = collect_logging_overrides(args)
    if logging_overrides:
        overrides["logging"] = logging_overrides

    return overrides


def parse_code(value: Any, enum_cls: type[IntEnum]) -> int:
    """Map an enum name or numeric code to an int code.

    Unknown numeric codes pass through so the quoter can reject them with the
    exchange's reason.
    """
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.lstrip("-").isdigit():
        return int(text)
    try:
        return enum_cls[text.upper()]
    except KeyError as exc:
        names = ", ".join(enum_cls.__members__)
        raise ValueError(f"unknown {enum_cls.__name__} {value!r}; expected one of {names}") from exc


def build_request(cfg: dict[str, Any]) -> TradeRequest:
    if not cfg.get("market"):
        raise ValueError("request.market must be set.")
    if cfg.get("strike_id") is None:
        raise ValueError("request.strike_id must be set.")
    return TradeRequest(
        market_id=str(cfg["market"]),
        strike_id=int(cfg["strike_id"]),
        option_type=parse_code(cfg["option_type"], OptionType),
        direction=parse_code(cfg["direction"], TradeDirection),
        amount=to_fixed(cfg["amount"]),
        iterations=int(cfg["iterations"]),
        is_force_close=bool(cfg.get("force_close", False)),
    )


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    config = build_config(DEFAULT_CONFIG, args.config, _build_overrides(args))
    if args.print_config:
        print_config(config)
        return

    setup_logging_from_config(config.get("logging"))
    logger = logging.getLogger(__name__)

    mode = config.get("mode", "quote")
    if mode not in MODES:
        raise ValueError(f"mode must be one of {MODES}, got {mode!r}")

    markets_file = resolve_path(config.get("markets_file"))
    if markets_file is None:
        raise ValueError("markets_file must be set.")
    request = build_request(config["request"])

    logger.info("Markets file: %s", markets_file)
    logger.info("Mode:         %s", mode)
    logger.info(
        "Request:      market=%s strike=%s type=%s direction=%s amount=%s iterations=%s force_close=%s",
        request.market_id,
        request.strike_id,
        request.option_type,
        request.direction,
        from_fixed(request.amount),
        request.iterations,
        request.is_force_close,
    )

    if config.get("dry_run"):
        log_dry_run(
            logger,
            {
                "action": "quote",
                "mode": mode,
                "markets_file": markets_file,
                "request": config["request"],
            },
        )
        return

    markets = load_yaml_config(markets_file).get("markets")
    quoter = Quoter(registry=registry_from_config(markets))

    try:
        if mode == "quote":
            result = quoter.quote(request)
            print(iterations_frame(result).to_string())
            logger.info(
                "Total premium: %s  Total fee: %s",
                from_fixed(result.total_premium),
                from_fixed(result.total_fee),
            )
        elif mode == "full":
            frame = full_quote_frame(quoter.full_quotes(request))
            print(frame.to_string())
            logger.info(
                "Per-unit cost non-decreasing: %s",
                is_cost_curve_non_decreasing(frame),
            )
        else:
            print(option_types_frame(quoter.quote_option_types(request)).to_string())
    except QuoteRejection as exc:
        logger.error("Rejected: %s", exc.reason)
        raise SystemExit(REJECTION_EXIT_CODE) from exc


if __name__ == "__main__":
    main()
