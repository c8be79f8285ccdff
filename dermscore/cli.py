#!/usr/bin/env python3
"""
Command-line access to the instrument registry.

Usage:
    dermscore list
    dermscore list --condition psoriasis --search nail
    dermscore info pasi
    dermscore --json defaults easi
    dermscore compute dlqi --set q1=3 --set q2=2
    dermscore compute dlqi --set q1=3 --json
    dermscore compute scorten --values '{"age_ge40": true, "bsa_gt10": true}'
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from .registry import REGISTRY, InstrumentNotFound
from .tools import ToolHandler, format_instrument_info

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_NOT_FOUND = 2


def parse_assignment(text: str) -> tuple:
    """Split ``key=value``; the value is read as JSON when it parses, else kept as text."""
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected key=value, got {text!r}")
    key, raw = text.split("=", 1)
    try:
        value: Any = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key.strip(), value


def collect_values(args: argparse.Namespace) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    if args.values:
        loaded = json.loads(args.values)
        if not isinstance(loaded, dict):
            raise ValueError("--values must be a JSON object")
        values.update(loaded)
    for key, value in args.set or []:
        values[key] = value
    return values


def emit(payload: Any, as_json: bool, text: str) -> None:
    if as_json:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print(text)


def cmd_list(args: argparse.Namespace, handler: ToolHandler) -> int:
    rows = handler.list_instruments(args.search or "", args.condition)
    text = "\n".join(f"{r['id']:<24} {r['title']}  [{r['condition']}]" for r in rows) or "No instruments matched."
    emit(rows, args.json, text)
    return EXIT_OK


def cmd_info(args: argparse.Namespace, handler: ToolHandler) -> int:
    info = handler.instrument_info(args.instrument_id)
    emit(info.model_dump(mode="json"), args.json, format_instrument_info(info))
    return EXIT_OK


def cmd_defaults(args: argparse.Namespace, handler: ToolHandler) -> int:
    info = handler.instrument_info(args.instrument_id)
    defaults = info.defaults
    emit(defaults, args.json, "\n".join(f"{k}={v!r}" for k, v in defaults.items()))
    return EXIT_OK


def cmd_compute(args: argparse.Namespace, handler: ToolHandler) -> int:
    values = collect_values(args)
    outcome = handler.execute(args.instrument_id, values)
    for warning in outcome.warnings:
        logger.warning(warning)
    if not outcome.success:
        if args.json:
            emit(outcome.model_dump(mode="json"), True, "")
        else:
            for err in outcome.errors:
                print(f"error: {err}", file=sys.stderr)
        return EXIT_NOT_FOUND if REGISTRY.resolve_id(outcome.instrument_id) is None else EXIT_INVALID

    result = outcome.result
    lines = [f"Score: {result.score}", "", result.interpretation]
    if result.details:
        lines.append("")
        lines.extend(f"  {k}: {v}" for k, v in result.details.items())
    emit(outcome.model_dump(mode="json"), args.json, "\n".join(lines))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dermscore", description="Dermatology scoring instruments")
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON")
    parser.add_argument("--log-level", default=os.environ.get("DERMSCORE_LOG_LEVEL", "WARNING"),
                        help="Logging level (default: $DERMSCORE_LOG_LEVEL or WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    # --json is accepted after the sub-command too; when omitted there the global value stands.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", default=argparse.SUPPRESS, help="Print machine-readable JSON")

    p_list = sub.add_parser("list", parents=[common], help="List instruments")
    p_list.add_argument("--condition", default=None, help="Only instruments whose condition contains this text")
    p_list.add_argument("--search", default=None, help="Free-text filter on id, name, keywords")
    p_list.set_defaults(func=cmd_list)

    p_info = sub.add_parser("info", parents=[common], help="Show an instrument's fields")
    p_info.add_argument("instrument_id")
    p_info.set_defaults(func=cmd_info)

    p_defaults = sub.add_parser("defaults", parents=[common], help="Show an instrument's default values")
    p_defaults.add_argument("instrument_id")
    p_defaults.set_defaults(func=cmd_defaults)

    p_compute = sub.add_parser("compute", parents=[common], help="Score an instrument")
    p_compute.add_argument("instrument_id")
    p_compute.add_argument("--values", default=None, help="JSON object of field values")
    p_compute.add_argument("--set", action="append", type=parse_assignment, metavar="KEY=VALUE",
                           help="Set one field value (repeatable)")
    p_compute.set_defaults(func=cmd_compute)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    handler = ToolHandler()
    try:
        return args.func(args, handler)
    except InstrumentNotFound as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
