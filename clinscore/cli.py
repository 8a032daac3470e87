"""
Command-line interface.

    clinscore list [--tag T]
    clinscore info CALC_ID [--text]
    clinscore run CALC_ID --var key=value ... [--json FILE|-]

Results are printed to stdout as JSON; logs go to stderr. Exit status is 0 on
success, 1 when a calculation fails and 2 on a usage error.
"""
from __future__ import annotations

import argparse
import json
import re
import sys
from typing import Any, Dict, List, Optional

from . import executor, registry
from .config import get_config
from .errors import UnknownCalculatorError
from .logging_setup import get_logger, setup_logging
from .tools import format_calc_info

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

_VALUE_WITH_UNIT = re.compile(r"^\s*([-+]?\d*\.?\d+(?:[eE][-+]?\d+)?)\s+(\S.*?)\s*$")


def _parse_var(text: str) -> tuple[str, Any]:
    """``key=value`` or ``key=value unit`` (e.g. ``creatinine=221 umol/L``)."""
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise ValueError(f"expected key=value, got {text!r}")
    match = _VALUE_WITH_UNIT.match(value)
    if match:
        return key.strip(), {"value": match.group(1), "unit": match.group(2)}
    return key.strip(), value


def _load_json_vars(source: str) -> Dict[str, Any]:
    if source == "-":
        data = json.load(sys.stdin)
    else:
        with open(source, "r", encoding="utf-8") as f:
            data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("JSON input must be an object of variables")
    return data


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clinscore", description="Clinical scoring calculators")
    parser.add_argument("--config", default=None, help="YAML config file (default: clinscore.yaml)")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    parser.add_argument("--strict-ranges", action="store_true",
                        help="Treat advisory range violations as blocking")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List registered calculators")
    p_list.add_argument("--tag", default=None, help="Only calculators carrying this tag")

    p_info = sub.add_parser("info", help="Show a calculator's input schema and tiers")
    p_info.add_argument("calc_id")
    p_info.add_argument("--text", action="store_true", help="Readable text instead of JSON")

    p_run = sub.add_parser("run", help="Run a calculator")
    p_run.add_argument("calc_id")
    p_run.add_argument("--var", action="append", default=[], metavar="KEY=VALUE",
                       help="Input value; repeatable. A trailing unit may follow the number.")
    p_run.add_argument("--json", dest="json_source", default=None, metavar="FILE",
                       help="Read variables from a JSON object file, or '-' for stdin")
    return parser


def _cmd_list(args) -> int:
    calcs = registry.list_calculators(args.tag)
    logger.info("listing %d calculator(s)", len(calcs))
    _emit(calcs)
    return EXIT_OK


def _cmd_info(args) -> int:
    try:
        info = registry.calc_info(args.calc_id)
    except UnknownCalculatorError as exc:
        logger.warning(exc.message)
        _emit({"success": False, "errors": [exc.to_dict()]})
        return EXIT_FAILED
    if args.text:
        print(format_calc_info(info))
    else:
        _emit(info.model_dump())
    return EXIT_OK


def _cmd_run(args, parser: argparse.ArgumentParser, config: Dict[str, Any]) -> int:
    variables: Dict[str, Any] = {}
    try:
        if args.json_source:
            variables.update(_load_json_vars(args.json_source))
        for text in args.var:
            key, value = _parse_var(text)
            variables[key] = value
    except (OSError, ValueError) as exc:
        parser.error(str(exc))

    logger.info("running %s with %d variable(s)", args.calc_id, len(variables))
    response = executor.run(args.calc_id, variables, config)
    _emit(response)
    return EXIT_OK if response["success"] else EXIT_FAILED


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = get_config(args.config)
        setup_logging(args.log_level or config["log_level"], config["log_file"])
    except ValueError as exc:
        parser.error(str(exc))
    if args.strict_ranges:
        config["strict_ranges"] = True
    logger.info("%d calculators registered", len(registry.CALCULATORS))

    if args.command == "list":
        return _cmd_list(args)
    if args.command == "info":
        return _cmd_info(args)
    return _cmd_run(args, parser, config)


if __name__ == "__main__":
    sys.exit(main())
