"""CLI tool to compile metric declaration blocks into Python modules.

    metricgen metrics.decl -o app/metrics_generated.py
    metricgen --check metrics.decl
    cat metrics.decl | metricgen -

Exit codes: 0 success, 1 compile error or unreadable input, 2 usage error.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from metricgen.compiler import compile_source
from metricgen.config.env_config import EnvConfig, get_log_level
from metricgen.errors import MetricgenError, format_error
from metricgen.version import get_version

logger = logging.getLogger("metricgen.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metricgen",
        description="Compile a metric declaration block into Python accessor functions.",
    )
    parser.add_argument("path", help="Path to the declaration file, or '-' for stdin")
    parser.add_argument(
        "-o",
        "--output",
        dest="output",
        default=None,
        help="Write generated module here (default: stdout)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only validate the declarations; print nothing on success",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        help="Logging level (default: METRICGEN_LOG_LEVEL or WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def _write_output(path: str, text: str) -> None:
    out_dir = os.path.dirname(os.path.abspath(path))
    os.makedirs(out_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    EnvConfig.clear_cache()
    args = build_parser().parse_args(argv)

    level = (args.log_level or get_log_level()).upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format="%(levelname)s %(name)s: %(message)s")

    display_path = "<stdin>" if args.path == "-" else args.path
    try:
        source = _read_input(args.path)
    except (OSError, UnicodeDecodeError) as e:
        print(f"{display_path}: cannot read input: {e}", file=sys.stderr)
        return 1

    try:
        generated = compile_source(source)
    except MetricgenError as e:
        print(format_error(e, display_path), file=sys.stderr)
        logger.debug("compile failed", exc_info=True)
        return 1

    if args.check:
        logger.info("%s: ok", display_path)
        return 0

    if args.output:
        _write_output(args.output, generated)
        logger.info("Wrote %s (%s bytes)", args.output, len(generated))
    else:
        sys.stdout.write(generated)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
