from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from lark.exceptions import LarkError

from .config import DEFAULT_MAX_DEPTH, MAX_DEPTH_ENV, BuildOptions
from .errors import AstBuildError
from .parser import parse_program
from .printer import format_program, node_to_dict

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="exprlang", description="Parse an exprlang source file and print its AST")
    p.add_argument("file", type=Path, help="Path to the source file")
    p.add_argument("--json", action="store_true", help="Emit the AST as JSON instead of the indented listing")
    p.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help=f"Maximum expression nesting depth (default: ${MAX_DEPTH_ENV} or {DEFAULT_MAX_DEPTH})",
    )
    p.add_argument("-v", "--verbose", action="count", default=0, help="Log more (-v info, -vv debug)")
    return p


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    p = _build_parser()
    args = p.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.max_depth is not None:
            options = BuildOptions(max_depth=args.max_depth)
        else:
            options = BuildOptions.from_env()
    except ValueError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    path: Path = args.file
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        print(f"error: cannot read {path}: {err}", file=sys.stderr)
        return 1

    logger.info("parsing %s (%d characters, max depth %d)", path, len(source), options.max_depth)
    try:
        program = parse_program(source, options)
    except LarkError as err:
        print(f"error: {path}: syntax error: {err}", file=sys.stderr)
        return 1
    except AstBuildError as err:
        sep = ":" if err.span is not None else ": "
        print(f"error: {path}{sep}{err}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(node_to_dict(program), indent=2))
    else:
        print(format_program(program))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
