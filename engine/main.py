"""Command line entry point: compile, run or package a single Java source."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from common.config import load_settings
from common.logging import configure_logging, get_logger

from .java_engine import JavaEngine
from .language import JAVA_LANGUAGE

LOGGER = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="loosejava", description="Build and run loose Java sources")
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--debug", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    compile_cmd = sub.add_parser("compile", help="Compile a .java file or pom.xml")
    compile_cmd.add_argument("source", type=Path)

    run_cmd = sub.add_parser("run", help="Compile and run the main class")
    run_cmd.add_argument("source", type=Path)
    run_cmd.add_argument("args", nargs=argparse.REMAINDER)

    jar_cmd = sub.add_parser("jar", help="Package the build product into a jar")
    jar_cmd.add_argument("source", type=Path)
    jar_cmd.add_argument("--output", "-o", type=Path, required=True)
    jar_cmd.add_argument("--sources", action="store_true", help="Include sources and pom.xml")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, debug=args.debug)
    if not JAVA_LANGUAGE.handles(args.source):
        LOGGER.error("Unsupported source %s", args.source)
        return 2
    settings = load_settings()
    if args.verbose or args.debug:
        settings = settings.with_overrides(verbose=settings.verbose or args.verbose, debug=settings.debug or args.debug)
    engine = JavaEngine(settings, error_writer=sys.stderr)

    if args.command == "compile":
        result = engine.compile(args.source)
        if result is None:
            return 1
        print(result.main_class)
        return 0
    if args.command == "run":
        code = engine.eval(args.source, args.args)
        return 1 if code is None else code
    target = engine.make_jar(args.source, args.sources, args.output)
    if target is None:
        return 1
    print(target)
    return 0


if __name__ == "__main__":
    sys.exit(main())
