"""Command line interface: ``skeptic <command> DOCS...``.

Documents may be given as markdown files or directories, which are searched
recursively for ``*.md`` files.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from .compose import build_test_src
from .config import Settings, get_settings
from .emit import emit_tests
from .errors import SkepticError
from .extract import extract_tests, markdown_files_of_directory
from .json_converter import suite_to_json
from .runner import TestStatus, run_tests
from .types import DocTestSuite

logger = logging.getLogger(__name__)


def _collect_docs(paths: Sequence[str]) -> list[Path]:
    docs: list[Path] = []
    for p in paths:
        path = Path(p)
        if path.is_dir():
            docs.extend(markdown_files_of_directory(path))
        else:
            docs.append(path)
    return docs


def _load_suite(args: argparse.Namespace, settings: Settings) -> DocTestSuite:
    return extract_tests(
        _collect_docs(args.docs),
        language=settings.language,
        template_suffix=settings.template_suffix,
    )


def _cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    suite = _load_suite(args, settings)
    if not len(suite):
        print("no doc tests found")
        return 0
    print(suite.to_dataframe().to_string(index=False))
    return 0


def _cmd_extract(args: argparse.Namespace, settings: Settings) -> int:
    data = suite_to_json(_load_suite(args, settings))
    if args.output:
        Path(args.output).write_text(data + "\n", encoding="utf-8")
    else:
        print(data)
    return 0


def _cmd_compose(args: argparse.Namespace, settings: Settings) -> int:
    suite = _load_suite(args, settings)
    try:
        doc, test = suite.find(args.name)
    except KeyError as e:
        print(f"error: {e.args[0]}", file=sys.stderr)
        return 1
    sys.stdout.write(build_test_src(doc, test, settings.strip_hidden_lines))
    return 0


def _cmd_emit(args: argparse.Namespace, settings: Settings) -> int:
    emitted = emit_tests(
        _load_suite(args, settings),
        args.out_dir or settings.out_dir,
        settings.source_suffix,
        settings.strip_hidden_lines,
        skip_failures=args.keep_going,
    )
    print(f"emitted {len(emitted)} test(s)")
    return 0


def _cmd_run(args: argparse.Namespace, settings: Settings) -> int:
    emitted = emit_tests(
        _load_suite(args, settings),
        args.out_dir or settings.out_dir,
        settings.source_suffix,
        settings.strip_hidden_lines,
        skip_failures=args.keep_going,
    )
    outcomes = run_tests(emitted, settings)
    for outcome in outcomes:
        print(outcome)
        if outcome.status is TestStatus.FAILED and outcome.stderr:
            print(outcome.stderr, file=sys.stderr)

    failed = [o for o in outcomes if o.status is TestStatus.FAILED]
    passed = sum(1 for o in outcomes if o.passed)
    print(
        f"\ntest result: {'FAILED' if failed else 'ok'}. {passed} passed; "
        f"{len(failed)} failed; {len(outcomes) - passed - len(failed)} ignored"
    )
    return 1 if failed else 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="skeptic",
        description="Extract, compose and run the code samples of markdown documents.",
    )
    ap.add_argument("--log-level", help="Override SKEPTIC_LOG_LEVEL")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="List the doc tests found in DOCS")
    p.add_argument("docs", nargs="+", help="Markdown files or directories")
    p.set_defaults(func=_cmd_list)

    p = sub.add_parser("extract", help="Dump the extracted doc tests as JSON")
    p.add_argument("docs", nargs="+", help="Markdown files or directories")
    p.add_argument("-o", "--output", help="Write JSON here instead of stdout")
    p.set_defaults(func=_cmd_extract)

    p = sub.add_parser("compose", help="Print the composed source of one test")
    p.add_argument("name", help="Test name, as shown by 'skeptic list'")
    p.add_argument("docs", nargs="+", help="Markdown files or directories")
    p.set_defaults(func=_cmd_compose)

    for name, func, help_text in (
        ("emit", _cmd_emit, "Write composed test sources and a manifest"),
        ("run", _cmd_run, "Emit, build and run the doc tests"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("docs", nargs="+", help="Markdown files or directories")
        p.add_argument("--out-dir", help="Override SKEPTIC_OUT_DIR")
        p.add_argument(
            "-k",
            "--keep-going",
            action="store_true",
            help="Skip tests whose template cannot be composed",
        )
        p.set_defaults(func=func)

    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
        if args.log_level:
            settings = settings.model_copy(update={"log_level": args.log_level.upper()})
            settings.configure_logging()
        return args.func(args, settings)
    except (SkepticError, OSError, ValidationError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
