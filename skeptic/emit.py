"""Emission of composed doc test sources."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .compose import build_test_src
from .errors import ErrorCode, SkepticError
from .json_converter import converter, register_record
from .types import DocTestSuite

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


@dataclass(frozen=True)
class EmittedTest:
    """A test whose composed source has been written to disk."""

    name: str
    """Test name"""

    document: Path
    """Document the test was extracted from"""

    source: Path
    """File holding the composed source"""

    line: int = 0
    """0-based line of the sample in its document"""

    ignore: bool = False
    no_run: bool = False
    should_panic: bool = False


@dataclass(frozen=True)
class Manifest:
    """Index of the emitted tests of a suite, written next to the sources."""

    tests: tuple[EmittedTest, ...] = ()
    skipped: tuple[str, ...] = ()


register_record(EmittedTest, {"name", "document", "source"})
register_record(Manifest, {"tests"})


def write_if_contents_changed(path: Path, contents: str) -> bool:
    """
    Write a file unless it already holds exactly ``contents``.

    Leaving unchanged files alone keeps their modification time, so build
    tools do not redo work for tests that did not change.

    Returns:
        True if the file was written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        if path.read_text(encoding="utf-8") == contents:
            return False
    except FileNotFoundError:
        pass
    path.write_text(contents, encoding="utf-8")
    return True


def emit_tests(
    suite: DocTestSuite,
    out_dir: Union[str, Path],
    source_suffix: str = ".rs",
    strip_hidden: bool = True,
    skip_failures: bool = False,
) -> list[EmittedTest]:
    """
    Compose every test of a suite and write one source file per test.

    Alongside the sources a ``manifest.json`` lists what was emitted.

    Args:
        suite: Extracted doc tests
        out_dir: Directory receiving the sources
        source_suffix: File suffix of the sources
        strip_hidden: Remove the ``# `` marker of hidden lines
        skip_failures: Log and skip tests whose template cannot be composed
            instead of raising

    Returns:
        The emitted tests in suite order

    Raises:
        MalformedTemplateError: If a template is malformed and skip_failures is False
        UnresolvedTemplateError: If a template is missing and skip_failures is False
        SkepticError: If two tests share a name
    """
    out_dir = Path(out_dir)
    emitted: list[EmittedTest] = []
    skipped: list[str] = []
    seen: dict[str, Path] = {}
    written = 0

    for doc, test in suite.iter_tests():
        if test.name in seen:
            raise SkepticError(
                f"test {test.name} from {doc.path} clashes with a test from {seen[test.name]}",
                ErrorCode.DUPLICATE_TEST_NAME,
            )
        seen[test.name] = doc.path

        try:
            src = build_test_src(doc, test, strip_hidden)
        except SkepticError as e:
            if not skip_failures:
                raise
            logger.error("Skipping %s (%s line %d): %s", test.name, doc.path, test.line, e)
            skipped.append(test.name)
            continue

        source = out_dir / f"{test.name}{source_suffix}"
        if write_if_contents_changed(source, src):
            written += 1
        emitted.append(
            EmittedTest(
                name=test.name,
                document=doc.path,
                source=source,
                line=test.line,
                ignore=test.ignore,
                no_run=test.no_run,
                should_panic=test.should_panic,
            )
        )

    manifest = Manifest(tests=tuple(emitted), skipped=tuple(skipped))
    write_if_contents_changed(
        out_dir / MANIFEST_NAME,
        json.dumps(converter.unstructure(manifest), indent=2) + "\n",
    )

    logger.info(
        "Emitted %d test(s) to %s (%d rewritten, %d skipped)",
        len(emitted),
        out_dir,
        written,
        len(skipped),
    )
    return emitted


def load_manifest(out_dir: Union[str, Path]) -> Manifest:
    """Read the manifest written by :func:`emit_tests`."""
    data = (Path(out_dir) / MANIFEST_NAME).read_text(encoding="utf-8")
    return converter.structure(json.loads(data), Manifest)
