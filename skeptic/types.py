"""Data structures for the skeptic package."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

import pandas as pd


@dataclass(frozen=True)
class CodeBlockInfo:
    """Flags parsed from the info string of a fenced code block."""

    is_sample: bool = False
    """Whether the block is a code sample in the configured language"""

    should_panic: bool = False
    """Whether the sample is expected to fail when run"""

    ignore: bool = False
    """Whether the sample is skipped entirely"""

    no_run: bool = False
    """Whether the sample is only built, never run"""

    is_old_template: bool = False
    """Whether the block is the document-wide ``skeptic-template``"""

    template: Optional[str] = None
    """Tag of the named template from an ``skt-<tag>`` annotation"""


@dataclass(frozen=True)
class Test:
    """
    A code sample extracted from a document.

    The name is derived from the document's file stem, the section the
    sample appears in and the line of its first code line, which makes it
    unique within the document.

    Immutable - consumed once when its source is composed.
    """

    __test__ = False

    name: str
    """Identifier of the test"""

    text: tuple[str, ...]
    """Code lines, each including its line terminator"""

    ignore: bool = False
    """Skip this test"""

    no_run: bool = False
    """Build but do not run this test"""

    should_panic: bool = False
    """Running this test must fail"""

    template: Optional[str] = None
    """Tag of the named template wrapping this test, if any"""

    line: int = 0
    """0-based line of the first code line in the document"""

    section: Optional[str] = None
    """Sanitized heading the sample appeared under, if any"""


@dataclass(frozen=True)
class DocTest:
    """All tests and templates found in one document."""

    path: Path
    """Path of the source document"""

    tests: tuple[Test, ...] = ()
    """Tests in document order"""

    old_template: Optional[str] = None
    """Document-wide default template from a ``skeptic-template`` block"""

    templates: dict[str, str] = field(default_factory=dict)
    """Named templates loaded from the companion template document"""

    def __len__(self) -> int:
        """Return the number of tests in the document."""
        return len(self.tests)


@dataclass(frozen=True)
class DocTestSuite:
    """
    The doc tests of every processed document.

    This is the hand-off point between extraction and emission. It performs
    no processing of its own beyond lookup and reporting.

    Example:
        >>> suite = skeptic.extract_tests(["README.md"])
        >>> for doc, test in suite.iter_tests():
        ...     print(doc.path, test.name)
        >>> suite.to_dataframe()[["name", "ignore"]]
    """

    doc_tests: tuple[DocTest, ...] = ()

    def __len__(self) -> int:
        """Return the total number of tests across all documents."""
        return sum(len(doc) for doc in self.doc_tests)

    def iter_tests(self) -> Iterator[tuple[DocTest, Test]]:
        """Yield every test together with the document that owns it."""
        for doc in self.doc_tests:
            for test in doc.tests:
                yield doc, test

    def find(self, name: str) -> tuple[DocTest, Test]:
        """
        Look up a test by name.

        Args:
            name: Test name as produced by extraction

        Returns:
            The owning document and the test

        Raises:
            KeyError: If no test has that name
        """
        for doc, test in self.iter_tests():
            if test.name == name:
                return doc, test
        raise KeyError(f"No test named '{name}'")

    def to_dataframe(self) -> pd.DataFrame:
        """
        Tabulate every test of the suite, one row per test.

        Returns:
            DataFrame with columns document, name, line, section, ignore,
            no_run, should_panic and template
        """
        columns = [
            "document",
            "name",
            "line",
            "section",
            "ignore",
            "no_run",
            "should_panic",
            "template",
        ]
        rows = [
            {
                "document": str(doc.path),
                "name": test.name,
                "line": test.line,
                "section": test.section,
                "ignore": test.ignore,
                "no_run": test.no_run,
                "should_panic": test.should_panic,
                "template": test.template,
            }
            for doc, test in self.iter_tests()
        ]
        return pd.DataFrame(rows, columns=columns)
