"""Extraction of doc tests from markdown documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union

from .annotations import DEFAULT_LANGUAGE, parse_code_block_info
from .markdown import CodeBlockEnd, CodeBlockStart, HeadingEnd, HeadingStart, Text, parse_events
from .names import sanitize_test_name
from .types import CodeBlockInfo, DocTest, DocTestSuite, Test

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".skt.md"

# Headings at this level and deeper do not start a new section
SECTION_HEADING_LEVEL = 3


@dataclass
class _Empty:
    pass


@dataclass
class _Heading:
    text: str = ""


@dataclass
class _Code:
    info: CodeBlockInfo
    start_line: int
    lines: list[str] = field(default_factory=list)


_Buffer = Union[_Empty, _Heading, _Code]


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset)


def _test_name(file_stem: str, section: Optional[str], line: int) -> str:
    if section:
        return f"{file_stem}_sect_{section}_line_{line}"
    return f"{file_stem}_line_{line}"


def extract_tests_from_string(
    s: str,
    file_stem: str,
    language: str = DEFAULT_LANGUAGE,
) -> tuple[list[Test], Optional[str]]:
    """
    Extract the tests and the default template of one document.

    Tests are named after the sanitized file stem, the most recent level 1
    or 2 heading and the 0-based line of the sample's first code line, e.g.
    ``readme_sect_usage_line_12``.

    Args:
        s: Markdown text of the document
        file_stem: Stem of the document's file name (sanitized here)
        language: Language token marking code samples

    Returns:
        The tests in document order and the ``skeptic-template`` text, if any
    """
    file_stem = sanitize_test_name(file_stem)
    tests: list[Test] = []
    old_template: Optional[str] = None
    section: Optional[str] = None
    buffer: _Buffer = _Empty()

    for event in parse_events(s):
        if isinstance(event, HeadingStart):
            if event.level < SECTION_HEADING_LEVEL:
                buffer = _Heading()
        elif isinstance(event, HeadingEnd):
            if event.level < SECTION_HEADING_LEVEL and isinstance(buffer, _Heading):
                section = sanitize_test_name(buffer.text) or None
                buffer = _Empty()
        elif isinstance(event, CodeBlockStart):
            info = parse_code_block_info(event.info, language)
            if info.is_sample:
                # an empty block keeps the line after its opening fence
                buffer = _Code(info, _line_of(s, event.offset) + 1)
        elif isinstance(event, Text):
            if isinstance(buffer, _Code):
                if not buffer.lines:
                    buffer.start_line = _line_of(s, event.offset)
                buffer.lines.append(event.text)
            elif isinstance(buffer, _Heading):
                buffer.text += event.text
        elif isinstance(event, CodeBlockEnd):
            if not isinstance(buffer, _Code):
                continue
            code, buffer = buffer, _Empty()
            if code.info.is_old_template:
                old_template = "".join(code.lines)
                continue
            tests.append(
                Test(
                    name=_test_name(file_stem, section, code.start_line),
                    text=tuple(code.lines),
                    ignore=code.info.ignore,
                    no_run=code.info.no_run,
                    should_panic=code.info.should_panic,
                    template=code.info.template,
                    line=code.start_line,
                    section=section,
                )
            )

    return tests, old_template


def load_templates_from_string(s: str, language: str = DEFAULT_LANGUAGE) -> dict[str, str]:
    """
    Collect the named templates of a template document.

    Every code sample annotated ``skt-<tag>`` registers its text under
    ``<tag>``. A later block with the same tag replaces an earlier one.
    """
    templates: dict[str, str] = {}
    info: Optional[CodeBlockInfo] = None
    lines: list[str] = []

    for event in parse_events(s):
        if isinstance(event, CodeBlockStart):
            block_info = parse_code_block_info(event.info, language)
            if block_info.is_sample:
                info = block_info
                lines = []
        elif isinstance(event, Text):
            if info is not None:
                lines.append(event.text)
        elif isinstance(event, CodeBlockEnd):
            if info is not None and info.template is not None:
                templates[info.template] = "".join(lines)
            info = None

    return templates


def template_path_for(path: Union[str, Path], template_suffix: str = TEMPLATE_SUFFIX) -> Path:
    """Return the companion template document of ``path`` (``README.md.skt.md``)."""
    return Path(f"{path}{template_suffix}")


def load_templates(
    path: Union[str, Path],
    language: str = DEFAULT_LANGUAGE,
    template_suffix: str = TEMPLATE_SUFFIX,
) -> dict[str, str]:
    """
    Load the named templates of a document from its companion file.

    A missing companion file is not an error and yields no templates.
    """
    companion = template_path_for(path, template_suffix)
    if not companion.exists():
        return {}
    templates = load_templates_from_string(companion.read_text(encoding="utf-8"), language)
    logger.debug("Loaded %d template(s) from %s", len(templates), companion)
    return templates


def extract_doc_test(
    path: Union[str, Path],
    language: str = DEFAULT_LANGUAGE,
    template_suffix: str = TEMPLATE_SUFFIX,
) -> DocTest:
    """
    Extract the doc tests of a single markdown file.

    Args:
        path: Path to the markdown document
        language: Language token marking code samples
        template_suffix: Suffix appended to ``path`` to find named templates

    Returns:
        The document record

    Raises:
        FileNotFoundError: If the document does not exist
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    tests, old_template = extract_tests_from_string(text, path.stem, language)
    templates = load_templates(path, language, template_suffix)
    logger.debug("Extracted %d test(s) from %s", len(tests), path)
    return DocTest(
        path=path,
        tests=tuple(tests),
        old_template=old_template,
        templates=templates,
    )


def extract_tests(
    docs: Iterable[Union[str, Path]],
    language: str = DEFAULT_LANGUAGE,
    template_suffix: str = TEMPLATE_SUFFIX,
) -> DocTestSuite:
    """
    Extract the doc tests of several documents.

    Companion template documents given in ``docs`` are skipped, they are
    read alongside the document they belong to.

    Example:
        >>> suite = extract_tests(["README.md", *markdown_files_of_directory("book")])
        >>> print(f"{len(suite)} tests")
    """
    doc_tests = [
        extract_doc_test(doc, language, template_suffix)
        for doc in docs
        if not str(doc).endswith(template_suffix)
    ]
    suite = DocTestSuite(doc_tests=tuple(doc_tests))
    logger.info("Extracted %d test(s) from %d document(s)", len(suite), len(doc_tests))
    return suite


def markdown_files_of_directory(dir: Union[str, Path]) -> list[Path]:
    """
    List the markdown files below a directory, recursively.

    The ``.md`` extension is matched case-insensitively. Paths are sorted so
    test order does not depend on the file system.
    """
    return sorted(
        path for path in Path(dir).rglob("*") if path.is_file() and path.suffix.lower() == ".md"
    )
