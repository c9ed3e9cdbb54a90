"""
skeptic - test the code samples of your markdown documentation.

Code blocks annotated with the configured language (``rust`` by default) are
extracted from markdown documents, wrapped in optional templates and turned
into individual test sources that an external toolchain builds and runs.
"""

__version__ = "0.1.0"

from typing import Iterable, Optional, Union
from pathlib import Path

from .errors import (
    SkepticError,
    MalformedTemplateError,
    UnresolvedTemplateError,
    ToolchainError,
    ErrorCode,
    error_code_to_string,
)
from .types import (
    CodeBlockInfo,
    Test,
    DocTest,
    DocTestSuite,
)
from .annotations import parse_code_block_info
from .names import sanitize_test_name
from .extract import (
    extract_tests_from_string,
    load_templates_from_string,
    load_templates,
    extract_doc_test,
    extract_tests,
    markdown_files_of_directory,
)
from .compose import (
    compose_template,
    create_test_input,
    get_template,
    build_test_src,
)
from .emit import EmittedTest, emit_tests
from .runner import TestOutcome, TestStatus, run_tests
from .config import Settings, get_settings


def generate_doc_tests(
    docs: Iterable[Union[str, Path]],
    settings: Optional[Settings] = None,
) -> list[EmittedTest]:
    """
    Extract the doc tests of some documents and write their sources.

    Args:
        docs: Markdown documents; companion ``.skt.md`` files are skipped
        settings: Settings to use, by default loaded from the environment

    Returns:
        The emitted tests

    Example:
        >>> import skeptic
        >>> emitted = skeptic.generate_doc_tests(["README.md"])
        >>> outcomes = skeptic.run_tests(emitted, skeptic.get_settings())
    """
    docs = list(docs)
    # Nothing to do, and no settings to load, for an empty list
    if not docs:
        return []

    if settings is None:
        settings = get_settings()

    suite = extract_tests(docs, settings.language, settings.template_suffix)
    return emit_tests(
        suite,
        settings.out_dir,
        settings.source_suffix,
        settings.strip_hidden_lines,
    )


__all__ = [
    # Top-level functions
    "generate_doc_tests",
    "extract_tests",
    "extract_doc_test",
    "extract_tests_from_string",
    "load_templates",
    "load_templates_from_string",
    "markdown_files_of_directory",
    "parse_code_block_info",
    "sanitize_test_name",
    "compose_template",
    "create_test_input",
    "get_template",
    "build_test_src",
    "emit_tests",
    "run_tests",
    "get_settings",
    # Records
    "CodeBlockInfo",
    "Test",
    "DocTest",
    "DocTestSuite",
    "EmittedTest",
    "TestOutcome",
    "TestStatus",
    "Settings",
    # Errors
    "SkepticError",
    "MalformedTemplateError",
    "UnresolvedTemplateError",
    "ToolchainError",
    "ErrorCode",
    "error_code_to_string",
]
