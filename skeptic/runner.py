"""Building and running emitted doc tests with an external toolchain."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from .config import Settings
from .emit import EmittedTest
from .errors import ToolchainError

logger = logging.getLogger(__name__)


class TestStatus(Enum):
    """Outcome of one doc test."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    IGNORED = "ignored"


class Phase(Enum):
    """Step of a doc test that produced its outcome."""

    BUILD = "build"
    RUN = "run"


@dataclass(frozen=True)
class TestOutcome:
    """Result of building and possibly running one doc test."""

    __test__ = False

    name: str
    status: TestStatus
    phase: Optional[Phase] = None
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    message: str = ""

    @property
    def passed(self) -> bool:
        return self.status is TestStatus.PASSED

    def __str__(self) -> str:
        """Return a one-line summary."""
        text = f"{self.name} ... {self.status.value}"
        if self.message:
            text += f" ({self.message})"
        return text


def _binary_path(source: Path) -> Path:
    return source.with_suffix(".bin") if source.suffix else source.with_name(source.name + ".bin")


def _command(template: str, source: Path, binary: Path) -> list[str]:
    # a bare file name would be looked up on PATH
    binary_arg = str(binary) if binary.parent != Path(".") else f"./{binary}"
    return [
        part.format(source=str(source), binary=binary_arg) for part in shlex.split(template)
    ]


def _invoke(command: list[str], timeout: float) -> subprocess.CompletedProcess[str]:
    logger.debug("Running %s", shlex.join(command))
    try:
        return subprocess.run(command, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError as e:
        raise ToolchainError(f"cannot run {command[0]}: {e}", command) from e


def run_test(test: EmittedTest, settings: Settings) -> TestOutcome:
    """
    Build, and unless it is ``no_run``, run one emitted test.

    Ignored tests are reported without invoking anything. A ``should_panic``
    test passes when running it exits with a non-zero status.

    Args:
        test: The emitted test
        settings: Commands and timeout to use

    Returns:
        The outcome of the test

    Raises:
        ToolchainError: If the build or run command cannot be started
    """
    if test.ignore:
        return TestOutcome(test.name, TestStatus.IGNORED)

    binary = _binary_path(test.source)
    build = _command(settings.build_command, test.source, binary)
    try:
        result = _invoke(build, settings.timeout)
    except subprocess.TimeoutExpired:
        return TestOutcome(test.name, TestStatus.FAILED, Phase.BUILD, message="build timed out")
    if result.returncode != 0:
        return TestOutcome(
            test.name,
            TestStatus.FAILED,
            Phase.BUILD,
            result.returncode,
            result.stdout,
            result.stderr,
            "build failed",
        )

    if test.no_run or not settings.run_command:
        return TestOutcome(test.name, TestStatus.PASSED, Phase.BUILD, result.returncode)

    run = _command(settings.run_command, test.source, binary)
    try:
        result = _invoke(run, settings.timeout)
    except subprocess.TimeoutExpired:
        return TestOutcome(test.name, TestStatus.FAILED, Phase.RUN, message="run timed out")

    failed_run = result.returncode != 0
    if failed_run == test.should_panic:
        status, message = TestStatus.PASSED, ""
    elif test.should_panic:
        status, message = TestStatus.FAILED, "test did not panic as expected"
    else:
        status, message = TestStatus.FAILED, f"exited with status {result.returncode}"

    return TestOutcome(
        test.name, status, Phase.RUN, result.returncode, result.stdout, result.stderr, message
    )


def run_tests(tests: Iterable[EmittedTest], settings: Settings) -> list[TestOutcome]:
    """Run several emitted tests in order and log a summary."""
    outcomes = []
    for test in tests:
        outcome = run_test(test, settings)
        if outcome.status is TestStatus.FAILED:
            logger.error("%s (%s line %d)", outcome, test.document, test.line)
        else:
            logger.info("%s", outcome)
        outcomes.append(outcome)

    passed = sum(1 for o in outcomes if o.status is TestStatus.PASSED)
    failed = sum(1 for o in outcomes if o.status is TestStatus.FAILED)
    ignored = len(outcomes) - passed - failed
    logger.info("%d passed; %d failed; %d ignored", passed, failed, ignored)
    return outcomes
