"""Tests for building and running emitted tests."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from skeptic import EmittedTest, Settings, TestStatus, ToolchainError, run_tests
from skeptic.runner import Phase, run_test


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        build_command="cc -o {binary} {source}",
        run_command="{binary} --quiet",
        timeout=5,
    )


def emitted(**kwargs) -> EmittedTest:
    return EmittedTest(
        name="doc_line_1",
        document=Path("doc.md"),
        source=Path("out/doc_line_1.rs"),
        **kwargs,
    )


def completed(returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestRunTest:
    """Test the outcome of a single test."""

    def test_ignored_test_runs_nothing(self, settings: Settings) -> None:
        with patch("skeptic.runner.subprocess.run") as run:
            outcome = run_test(emitted(ignore=True), settings)
        assert outcome.status is TestStatus.IGNORED
        run.assert_not_called()

    def test_commands_are_substituted(self, settings: Settings) -> None:
        with patch("skeptic.runner.subprocess.run", return_value=completed(0, "ok")) as run:
            outcome = run_test(emitted(), settings)
        assert outcome.passed
        assert outcome.phase is Phase.RUN
        assert outcome.stdout == "ok"
        build_args = run.call_args_list[0].args[0]
        run_args = run.call_args_list[1].args[0]
        assert build_args == ["cc", "-o", "out/doc_line_1.bin", "out/doc_line_1.rs"]
        assert run_args == ["out/doc_line_1.bin", "--quiet"]
        assert run.call_args_list[0].kwargs["timeout"] == 5

    def test_binary_in_current_directory_is_not_looked_up_on_path(self, settings: Settings) -> None:
        test = EmittedTest(name="t", document=Path("doc.md"), source=Path("t.rs"))
        with patch("skeptic.runner.subprocess.run", return_value=completed(0)) as run:
            assert run_test(test, settings).passed
        assert run.call_args_list[0].args[0] == ["cc", "-o", "./t.bin", "t.rs"]
        assert run.call_args_list[1].args[0] == ["./t.bin", "--quiet"]

    def test_build_failure(self, settings: Settings) -> None:
        with patch("skeptic.runner.subprocess.run", return_value=completed(1, stderr="error[E0425]")) as run:
            outcome = run_test(emitted(), settings)
        assert outcome.status is TestStatus.FAILED
        assert outcome.phase is Phase.BUILD
        assert outcome.stderr == "error[E0425]"
        assert run.call_count == 1

    def test_no_run_only_builds(self, settings: Settings) -> None:
        with patch("skeptic.runner.subprocess.run", return_value=completed(0)) as run:
            outcome = run_test(emitted(no_run=True), settings)
        assert outcome.passed
        assert outcome.phase is Phase.BUILD
        assert run.call_count == 1

    def test_empty_run_command_only_builds(self, settings: Settings) -> None:
        settings = settings.model_copy(update={"run_command": ""})
        with patch("skeptic.runner.subprocess.run", return_value=completed(0)) as run:
            assert run_test(emitted(), settings).passed
        assert run.call_count == 1

    def test_failing_run(self, settings: Settings) -> None:
        with patch("skeptic.runner.subprocess.run", side_effect=[completed(0), completed(101)]):
            outcome = run_test(emitted(), settings)
        assert outcome.status is TestStatus.FAILED
        assert outcome.returncode == 101
        assert str(outcome) == "doc_line_1 ... failed (exited with status 101)"

    def test_should_panic_passes_on_failure(self, settings: Settings) -> None:
        with patch("skeptic.runner.subprocess.run", side_effect=[completed(0), completed(101)]):
            assert run_test(emitted(should_panic=True), settings).passed

    def test_should_panic_fails_on_success(self, settings: Settings) -> None:
        with patch("skeptic.runner.subprocess.run", side_effect=[completed(0), completed(0)]):
            outcome = run_test(emitted(should_panic=True), settings)
        assert outcome.status is TestStatus.FAILED
        assert outcome.message == "test did not panic as expected"

    def test_timeout(self, settings: Settings) -> None:
        timeout = subprocess.TimeoutExpired(cmd="cc", timeout=5)
        with patch("skeptic.runner.subprocess.run", side_effect=[completed(0), timeout]):
            outcome = run_test(emitted(), settings)
        assert outcome.status is TestStatus.FAILED
        assert outcome.phase is Phase.RUN
        assert outcome.message == "run timed out"

    def test_missing_toolchain(self, settings: Settings) -> None:
        with patch("skeptic.runner.subprocess.run", side_effect=FileNotFoundError("cc")):
            with pytest.raises(ToolchainError) as excinfo:
                run_test(emitted(), settings)
        assert excinfo.value.command[0] == "cc"


class TestRunTests:
    """Test running several tests."""

    def test_outcomes_in_order(self, settings: Settings) -> None:
        tests = [
            emitted(ignore=True),
            EmittedTest(name="b", document=Path("doc.md"), source=Path("out/b.rs")),
        ]
        with patch("skeptic.runner.subprocess.run", return_value=completed(0)):
            outcomes = run_tests(tests, settings)
        assert [o.status for o in outcomes] == [TestStatus.IGNORED, TestStatus.PASSED]
        assert [o.name for o in outcomes] == ["doc_line_1", "b"]
