"""Composition of test sources from templates and extracted code.

Templates use a tiny runtime subset of ``format`` syntax. ``{{`` and ``}}``
stand for literal braces, and exactly one bare ``{`` ... ``}`` pair, with
nothing but optional whitespace between the braces, marks where the code
sample is spliced in. String literals containing braces are not special.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .errors import ErrorCode, MalformedTemplateError, UnresolvedTemplateError
from .types import DocTest, Test

logger = logging.getLogger(__name__)


@dataclass
class _Idle:
    pass


@dataclass
class _OpenBraceRun:
    braces: list[int]


@dataclass
class _Opener:
    open_idx: int


@dataclass
class _CloseBraceRun:
    braces: list[int]


@dataclass
class _CloseBraceRunWithOpener:
    open_idx: int
    braces: list[int]


_State = Union[_Idle, _OpenBraceRun, _Opener, _CloseBraceRun, _CloseBraceRunWithOpener]


def _is_odd(n: int) -> bool:
    return n % 2 == 1


class _BraceScanner:
    """
    Single pass over a template collecting brace runs and the marker.

    The free brace of an odd ``{`` run is a candidate opener. It becomes the
    marker when the next non-whitespace character starts an odd ``}`` run,
    whose first brace closes the marker. What is left of every run is paired
    off into escapes; an odd leftover brace is copied as is.
    """

    def __init__(self, template: str) -> None:
        self.template = template
        self.open_runs: list[list[int]] = []
        self.close_runs: list[list[int]] = []
        self.marker: Optional[tuple[int, int]] = None

    def scan(self) -> tuple[int, int]:
        state: _State = _Idle()
        for idx, ch in enumerate(self.template):
            state = self._step(state, idx, ch)
        self._finish(state)

        if self.marker is None:
            raise MalformedTemplateError(
                "no {} found in skeptic template",
                ErrorCode.NO_SUBSTITUTION_MARKER,
                self.template,
            )
        return self.marker

    def _step(self, state: _State, idx: int, ch: str) -> _State:
        if isinstance(state, _Idle):
            if ch == "{":
                return _OpenBraceRun([idx])
            if ch == "}":
                return _CloseBraceRun([idx])
            return state

        if isinstance(state, _OpenBraceRun):
            if ch == "{":
                state.braces.append(idx)
                return state
            if (ch == "}" or ch.isspace()) and _is_odd(len(state.braces)):
                open_idx = state.braces.pop()
                self._push_open_run(state.braces)
                if ch == "}":
                    return _CloseBraceRunWithOpener(open_idx, [idx])
                return _Opener(open_idx)
            self._push_open_run(state.braces)
            if ch == "}":
                return _CloseBraceRun([idx])
            return _Idle()

        if isinstance(state, _Opener):
            if ch == "}":
                return _CloseBraceRunWithOpener(state.open_idx, [idx])
            if ch == "{":
                # the waiting opener is abandoned and copied literally
                return _OpenBraceRun([idx])
            if ch.isspace():
                return state
            return _Idle()

        if isinstance(state, _CloseBraceRun):
            if ch == "}":
                state.braces.append(idx)
                return state
            self.close_runs.append(state.braces)
            if ch == "{":
                return _OpenBraceRun([idx])
            return _Idle()

        # _CloseBraceRunWithOpener
        if ch == "}":
            state.braces.append(idx)
            return state
        self._end_marker_run(state)
        if ch == "{":
            return _OpenBraceRun([idx])
        return _Idle()

    def _finish(self, state: _State) -> None:
        """Close whatever run is still open at the end of the template."""
        if isinstance(state, _OpenBraceRun):
            self._push_open_run(state.braces)
        elif isinstance(state, _CloseBraceRun):
            self.close_runs.append(state.braces)
        elif isinstance(state, _CloseBraceRunWithOpener):
            self._end_marker_run(state)

    def _push_open_run(self, braces: list[int]) -> None:
        if braces:
            self.open_runs.append(braces)

    def _end_marker_run(self, state: _CloseBraceRunWithOpener) -> None:
        if not _is_odd(len(state.braces)):
            self.close_runs.append(state.braces)
            return
        if self.marker is not None:
            raise MalformedTemplateError(
                "multiple {} in skeptic template",
                ErrorCode.MULTIPLE_SUBSTITUTION_MARKERS,
                self.template,
            )
        close_idx = state.braces.pop(0)
        self.marker = (state.open_idx, close_idx)
        if state.braces:
            self.close_runs.append(state.braces)


def _escape_pair_starts(runs: list[list[int]]) -> set[int]:
    starts: set[int] = set()
    for run in runs:
        paired = run[:-1] if _is_odd(len(run)) else run
        starts.update(paired[0::2])
    return starts


def compose_template(template: Optional[str], test: str) -> str:
    """
    Splice a test body into a template.

    Args:
        template: Template text, or None to use the body unwrapped
        test: The code sample, lines already joined

    Returns:
        The composed source

    Raises:
        MalformedTemplateError: If the template has no marker or more than one

    Example:
        >>> compose_template("fn main() {{ {} }}", "run();")
        'fn main() { run(); }'
    """
    if template is None:
        return test

    scanner = _BraceScanner(template)
    rep_start, rep_end = scanner.scan()
    open_pairs = _escape_pair_starts(scanner.open_runs)
    close_pairs = _escape_pair_starts(scanner.close_runs)

    src: list[str] = []
    idx = 0
    while idx < len(template):
        if idx == rep_start:
            src.append(test)
            idx = rep_end + 1
        elif idx in open_pairs:
            src.append("{")
            idx += 2
        elif idx in close_pairs:
            src.append("}")
            idx += 2
        else:
            src.append(template[idx])
            idx += 1

    return "".join(src)


def clean_omitted_line(line: str) -> str:
    """
    Drop the ``#`` hiding marker from a code line.

    Like rustdoc, a line starting with ``# `` (after indentation) is hidden in
    rendered documentation but kept for testing, without the marker.
    """
    trimmed = line.lstrip()
    if trimmed.startswith("# "):
        return trimmed[2:]
    if trimmed.rstrip() == "#":
        # a lone "#" may lack its newline on the last line
        return trimmed[1:]
    return line


def create_test_input(lines: Sequence[str], strip_hidden: bool = True) -> str:
    """Join the code lines of a test into the body that gets composed."""
    if not strip_hidden:
        return "".join(lines)
    return "".join(clean_omitted_line(line) for line in lines)


def get_template(doc: DocTest, test: Test) -> Optional[str]:
    """
    Select the template wrapping a test.

    A named template from the test's ``skt-`` annotation wins; otherwise the
    document's ``skeptic-template`` applies, if it has one.

    Raises:
        UnresolvedTemplateError: If the named template does not exist
    """
    if test.template is not None:
        try:
            return doc.templates[test.template]
        except KeyError:
            raise UnresolvedTemplateError(test.template, str(doc.path)) from None
    return doc.old_template


def build_test_src(doc: DocTest, test: Test, strip_hidden: bool = True) -> str:
    """Compose the full source of one test."""
    template = get_template(doc, test)
    logger.debug(
        "Composing %s with %s template",
        test.name,
        test.template or ("default" if template is not None else "no"),
    )
    return compose_template(template, create_test_input(test.text, strip_hidden))
