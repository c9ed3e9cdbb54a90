"""Structural event stream for markdown documents.

Only the structure doc tests need is recognized:

- ATX headings (``# Title``) and setext headings (a paragraph underlined
  with ``===`` or ``---``)
- fenced code blocks opened by three or more backticks or tildes, indented
  by spaces or tabs

Lines end at ``"\\n"`` only. Block quotes and lists are not recognized, so a
fence inside a block quote (``> ```rust``) is ordinary text.

Every event carries the offset (a string index) into the raw text where it
starts, so callers can recover line numbers with ``text.count("\\n", 0, offset)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional, Union

_OPENING_FENCE = re.compile(r"^([ \t]*)(`{3,}|~{3,})(.*)$")
_CLOSING_FENCE = re.compile(r"^[ \t]*(`{3,}|~{3,})[ \t]*$")
_ATX_HEADING = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*))?$")
_ATX_CLOSING_SEQUENCE = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")
_SETEXT_UNDERLINE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
_LINE = re.compile(r"[^\n]*\n|[^\n]+")


@dataclass(frozen=True)
class HeadingStart:
    level: int
    offset: int


@dataclass(frozen=True)
class HeadingEnd:
    level: int
    offset: int


@dataclass(frozen=True)
class CodeBlockStart:
    info: str
    offset: int


@dataclass(frozen=True)
class CodeBlockEnd:
    info: str
    offset: int


@dataclass(frozen=True)
class Text:
    text: str
    offset: int


Event = Union[HeadingStart, HeadingEnd, CodeBlockStart, CodeBlockEnd, Text]


@dataclass
class _Fence:
    char: str
    length: int
    indent: int
    info: str


def _strip_indent(line: str, indent: int) -> tuple[str, int]:
    """Remove up to ``indent`` leading spaces or tabs, returning the line and count removed."""
    removed = 0
    while removed < indent and removed < len(line) and line[removed] in " \t":
        removed += 1
    return line[removed:], removed


def _open_fence(content: str) -> Optional[_Fence]:
    match = _OPENING_FENCE.match(content)
    if not match:
        return None
    indent, marker, info = match.groups()
    # A backtick fence cannot carry backticks in its info string
    if marker[0] == "`" and "`" in info:
        return None
    return _Fence(char=marker[0], length=len(marker), indent=len(indent), info=info.strip())


def _closes(fence: _Fence, content: str) -> bool:
    match = _CLOSING_FENCE.match(content)
    if not match:
        return False
    marker = match.group(1)
    return marker[0] == fence.char and len(marker) >= fence.length


def _heading_events(level: int, text: str, offset: int, text_offset: int) -> Iterator[Event]:
    yield HeadingStart(level, offset)
    if text:
        yield Text(text, text_offset)
    yield HeadingEnd(level, offset)


def parse_events(text: str) -> Iterator[Event]:
    """
    Tokenize a markdown document into structural events.

    Code block contents are emitted as one ``Text`` event per line, line
    terminators included. An unclosed fence runs to the end of the document.

    Args:
        text: The raw markdown document

    Yields:
        Events in document order
    """
    offset = 0
    fence: Optional[_Fence] = None
    paragraph: list[str] = []
    paragraph_offset = 0

    for match in _LINE.finditer(text):
        line = match.group()
        line_offset = offset
        offset += len(line)
        content = line.rstrip("\r\n")

        if fence is not None:
            if _closes(fence, content):
                yield CodeBlockEnd(fence.info, line_offset)
                fence = None
            else:
                stripped, removed = _strip_indent(line, fence.indent)
                yield Text(stripped, line_offset + removed)
            continue

        opened = _open_fence(content)
        if opened is not None:
            paragraph = []
            fence = opened
            yield CodeBlockStart(fence.info, line_offset)
            continue

        atx = _ATX_HEADING.match(content)
        if atx:
            paragraph = []
            title = atx.group(2) or ""
            title_offset = line_offset + (atx.start(2) if atx.group(2) is not None else len(content))
            title = _ATX_CLOSING_SEQUENCE.sub("", title).strip()
            yield from _heading_events(len(atx.group(1)), title, line_offset, title_offset)
            continue

        underline = _SETEXT_UNDERLINE.match(content)
        if underline:
            # Without a paragraph above, this is a thematic break
            if paragraph:
                level = 1 if underline.group(1)[0] == "=" else 2
                title = " ".join(paragraph)
                yield from _heading_events(level, title, paragraph_offset, paragraph_offset)
            paragraph = []
            continue

        if not content.strip():
            paragraph = []
        else:
            if not paragraph:
                paragraph_offset = line_offset
            paragraph.append(content.strip())

    if fence is not None:
        yield CodeBlockEnd(fence.info, len(text))
