"""Classification of fenced code block info strings."""

from __future__ import annotations

from .types import CodeBlockInfo

DEFAULT_LANGUAGE = "rust"

OLD_TEMPLATE_TAG = "skeptic-template"
TEMPLATE_TAG_PREFIX = "skt-"


def _tokenize(info: str) -> list[str]:
    """Split on every character other than alphanumerics, '_' and '-'."""
    tokens: list[str] = []
    current: list[str] = []
    for ch in info:
        if ch.isalnum() or ch in "_-":
            current.append(ch)
        else:
            tokens.append("".join(current))
            current = []
    tokens.append("".join(current))
    return tokens


def parse_code_block_info(info: str, language: str = DEFAULT_LANGUAGE) -> CodeBlockInfo:
    """
    Parse the info string of a fenced code block.

    A block is a sample when it names the language and either carries no
    unknown token or carries at least one token skeptic recognizes. So
    ``rust,python`` is still a sample while ``python`` alone is not.

    Args:
        info: Raw info string, e.g. ``"rust,no_run,skt-foo"``
        language: Language token marking a code sample

    Returns:
        The parsed flags

    Example:
        >>> parse_code_block_info("rust,ignore").ignore
        True
    """
    is_sample = False
    should_panic = False
    ignore = False
    no_run = False
    is_old_template = False
    template = None
    seen_recognized = False
    seen_other = False

    for token in _tokenize(info):
        if not token:
            continue
        if token == language:
            is_sample = True
        elif token == "should_panic":
            should_panic = True
        elif token == "ignore":
            ignore = True
        elif token == "no_run":
            no_run = True
        elif token == OLD_TEMPLATE_TAG:
            is_old_template = True
        elif token.startswith(TEMPLATE_TAG_PREFIX):
            template = token[len(TEMPLATE_TAG_PREFIX):]
        else:
            seen_other = True
            continue
        seen_recognized = True

    return CodeBlockInfo(
        is_sample=is_sample and (not seen_other or seen_recognized),
        should_panic=should_panic,
        ignore=ignore,
        no_run=no_run,
        is_old_template=is_old_template,
        template=template,
    )
