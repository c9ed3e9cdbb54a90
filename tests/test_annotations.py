"""Tests for code block info string parsing."""

import pytest

from skeptic import CodeBlockInfo, parse_code_block_info


class TestLanguageDetection:
    """Test which blocks count as samples."""

    def test_plain_rust(self) -> None:
        assert parse_code_block_info("rust") == CodeBlockInfo(is_sample=True)

    def test_rust_with_ignore(self) -> None:
        info = parse_code_block_info("rust,ignore")
        assert info.is_sample
        assert info.ignore
        assert not info.no_run
        assert not info.should_panic

    def test_unknown_token_tolerated_next_to_language(self) -> None:
        info = parse_code_block_info("rust,python")
        assert info.is_sample
        assert info == CodeBlockInfo(is_sample=True)

    def test_other_language_alone(self) -> None:
        assert not parse_code_block_info("python").is_sample

    def test_empty_info(self) -> None:
        assert parse_code_block_info("") == CodeBlockInfo()

    def test_flags_without_language(self) -> None:
        info = parse_code_block_info("ignore")
        assert not info.is_sample
        assert info.ignore

    def test_language_must_be_whole_token(self) -> None:
        assert not parse_code_block_info("rustc").is_sample
        assert not parse_code_block_info("rust_lang").is_sample

    def test_custom_language(self) -> None:
        assert parse_code_block_info("python,no_run", language="python").is_sample
        assert not parse_code_block_info("rust", language="python").is_sample


class TestFlags:
    """Test flag tokens."""

    @pytest.mark.parametrize(
        "info",
        ["rust,should_panic,no_run,ignore", "rust should_panic no_run ignore", "{rust}[should_panic](no_run);ignore"],
    )
    def test_all_flags_any_separator(self, info: str) -> None:
        parsed = parse_code_block_info(info)
        assert parsed.is_sample
        assert parsed.should_panic
        assert parsed.no_run
        assert parsed.ignore

    def test_old_template_marker(self) -> None:
        info = parse_code_block_info("rust,skeptic-template")
        assert info.is_sample
        assert info.is_old_template
        assert info.template is None

    def test_named_template(self) -> None:
        info = parse_code_block_info("rust,skt-foo_bar")
        assert info.is_sample
        assert info.template == "foo_bar"

    def test_named_template_keeps_dashes(self) -> None:
        assert parse_code_block_info("rust,skt-a-b").template == "a-b"

    def test_last_named_template_wins(self) -> None:
        assert parse_code_block_info("rust,skt-a,skt-b").template == "b"

    def test_empty_template_tag(self) -> None:
        assert parse_code_block_info("rust,skt-").template == ""

    def test_flags_are_case_sensitive(self) -> None:
        info = parse_code_block_info("rust,IGNORE")
        assert info.is_sample
        assert not info.ignore
