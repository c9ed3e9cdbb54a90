"""Test that README.md code examples execute correctly.

The Python samples of README.md are extracted with skeptic itself and
executed sequentially in a shared namespace, ensuring documentation stays
in sync with the actual API.

Annotations on the fence control each block:
- ``python,ignore`` - Don't execute this block
- ``python,should_panic`` - Block should raise an exception

SECURITY NOTE: This module uses exec() to run code extracted from README.md.
This is acceptable because README.md is version-controlled and changes require
PR review. Do not copy this pattern for use with untrusted input sources.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from skeptic import Test, create_test_input, extract_tests_from_string


def extract_python_blocks(markdown: str) -> list[Test]:
    """Extract the Python samples of a markdown document."""
    tests, _ = extract_tests_from_string(markdown, "readme", language="python")
    return tests


class TestReadmeExamples:
    """Execute README.md code examples to verify they work."""

    @pytest.fixture
    def readme_path(self) -> Path:
        """Path to the README.md file."""
        return Path(__file__).parent.parent / "README.md"

    @pytest.fixture
    def code_blocks(self, readme_path: Path) -> list[Test]:
        """Extract all Python code blocks from README."""
        if not readme_path.exists():
            pytest.fail(f"README.md not found at {readme_path}")

        blocks = extract_python_blocks(readme_path.read_text())

        if not blocks:
            pytest.fail("No Python code blocks found in README.md")

        return blocks

    def test_all_python_blocks_execute(self, code_blocks: list[Test]) -> None:
        """All non-ignored Python blocks should execute without error."""
        # Shared namespace for sequential execution
        namespace: dict[str, object] = {"__name__": "__main__"}

        for block in code_blocks:
            if block.ignore:
                continue

            code = create_test_input(block.text, strip_hidden=False)
            line_num = block.line + 1
            code_preview = code[:300] + "..." if len(code) > 300 else code

            try:
                # SECURITY: exec() is safe here because README.md is version-controlled
                # and undergoes PR review. DO NOT use this pattern with untrusted input.
                exec(code, namespace)

                if block.should_panic:
                    pytest.fail(
                        f"README.md line {line_num}: Block was expected to raise "
                        f"an error but succeeded.\n\nCode:\n{code_preview}"
                    )

            except SyntaxError as e:
                # Syntax errors are always failures, even for should_panic blocks
                pytest.fail(
                    f"README.md line {line_num}: Syntax error: {e}\n\nCode:\n{code_preview}"
                )

            except Exception as e:
                if not block.should_panic:
                    pytest.fail(
                        f"README.md line {line_num}: "
                        f"{type(e).__name__}: {e}\n\n"
                        f"Code:\n{code_preview}"
                    )


class TestCodeBlockExtraction:
    """Unit tests for extracting Python samples."""

    def test_extracts_simple_block(self) -> None:
        """Extract a simple Python code block."""
        markdown = """
Some text

```python
x = 1
print(x)
```

More text
"""
        blocks = extract_python_blocks(markdown)
        assert len(blocks) == 1
        assert blocks[0].text == ("x = 1\n", "print(x)\n")
        assert not blocks[0].ignore

    def test_extracts_annotated_blocks(self) -> None:
        markdown = """
```python,ignore
import something_unavailable
```

```python,should_panic
raise ValueError("expected")
```
"""
        blocks = extract_python_blocks(markdown)
        assert [b.ignore for b in blocks] == [True, False]
        assert [b.should_panic for b in blocks] == [False, True]

    def test_ignores_non_python_blocks(self) -> None:
        """Only extract Python blocks, ignore bash/other."""
        markdown = """
```bash
pip install something
```

```python
x = 1
```

```javascript
const y = 2;
```
"""
        blocks = extract_python_blocks(markdown)
        assert len(blocks) == 1
        assert blocks[0].text == ("x = 1\n",)

    def test_preserves_indentation(self) -> None:
        """Code block indentation should be preserved."""
        markdown = """
```python
def foo():
    if True:
        return 42
```
"""
        blocks = extract_python_blocks(markdown)
        code = create_test_input(blocks[0].text, strip_hidden=False)
        assert "    if True:\n" in code
        assert "        return 42\n" in code

    def test_line_numbers_are_correct(self) -> None:
        """Line numbers point at the first code line."""
        markdown = """line 1
line 2
```python
code here
```
line 6
"""
        blocks = extract_python_blocks(markdown)
        assert len(blocks) == 1
        # "code here" is on line 4 (1-indexed)
        assert blocks[0].line + 1 == 4
