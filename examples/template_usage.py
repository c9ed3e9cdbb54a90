#!/usr/bin/env python3
"""Examples of template composition and error handling."""

import tempfile
from pathlib import Path

import skeptic


def escaping():
    """Example: Literal braces and the substitution marker."""
    print("=" * 60)
    print("Example 1: Escaping Braces")
    print("=" * 60)

    template = "fn main() {{\n    {}\n}}\n"
    print(skeptic.compose_template(template, "let v = vec![1, 2, 3];\n"))


def malformed_templates():
    """Example: Templates rejected at composition time."""
    print("=" * 60)
    print("Example 2: Malformed Templates")
    print("=" * 60)

    for template in ("no markers here", "{} and {}"):
        try:
            skeptic.compose_template(template, "x")
        except skeptic.MalformedTemplateError as e:
            print(f"{template!r}: {e} ({skeptic.error_code_to_string(e.code)})")


def emit_with_failures():
    """Example: Emit a suite, skipping tests whose template is missing."""
    print("\n" + "=" * 60)
    print("Example 3: Emitting Sources")
    print("=" * 60)

    suite = skeptic.extract_tests([Path("../tests/fixtures/default_template.md")])
    with tempfile.TemporaryDirectory() as out_dir:
        emitted = skeptic.emit_tests(suite, out_dir, skip_failures=True)
        for test in emitted:
            print(f"{test.name} -> {test.source.name}")
            print(test.source.read_text())


if __name__ == "__main__":
    escaping()
    malformed_templates()
    emit_with_failures()
