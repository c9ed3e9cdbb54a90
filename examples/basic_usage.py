#!/usr/bin/env python3
"""Basic usage examples for the skeptic Python package."""

from pathlib import Path

import skeptic


def extract_from_file():
    """Example: Extract the doc tests of a markdown file."""
    print("=" * 60)
    print("Example 1: Extract Doc Tests")
    print("=" * 60)

    doc = skeptic.extract_doc_test(Path("../tests/fixtures/guide.md"))

    print(f"Found {len(doc)} tests in {doc.path}")
    for test in doc.tests:
        flags = [f for f in ("ignore", "no_run", "should_panic") if getattr(test, f)]
        print(f"  {test.name} {' '.join(flags)}")

    print(f"Named templates: {sorted(doc.templates)}")
    return doc


def compose_sources(doc):
    """Example: Compose the source of each test."""
    print("\n" + "=" * 60)
    print("Example 2: Compose Test Sources")
    print("=" * 60)

    for test in doc.tests:
        src = skeptic.build_test_src(doc, test)
        print(f"--- {test.name}")
        print(src)


def tabulate_suite():
    """Example: Look at a whole suite as a DataFrame."""
    print("\n" + "=" * 60)
    print("Example 3: Suite Inventory")
    print("=" * 60)

    docs = skeptic.markdown_files_of_directory("../tests/fixtures")
    suite = skeptic.extract_tests(docs)
    df = suite.to_dataframe()
    print(df[["name", "line", "ignore", "no_run", "should_panic"]].to_string(index=False))
    print(f"\n{int(df['ignore'].sum())} of {len(df)} tests are ignored")


if __name__ == "__main__":
    doc = extract_from_file()
    compose_sources(doc)
    tabulate_suite()
