"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def guide_path(fixtures_dir: Path) -> Path:
    """Return path to a document with a companion template file."""
    return fixtures_dir / "guide.md"


@pytest.fixture
def guide_text(guide_path: Path) -> str:
    """Load the guide document."""
    return guide_path.read_text()


@pytest.fixture
def default_template_path(fixtures_dir: Path) -> Path:
    """Return path to a document defining a skeptic-template."""
    return fixtures_dir / "default_template.md"
