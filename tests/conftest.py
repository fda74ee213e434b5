"""Shared fixtures for S3Hero tests."""

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def canonical_formula_path() -> Path:
    """The fully checksummed s3hero formula."""
    return FIXTURES / "s3hero.rb"


@pytest.fixture
def scaffold_formula_path() -> Path:
    """The scaffolded s3hero formula with placeholder checksums."""
    return FIXTURES / "s3hero_scaffold.rb"


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An isolated configuration directory."""
    directory = tmp_path / "s3hero-config"
    monkeypatch.setenv("S3HERO_CONFIG_DIR", str(directory))
    monkeypatch.delenv("S3HERO_PROFILE", raising=False)
    return directory
