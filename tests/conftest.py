"""Shared test fixtures."""

import copy
from pathlib import Path

import pytest
from folio.config import (
    BlogConfig,
    Config,
    LiveReloadConfig,
    PreferencesConfig,
    ResourcesConfig,
    ServerConfig,
    SiteConfig,
)

from tests.sample_site import PORTFOLIO, POSTS


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration with tmp_path directories.

    Creates the site root and returns a Config instance suitable for testing.
    """
    root_dir = tmp_path / "site"
    root_dir.mkdir(exist_ok=True)

    return Config(
        server=ServerConfig(),
        site=SiteConfig(root_dir=root_dir),
        resources=ResourcesConfig(timeout=2.0),
        blog=BlogConfig(),
        live_reload=LiveReloadConfig(enabled=False),
        preferences=PreferencesConfig(path=tmp_path / ".folio" / "preferences.json"),
    )


@pytest.fixture
def portfolio_payload() -> dict:
    """Fresh copy of the sample portfolio document."""
    return copy.deepcopy(PORTFOLIO)


@pytest.fixture
def posts_payload() -> list[dict]:
    """Fresh copy of the sample posts document."""
    return copy.deepcopy(POSTS)
