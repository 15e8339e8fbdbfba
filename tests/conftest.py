"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fromvdf import config as config_module
from fromvdf.parser import parse_file


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def appmanifest_path(fixtures_dir):
    """Path to an app manifest (.acf) fixture."""
    return fixtures_dir / "appmanifest_440.acf"


@pytest.fixture
def libraryfolders_path(fixtures_dir):
    """Path to a libraryfolders.vdf fixture with comments and escapes."""
    return fixtures_dir / "libraryfolders.vdf"


# =============================================================================
# PARSED TREE FIXTURES
# =============================================================================

@pytest.fixture
def parsed_fixtures(fixtures_dir):
    """Parse all fixture files, return dict of {filename: tree}."""
    result = {}
    for file_path in sorted(fixtures_dir.glob("*.*")):
        result[file_path.name] = parse_file(file_path)
    return result


# =============================================================================
# CONFIG ISOLATION
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep user config files and FROMVDF_* variables out of every test."""
    for var in ("FROMVDF_LOSSY", "FROMVDF_MAX_DEPTH", "FROMVDF_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [tmp_path / "missing.yaml"])
    config_module.reset_config()
    yield
    config_module.reset_config()

