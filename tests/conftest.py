"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import camtrap_dp...' and
'import actions...' work from a plain checkout, and provides the paths of the
CSV fixtures shared by the test modules.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding deployments.csv, media.csv and observations.csv."""
    return FIXTURES_DIR
