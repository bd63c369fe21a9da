"""
Pytest configuration: make sure `import refurb` works regardless of
where pytest is invoked, and provide shared fixtures.

It prepends the project root (one directory above *tests/*) to
``sys.path`` **before** any tests are collected.
"""

import sys
from pathlib import Path

import pytest

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from refurb.store import MemoryStore  # noqa: E402
from refurb.tracker import Tracker  # noqa: E402


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def tracker(store):
    return Tracker.open(store)
