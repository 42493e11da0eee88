"""Shared fixtures for the maxrects test-suite."""

import os
import sys

import pytest

# Ensure the src/ layout is importable without an editable install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from maxrects.algorithms.maxrects_packer import MaxRectsPacker  # noqa: E402


@pytest.fixture
def packer():
    """Empty 100x100 container without rotation."""
    return MaxRectsPacker(100, 100, allow_rotate=False)


@pytest.fixture
def rotating_packer():
    """Empty 100x100 container with rotation enabled."""
    return MaxRectsPacker(100, 100, allow_rotate=True)
