"""Shared pytest fixtures."""

import pytest
from pathlib import Path


@pytest.fixture
def examples_dir():
    """Path to tests/examples/ containing .r77 files."""
    return Path(__file__).parent / "examples"


@pytest.fixture(params=["fibonacci.r77", "parity.r77", "arithmetic.r77"])
def example_file(examples_dir, request):
    """Parametrized: one of the example .r77 programs."""
    return examples_dir / request.param
