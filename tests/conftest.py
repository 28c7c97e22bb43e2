"""Root test configuration for hbs-delimiters.

Clears the process-wide matcher cache before every test so cache-size
assertions are not affected by test order, and provides a fresh pybars
``Compiler`` for tests that install delimiters on it.
"""

import pytest
from pybars import Compiler

from hbs_delimiters.scanner.cache import default_cache


@pytest.fixture(autouse=True)
def reset_matcher_cache() -> None:
    """Start every test with an empty process-wide matcher cache."""
    default_cache.clear()


@pytest.fixture
def compiler() -> Compiler:
    """A fresh, un-patched pybars Compiler."""
    return Compiler()
