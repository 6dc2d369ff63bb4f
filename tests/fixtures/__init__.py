"""Shared test fixtures and utilities for the metricgen test suite.

    from tests.fixtures import SpyRecorder, make_block
"""

from tests.fixtures.dummies import DummySink, SpyRecorder
from tests.fixtures.factories import make_block

__all__ = [
    'DummySink',
    'SpyRecorder',
    'make_block',
]
