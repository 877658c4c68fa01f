"""Shared fixtures for the whole test suite."""

import logging

import pytest

from flycache.logging.structlog_adapter import NAMESPACE, StructlogAdapter


@pytest.fixture(autouse=True)
def _detach_flycache_logging():
    """Drop handlers and levels left on the ``flycache`` logger by a test."""
    yield
    StructlogAdapter().reset()
    logging.getLogger(NAMESPACE).setLevel(logging.NOTSET)
