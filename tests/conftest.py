"""
Pytest fixtures for solswaps tests
"""
import logging

import pytest

from solswaps.normalizer import normalize
from tests.builders import TxBuilder


@pytest.fixture
def tx_builder():
    """Fresh synthetic transaction builder"""
    return TxBuilder()


@pytest.fixture
def normalized():
    """Normalize a builder or a raw response"""
    def _normalize(tx):
        raw = tx.build() if isinstance(tx, TxBuilder) else tx
        return normalize(raw)
    return _normalize


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("SOLSWAPS_LOG_LEVEL", raising=False)


@pytest.fixture
def package_logger():
    """Package logger with its handlers restored after the test"""
    logger = logging.getLogger("solswaps")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
