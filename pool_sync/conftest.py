"""Shared fixtures for pool_sync tests."""
import pytest

from pool_sync.config.tokens import TokenConfig

BASE_ADDRESS = "0x1111111111111111111111111111111111111111"
QUOTE_ADDRESS = "0x2222222222222222222222222222222222222222"

BASE_FEED = "a" * 64
QUOTE_FEED = "b" * 64


@pytest.fixture
def base_token():
    """18-decimal base token."""
    return TokenConfig.create("BASE", BASE_ADDRESS, "0x" + BASE_FEED, 18)


@pytest.fixture
def quote_token():
    """6-decimal quote token."""
    return TokenConfig.create("QUOTE", QUOTE_ADDRESS, QUOTE_FEED, 6)
