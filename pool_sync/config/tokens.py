"""
Token configuration for the traded pair.

Each token is configured with its ERC20 contract address and Pyth price feed id.
Feed ids differ between testnet and mainnet, see https://pyth.network/developers/price-feed-ids
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from web3 import Web3

from .base import BaseConfig, ConfigError

FEED_ID_PATTERN = re.compile(r"^[0-9a-f]{64}$")
MAX_DECIMALS = 77


def normalize_feed_id(feed_id: str) -> str:
    """Lowercase a price feed id and strip its 0x prefix."""
    feed_id = feed_id.strip().lower()
    if feed_id.startswith("0x"):
        feed_id = feed_id[2:]
    return feed_id


@dataclass(frozen=True)
class TokenConfig:
    """Immutable descriptor of one traded token."""

    name: str
    address: str
    price_feed_id: str
    decimals: int = 18

    @classmethod
    def create(
        cls,
        name: str,
        address: str,
        price_feed_id: str,
        decimals: int = 18,
    ) -> "TokenConfig":
        """
        Build a validated token config.

        Raises:
            ConfigError: If the address, feed id or decimals are invalid
        """
        if not address:
            raise ConfigError(f"Token {name} has no ERC20 address configured")
        try:
            checksummed = Web3.to_checksum_address(address)
        except ValueError as e:
            raise ConfigError(f"Token {name} has an invalid address {address}: {e}")

        feed_id = normalize_feed_id(price_feed_id or "")
        if not FEED_ID_PATTERN.match(feed_id):
            raise ConfigError(f"Token {name} has an invalid price feed id: {price_feed_id!r}")

        if not 0 <= decimals <= MAX_DECIMALS:
            raise ConfigError(f"Token {name} decimals out of range: {decimals}")

        return cls(name=name, address=checksummed, price_feed_id=feed_id, decimals=decimals)


@dataclass
class TokenPairConfig(BaseConfig):
    """Base/quote token settings read from the environment."""

    BASE_TOKEN_NAME: str = field(
        default_factory=lambda: BaseConfig.get_env("BASE_TOKEN_NAME", "BASE_TOKEN")
    )
    BASE_TOKEN_ERC20_ADDRESS: str = field(
        default_factory=lambda: BaseConfig.get_env("BASE_TOKEN_ERC20_ADDRESS", "")
    )
    BASE_TOKEN_PYTH_PRICE_FEED_ID: str = field(
        default_factory=lambda: BaseConfig.get_env("BASE_TOKEN_PYTH_PRICE_FEED_ID", "")
    )
    BASE_TOKEN_DECIMALS: int = field(
        default_factory=lambda: BaseConfig.get_env_int("BASE_TOKEN_DECIMALS", 18)
    )

    QUOTE_TOKEN_NAME: str = field(
        default_factory=lambda: BaseConfig.get_env("QUOTE_TOKEN_NAME", "QUOTE_TOKEN")
    )
    QUOTE_TOKEN_ERC20_ADDRESS: str = field(
        default_factory=lambda: BaseConfig.get_env("QUOTE_TOKEN_ERC20_ADDRESS", "")
    )
    QUOTE_TOKEN_PYTH_PRICE_FEED_ID: str = field(
        default_factory=lambda: BaseConfig.get_env("QUOTE_TOKEN_PYTH_PRICE_FEED_ID", "")
    )
    QUOTE_TOKEN_DECIMALS: int = field(
        default_factory=lambda: BaseConfig.get_env_int("QUOTE_TOKEN_DECIMALS", 18)
    )

    _base_token: Optional[TokenConfig] = field(default=None, init=False, repr=False)
    _quote_token: Optional[TokenConfig] = field(default=None, init=False, repr=False)

    @property
    def base_token(self) -> TokenConfig:
        """Get the validated base token config."""
        if self._base_token is None:
            self._base_token = TokenConfig.create(
                name=self.BASE_TOKEN_NAME,
                address=self.BASE_TOKEN_ERC20_ADDRESS,
                price_feed_id=self.BASE_TOKEN_PYTH_PRICE_FEED_ID,
                decimals=self.BASE_TOKEN_DECIMALS,
            )
        return self._base_token

    @property
    def quote_token(self) -> TokenConfig:
        """Get the validated quote token config."""
        if self._quote_token is None:
            self._quote_token = TokenConfig.create(
                name=self.QUOTE_TOKEN_NAME,
                address=self.QUOTE_TOKEN_ERC20_ADDRESS,
                price_feed_id=self.QUOTE_TOKEN_PYTH_PRICE_FEED_ID,
                decimals=self.QUOTE_TOKEN_DECIMALS,
            )
        return self._quote_token
