"""
Configuration management for pool_sync.

All settings come from environment variables (optionally a .env file) and are
fixed for the lifetime of the process. Use get_config() to access them.

Example:
    from pool_sync.config import get_config

    config = get_config()

    base_token = config.base_token
    rpc_url = config.ledger.RPC_URL
    price_url = config.price_service.get_price_service_url()
"""

from .base import BaseConfig, ConfigError
from .ledger import MAX_UINT256, LedgerConfig
from .manager import ConfigManager, get_config, reload_config
from .price_service import PriceServiceConfig
from .tokens import TokenConfig, TokenPairConfig, normalize_feed_id

__all__ = [
    "BaseConfig",
    "ConfigError",
    "TokenConfig",
    "TokenPairConfig",
    "LedgerConfig",
    "PriceServiceConfig",
    "ConfigManager",
    "MAX_UINT256",
    "get_config",
    "normalize_feed_id",
    "reload_config",
]
