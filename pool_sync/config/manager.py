"""
Configuration manager for pool_sync.

This module provides a centralized way to access all configuration settings
across the application. It combines all configuration classes into a single
easy-to-use interface.
"""

import logging
from typing import Any, Dict, Optional

from .base import BaseConfig, ConfigError
from .ledger import LedgerConfig
from .price_service import PriceServiceConfig
from .tokens import TokenConfig, TokenPairConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Centralized configuration manager that combines all configuration classes.

    This class provides easy access to all configuration settings and ensures
    that configurations are properly initialized and validated.
    """

    def __init__(self, environment: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            environment: Override the environment (local, dev, staging, production)
        """
        self._environment = environment
        self._base_config = None
        self._token_config = None
        self._ledger_config = None
        self._price_service_config = None
        self._initialize_configs()

    def _initialize_configs(self):
        """Initialize all configuration objects."""
        try:
            # Initialize base configuration first
            self._base_config = BaseConfig()
            if self._environment:
                self._base_config.ENVIRONMENT = self._environment
                self._base_config._validate_config()

            self._token_config = TokenPairConfig()
            self._ledger_config = LedgerConfig()
            self._price_service_config = PriceServiceConfig(ENVIRONMENT=self.environment)

            logger.info(f"Configuration initialized for environment: {self.environment}")

        except ConfigError:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize configuration: {e}")
            raise ConfigError(f"Configuration initialization failed: {e}")

    @property
    def environment(self) -> str:
        """Get current environment."""
        return self._base_config.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        """Get base configuration."""
        return self._base_config

    @property
    def tokens(self) -> TokenPairConfig:
        """Get token pair configuration."""
        return self._token_config

    @property
    def base_token(self) -> TokenConfig:
        """Get the base token descriptor."""
        return self._token_config.base_token

    @property
    def quote_token(self) -> TokenConfig:
        """Get the quote token descriptor."""
        return self._token_config.quote_token

    @property
    def ledger(self) -> LedgerConfig:
        """Get ledger configuration."""
        return self._ledger_config

    @property
    def price_service(self) -> PriceServiceConfig:
        """Get price service configuration."""
        return self._price_service_config

    def validate_configuration(self) -> bool:
        """
        Validate all configuration settings.

        Returns:
            True if all configurations are valid

        Raises:
            ConfigError: If any configuration is invalid
        """
        base_token = self.base_token
        quote_token = self.quote_token
        if base_token.address == quote_token.address:
            raise ConfigError("Base and quote tokens must have different addresses")
        if base_token.price_feed_id == quote_token.price_feed_id:
            raise ConfigError("Base and quote tokens must have different price feed ids")

        self.ledger.validate()

        logger.info("Configuration validation successful")
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert all configurations to dictionary format."""
        return {
            "environment": self.environment,
            "base": self.base.to_dict() if self.base else {},
            "tokens": self.tokens.to_dict() if self.tokens else {},
            "ledger": self.ledger.to_dict() if self.ledger else {},
            "price_service": self.price_service.to_dict() if self.price_service else {},
        }

    def __repr__(self) -> str:
        """String representation of the configuration manager."""
        return f"ConfigManager(environment={self.environment})"


# Global configuration manager instance
_config_manager = None


def get_config(environment: Optional[str] = None, force_reload: bool = False) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        environment: Override environment
        force_reload: Force reload of configuration

    Returns:
        ConfigManager instance
    """
    global _config_manager

    if _config_manager is None or force_reload:
        manager = ConfigManager(environment=environment)
        manager.validate_configuration()
        _config_manager = manager

    return _config_manager


def reload_config(environment: Optional[str] = None) -> ConfigManager:
    """
    Reload the global configuration manager.

    Args:
        environment: Override environment

    Returns:
        New ConfigManager instance
    """
    return get_config(environment=environment, force_reload=True)
