"""
Price service (NATS relay) configuration for pool_sync.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from .base import BaseConfig


@dataclass
class PriceServiceConfig(BaseConfig):
    """Connection settings for the Pyth price relay."""

    PRICE_SERVICE_URL: str = field(
        default_factory=lambda: BaseConfig.get_env("PRICE_SERVICE_URL", "")
    )
    NATS_URL_LOCAL: str = field(
        default_factory=lambda: BaseConfig.get_env("NATS_URL_LOCAL", "nats://localhost:4222")
    )
    NATS_URL_DEV: str = field(
        default_factory=lambda: BaseConfig.get_env("NATS_URL_DEV", "nats://nats:4222")
    )
    NATS_URL_PRODUCTION: str = field(
        default_factory=lambda: BaseConfig.get_env("NATS_URL_PRODUCTION", "nats://nats-server:4222")
    )

    PRICE_SUBJECT_PREFIX: str = field(
        default_factory=lambda: BaseConfig.get_env("PRICE_SUBJECT_PREFIX", "prices.pyth")
    )

    # Connection Parameters
    NATS_MAX_RECONNECT_ATTEMPTS: int = field(
        default_factory=lambda: BaseConfig.get_env_int("NATS_MAX_RECONNECT_ATTEMPTS", 60)
    )
    NATS_RECONNECT_TIME_WAIT: int = field(
        default_factory=lambda: BaseConfig.get_env_int("NATS_RECONNECT_TIME_WAIT", 2)
    )

    @property
    def nats_urls(self) -> Dict[str, str]:
        """Get NATS URLs for different environments."""
        return {
            "local": self.NATS_URL_LOCAL,
            "dev": self.NATS_URL_DEV,
            "staging": self.NATS_URL_DEV,  # Use dev for staging
            "production": self.NATS_URL_PRODUCTION,
        }

    def get_price_service_url(self, environment: Optional[str] = None) -> str:
        """Explicit PRICE_SERVICE_URL, else the NATS URL for the environment."""
        if self.PRICE_SERVICE_URL:
            return self.PRICE_SERVICE_URL
        env = environment or self.ENVIRONMENT
        return self.nats_urls.get(env, self.NATS_URL_LOCAL)

    @property
    def connection_params(self) -> Dict:
        """Get NATS connection parameters."""
        return {
            "servers": [self.get_price_service_url()],
            "max_reconnect_attempts": self.NATS_MAX_RECONNECT_ATTEMPTS,
            "reconnect_time_wait": self.NATS_RECONNECT_TIME_WAIT,
            "allow_reconnect": True,
            "ping_interval": 120,
            "max_outstanding_pings": 2,
        }
