"""
Ledger (JSON-RPC) configuration for pool_sync.
"""

from dataclasses import dataclass, field

from web3 import Web3

from .base import BaseConfig, ConfigError

MAX_UINT256 = 2**256 - 1


@dataclass
class LedgerConfig(BaseConfig):
    """RPC endpoint, pool contract and polling settings."""

    RPC_URL: str = field(
        default_factory=lambda: BaseConfig.get_env("RPC_URL", "http://localhost:8545")
    )
    SWAP_CONTRACT_ADDRESS: str = field(
        default_factory=lambda: BaseConfig.get_env("SWAP_CONTRACT_ADDRESS", "")
    )

    # Polling
    POLL_INTERVAL_SECONDS: float = field(
        default_factory=lambda: BaseConfig.get_env_float("POLL_INTERVAL_SECONDS", 3.0)
    )

    # Approvals
    APPROVAL_CONFIRMATION_TIMEOUT: float = field(
        default_factory=lambda: BaseConfig.get_env_float("APPROVAL_CONFIRMATION_TIMEOUT", 120.0)
    )
    APPROVE_UNLIMITED: bool = field(
        default_factory=lambda: BaseConfig.get_env_bool("APPROVE_UNLIMITED", False)
    )

    @property
    def swap_contract_address(self) -> str:
        """Get the checksummed pool contract address."""
        if not self.SWAP_CONTRACT_ADDRESS:
            raise ConfigError("SWAP_CONTRACT_ADDRESS is not configured")
        try:
            return Web3.to_checksum_address(self.SWAP_CONTRACT_ADDRESS)
        except ValueError as e:
            raise ConfigError(f"Invalid SWAP_CONTRACT_ADDRESS {self.SWAP_CONTRACT_ADDRESS}: {e}")

    @property
    def approval_amount_override(self):
        """Amount to approve instead of the exact requirement, if any."""
        return MAX_UINT256 if self.APPROVE_UNLIMITED else None

    def validate(self):
        """Validate polling and contract settings."""
        self.swap_contract_address
        if self.POLL_INTERVAL_SECONDS <= 0:
            raise ConfigError(f"POLL_INTERVAL_SECONDS must be positive, got {self.POLL_INTERVAL_SECONDS}")
        if self.APPROVAL_CONFIRMATION_TIMEOUT <= 0:
            raise ConfigError(
                f"APPROVAL_CONFIRMATION_TIMEOUT must be positive, got {self.APPROVAL_CONFIRMATION_TIMEOUT}"
            )
