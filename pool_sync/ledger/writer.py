"""
Transactions against the token and pool contracts.

Submissions return the transaction hash and do not wait for a receipt; the
effect is observed through the next poll.
"""

import logging
from typing import Optional

from web3 import AsyncWeb3, Web3

from ..core.errors import LedgerWriteError
from .reader import encode_call

logger = logging.getLogger(__name__)

APPROVE = "approve(address,uint256)"
ADD_LIQUIDITY = "addLiquidity(uint256,uint256)"
REMOVE_LIQUIDITY = "removeLiquidity(uint256)"


class LedgerWriter:
    """Signs and sends approve / addLiquidity / removeLiquidity from the wallet account."""

    def __init__(self, web3: AsyncWeb3, pool_address: str):
        self.web3 = web3
        self.pool_address = Web3.to_checksum_address(pool_address)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def _send(self, sender: str, to: str, data: bytes, description: str) -> str:
        try:
            tx_hash = await self.web3.eth.send_transaction(
                {"from": Web3.to_checksum_address(sender), "to": to, "data": data}
            )
        except Exception as e:
            self.logger.error(f"{description} failed: {e}")
            raise LedgerWriteError(f"{description} failed: {e}") from e
        tx_hash = Web3.to_hex(tx_hash)
        self.logger.info(f"{description} submitted: {tx_hash}")
        return tx_hash

    async def approve(self, sender: str, token: str, amount: int, spender: Optional[str] = None) -> str:
        """Approve spender (the pool by default) to move amount of token."""
        if amount < 0:
            raise LedgerWriteError(f"Cannot approve a negative amount: {amount}")
        token = Web3.to_checksum_address(token)
        spender = Web3.to_checksum_address(spender or self.pool_address)
        data = encode_call(APPROVE, ["address", "uint256"], [spender, amount])
        return await self._send(sender, token, data, f"approve {amount} of {token}")

    async def add_liquidity(self, sender: str, amount_base: int, amount_quote: int) -> str:
        if amount_base <= 0 or amount_quote <= 0:
            raise LedgerWriteError("Liquidity amounts must be positive")
        data = encode_call(ADD_LIQUIDITY, ["uint256", "uint256"], [amount_base, amount_quote])
        return await self._send(sender, self.pool_address, data, f"addLiquidity({amount_base}, {amount_quote})")

    async def remove_liquidity(self, sender: str, share_qty: int) -> str:
        if share_qty <= 0:
            raise LedgerWriteError("Share quantity must be positive")
        data = encode_call(REMOVE_LIQUIDITY, ["uint256"], [share_qty])
        return await self._send(sender, self.pool_address, data, f"removeLiquidity({share_qty})")
