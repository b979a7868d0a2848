"""
Ledger reads for the pool client.

Each read is a single eth_call whose calldata is the 4-byte selector plus
eth_abi-encoded arguments; every supported method returns one uint256.
"""

import logging
from typing import Any, List, Optional, Sequence, Union

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector
from web3 import AsyncWeb3, Web3

from ..core.errors import LedgerReadError

logger = logging.getLogger(__name__)

BALANCE_OF = "balanceOf(address)"
ALLOWANCE = "allowance(address,address)"
LIQUIDITY_TOKEN_BALANCE = "getLiquidityTokenBalance()"
TOTAL_LIQUIDITY_TOKEN_SUPPLY = "getTotalLiquidityTokenSupply()"


def encode_call(signature: str, arg_types: Sequence[str] = (), args: Sequence[Any] = ()) -> bytes:
    """Build calldata for a contract method."""
    selector = function_signature_to_4byte_selector(signature)
    if not arg_types:
        return selector
    return selector + encode(list(arg_types), list(args))


class LedgerReader:
    """
    Async reads of token balances, allowances and pool-share figures.

    Errors from the RPC layer surface as LedgerReadError so that the poller can
    treat any of them as a failed read.
    """

    def __init__(self, web3: AsyncWeb3, pool_address: str):
        self.web3 = web3
        self.pool_address = Web3.to_checksum_address(pool_address)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def _call_uint256(
        self,
        to: str,
        signature: str,
        arg_types: Sequence[str] = (),
        args: Sequence[Any] = (),
        sender: Optional[str] = None,
        block_identifier: Union[int, str] = "latest",
    ) -> int:
        """Execute one eth_call and decode a single uint256."""
        tx = {"to": to, "data": encode_call(signature, arg_types, args)}
        if sender is not None:
            tx["from"] = sender
        try:
            raw = await self.web3.eth.call(tx, block_identifier=block_identifier)
            (value,) = decode(["uint256"], bytes(raw))
        except Exception as e:
            self.logger.debug(f"{signature} on {to} failed: {e}")
            raise LedgerReadError(f"{signature} on {to} failed: {e}") from e
        return value

    def _validate_addresses(self, addresses: List[str]) -> List[str]:
        """Checksum addresses, rejecting malformed ones."""
        validated = []
        for addr in addresses:
            try:
                validated.append(Web3.to_checksum_address(addr))
            except (ValueError, TypeError) as e:
                raise LedgerReadError(f"Invalid address {addr}: {e}") from e
        return validated

    async def balance_of(self, token: str, owner: str) -> int:
        """ERC20 balance of owner."""
        token, owner = self._validate_addresses([token, owner])
        return await self._call_uint256(token, BALANCE_OF, ["address"], [owner])

    async def pool_reserve_of(self, token: str) -> int:
        """Quantity of token held by the pool contract."""
        return await self.balance_of(token, self.pool_address)

    async def allowance_of(self, token: str, owner: str, spender: Optional[str] = None) -> int:
        """ERC20 allowance granted by owner to spender (the pool by default)."""
        token, owner, spender = self._validate_addresses([token, owner, spender or self.pool_address])
        return await self._call_uint256(token, ALLOWANCE, ["address", "address"], [owner, spender])

    async def pool_share_balance_of(self, account: str) -> int:
        """Pool-share balance of account; the pool reads it from msg.sender."""
        (account,) = self._validate_addresses([account])
        return await self._call_uint256(self.pool_address, LIQUIDITY_TOKEN_BALANCE, sender=account)

    async def pool_share_supply(self) -> int:
        """Total pool-share supply."""
        return await self._call_uint256(self.pool_address, TOTAL_LIQUIDITY_TOKEN_SUPPLY)
