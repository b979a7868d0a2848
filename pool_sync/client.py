"""
Pool client wiring.

Builds the ledger poller and the price stream from configuration and exposes
their cells together with the add/remove liquidity forms:

    client = PoolClient.from_config(get_config())
    await client.start()
    client.connect_wallet("0x...")
    ...
    await client.close()
"""

import logging
from typing import Optional

from web3 import AsyncHTTPProvider, AsyncWeb3

from .config.manager import ConfigManager
from .config.tokens import TokenConfig
from .ledger.poller import DEFAULT_POLL_INTERVAL, LedgerStatePoller
from .ledger.reader import LedgerReader
from .ledger.writer import LedgerWriter
from .liquidity.forms import AddLiquidityForm, RemoveLiquidityForm
from .prices.aggregator import PriceStreamAggregator
from .prices.exchange_rate import ExchangeRateTracker
from .prices.subscription import PriceSubscription, build_price_subscription

logger = logging.getLogger(__name__)


class PoolClient:
    """Keeps one wallet's view of the pool and the price stream in sync."""

    def __init__(
        self,
        base_token: TokenConfig,
        quote_token: TokenConfig,
        reader: LedgerReader,
        subscription: PriceSubscription,
        writer: Optional[LedgerWriter] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        confirmation_timeout: Optional[float] = None,
        approval_amount_override: Optional[int] = None,
    ):
        self.base_token = base_token
        self.quote_token = quote_token
        self.poller = LedgerStatePoller(reader, base_token, quote_token, interval=poll_interval)
        self.prices = PriceStreamAggregator(
            subscription, [base_token.price_feed_id, quote_token.price_feed_id]
        )
        self.exchange_rate = ExchangeRateTracker(
            self.prices.prices, base_token.price_feed_id, quote_token.price_feed_id
        )
        self.add_liquidity = AddLiquidityForm(
            base_token,
            quote_token,
            self.poller.chain_state,
            self.poller.approvals,
            self.exchange_rate.rate,
            writer=writer,
            confirmation_timeout=confirmation_timeout,
            approval_amount_override=approval_amount_override,
        )
        self.remove_liquidity = RemoveLiquidityForm(
            base_token, quote_token, self.poller.chain_state, writer=writer
        )

    @classmethod
    def from_config(cls, config: ConfigManager, web3: Optional[AsyncWeb3] = None) -> "PoolClient":
        """Create a client with web3 ledger access and the NATS price relay."""
        ledger = config.ledger
        if web3 is None:
            web3 = AsyncWeb3(AsyncHTTPProvider(ledger.RPC_URL))
        pool_address = ledger.swap_contract_address
        return cls(
            base_token=config.base_token,
            quote_token=config.quote_token,
            reader=LedgerReader(web3, pool_address),
            writer=LedgerWriter(web3, pool_address),
            subscription=build_price_subscription(config.price_service),
            poll_interval=ledger.POLL_INTERVAL_SECONDS,
            confirmation_timeout=ledger.APPROVAL_CONFIRMATION_TIMEOUT,
            approval_amount_override=ledger.approval_amount_override,
        )

    @property
    def account(self) -> Optional[str]:
        return self.poller.account

    async def start(self):
        """Open the price subscription and start ledger polling."""
        await self.prices.start()
        self.poller.start()

    def connect_wallet(self, account: Optional[str]):
        """Track a wallet account; None disconnects it."""
        self.poller.set_account(account)

    async def close(self):
        await self.poller.stop()
        self.add_liquidity.close()
        self.exchange_rate.close()
        await self.prices.close()
        logger.info("Pool client closed")
