"""
pool_sync: a client view of an oracle-priced constant-product liquidity pool.

Keeps ledger state (balances, reserves, pool shares, allowances) and off-chain
oracle prices in sync, and derives add/remove liquidity quotes from them.
"""

__version__ = "0.1.0"
