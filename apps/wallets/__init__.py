"""Wallets app package.

Holds the wallet ledger: a signed balance per user plus an append-only
history of transactions whose amounts always sum to that balance.
Balances may go below zero down to a per-wallet credit limit. The
settlement reporter derives owner payouts and collections from it.
"""
