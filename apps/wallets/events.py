"""Wallet domain events, published after the ledger write commits."""

from dataclasses import dataclass
from decimal import Decimal

from shared.domain.base import DomainEvent


@dataclass
class WalletTransactionRecorded(DomainEvent):
    """
    Event: A ledger entry was appended and the balance moved

    Triggers:
    - Notify the wallet owner
    """
    wallet_id: int
    user_id: int
    transaction_id: int
    transaction_type: str
    amount: Decimal
    balance_after: Decimal
