"""
Settlement reporting over facility-owner wallets.

Read-only: nothing here writes to the ledger. Only facility owners that
already have a wallet appear in the reports.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db.models import DecimalField, Q, Sum, Value  # type: ignore
from django.db.models.functions import Coalesce  # type: ignore

from apps.users.models import CustomUser
from shared.domain.value_objects import quantize_amount

from .models import Wallet, WalletTransaction

logger = logging.getLogger(__name__)

PAYOUT = "payout"
COLLECTION = "collection"


def revenue_share() -> Decimal:
    """Fraction of gross booking payments owed to the facility owner."""
    return Decimal(str(getattr(settings, "WALLET_FACILITY_REVENUE_SHARE", "0.85")))


def _owner_wallets():
    return (
        Wallet.objects
        .filter(user__role=CustomUser.RoleChoices.FACILITY_OWNER)
        .select_related("user")
        .order_by("user_id")
    )


def facility_wallet_summary() -> list[dict]:
    """
    One row per facility owner wallet:
    ``{"user_id", "balance", "owed_amount"}``.

    owed_amount is the revenue share of the absolute sum of the wallet's
    booking_payment entries.
    """

    share = revenue_share()
    wallets = _owner_wallets().annotate(
        booking_payments=Coalesce(
            Sum(
                "transactions__amount",
                filter=Q(transactions__type=WalletTransaction.Type.BOOKING_PAYMENT),
            ),
            Value(Decimal("0.00")),
            output_field=DecimalField(max_digits=15, decimal_places=2),
        )
    )

    summary = []
    for wallet in wallets:
        gross = abs(Decimal(str(wallet.booking_payments)))
        summary.append({
            "user_id": wallet.user_id,
            "balance": quantize_amount(wallet.balance),
            "owed_amount": quantize_amount(gross * share),
        })
    return summary


def settlement_for(balance: Decimal, max_negative_balance: Decimal) -> tuple[str, Decimal] | None:
    """
    (settlement_type, amount) for one wallet, or None when nothing is due.

    A positive balance is paid out in full; a balance below the credit
    floor is collected down to the floor.
    """

    if balance > 0:
        return PAYOUT, quantize_amount(balance)
    if balance < -max_negative_balance:
        return COLLECTION, quantize_amount(abs(balance + max_negative_balance))
    return None


def financial_settlements() -> list[dict]:
    """
    ``{"owner_id", "name", "balance", "settlement_amount", "settlement_type"}``
    for every facility owner wallet with a payout or collection due.
    """

    settlements = []
    for wallet in _owner_wallets():
        due = settlement_for(wallet.balance, wallet.max_negative_balance)
        if due is None:
            continue
        settlement_type, amount = due
        settlements.append({
            "owner_id": wallet.user_id,
            "name": wallet.user.display_name,
            "balance": quantize_amount(wallet.balance),
            "settlement_amount": amount,
            "settlement_type": settlement_type,
        })

    logger.info(f"Computed {len(settlements)} financial settlements")
    return settlements
