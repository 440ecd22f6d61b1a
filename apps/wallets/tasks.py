"""Celery tasks for the wallet domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .models import WalletTransaction
from .settlements import facility_wallet_summary, financial_settlements

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (запускаются автоматически через Celery Beat)
# ============================================================================

@shared_task(name="wallets.report_financial_settlements")
def report_financial_settlements() -> dict[str, int]:
    """
    Месячный отчёт по расчётам с владельцами площадок.

    Логирует каждую выплату и каждое взыскание; ничего не пишет в журнал.

    Returns:
        dict: {"payouts": ..., "collections": ..., "owners": ...}
    """
    settlements = financial_settlements()
    summary = facility_wallet_summary()

    payouts = 0
    collections = 0
    for entry in settlements:
        if entry["settlement_type"] == "payout":
            payouts += 1
        else:
            collections += 1
        logger.info(
            f"[SETTLEMENT] {entry['settlement_type']} {entry['settlement_amount']} "
            f"for owner {entry['owner_id']} ({entry['name']}), balance {entry['balance']}"
        )

    logger.info(
        f"Settlement report: {payouts} payouts, {collections} collections "
        f"across {len(summary)} facility owner wallets"
    )
    return {"payouts": payouts, "collections": collections, "owners": len(summary)}


# ============================================================================
# NOTIFICATION TASKS
# ============================================================================

@shared_task(name="wallets.notify_wallet_transaction")
def notify_wallet_transaction(transaction_id: int) -> bool:
    """Уведомление владельцу кошелька о новой операции."""
    try:
        entry = WalletTransaction.objects.select_related("wallet", "wallet__user").get(id=transaction_id)
    except WalletTransaction.DoesNotExist:
        logger.error(f"Wallet transaction {transaction_id} not found for notification")
        return False

    logger.info(
        f"[NOTIFICATION] Wallet {entry.get_type_display()} {entry.amount:+} "
        f"sent to {entry.wallet.user.email}, balance {entry.wallet.balance}"
    )
    return True
