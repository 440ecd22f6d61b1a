"""Event handlers for the wallet domain: hand committed events to Celery."""

import logging

from .events import WalletTransactionRecorded

logger = logging.getLogger(__name__)


def on_wallet_transaction_recorded(event: WalletTransactionRecorded) -> None:
    from .tasks import notify_wallet_transaction

    notify_wallet_transaction.delay(event.transaction_id)
    logger.debug(f"Queued notification for wallet transaction {event.transaction_id}")
