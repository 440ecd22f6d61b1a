"""Concurrent debits on one wallet never both spend the same balance."""

from __future__ import annotations

import threading
from decimal import Decimal

import pytest
from django.db import connection

from apps.wallets import services
from apps.wallets.exceptions import InsufficientBalance
from apps.wallets.models import Wallet, WalletTransaction


def _debit_in_parallel(user_id, amounts, clock):
    barrier = threading.Barrier(len(amounts))
    outcomes: list = [None] * len(amounts)

    def worker(index, amount):
        try:
            barrier.wait()
            outcomes[index] = services.debit(user_id, amount, "booking_payment", clock=clock)
        except Exception as exc:
            outcomes[index] = exc
        finally:
            connection.close()

    threads = [
        threading.Thread(target=worker, args=(index, amount))
        for index, amount in enumerate(amounts)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return outcomes


def _ledger_total(wallet: Wallet) -> Decimal:
    return sum(wallet.transactions.values_list("amount", flat=True), Decimal("0.00"))


@pytest.mark.django_db(transaction=True)
def test_two_debits_racing_for_one_balance_have_one_winner(player, clock):
    services.top_up(player.id, "100.00", "flouci", clock=clock)

    outcomes = _debit_in_parallel(player.id, ["70.00", "70.00"], clock)

    assert sum(isinstance(outcome, WalletTransaction) for outcome in outcomes) == 1, outcomes
    assert sum(isinstance(outcome, InsufficientBalance) for outcome in outcomes) == 1, outcomes
    wallet = Wallet.objects.get(user_id=player.id)
    assert wallet.balance == Decimal("30.00")
    assert _ledger_total(wallet) == wallet.balance


@pytest.mark.django_db(transaction=True)
def test_racing_debits_stop_at_the_credit_floor(player, clock):
    services.top_up(player.id, "100.00", "flouci", clock=clock)
    services.set_max_negative_balance(player.id, "20.00", clock=clock)

    outcomes = _debit_in_parallel(player.id, ["30.00"] * 5, clock)

    winners = [outcome for outcome in outcomes if isinstance(outcome, WalletTransaction)]
    refused = [outcome for outcome in outcomes if isinstance(outcome, InsufficientBalance)]
    assert len(winners) == 4, outcomes
    assert len(refused) == 1, outcomes
    wallet = Wallet.objects.get(user_id=player.id)
    assert wallet.balance == Decimal("-20.00")
    assert wallet.balance >= -wallet.max_negative_balance
    assert _ledger_total(wallet) == wallet.balance
