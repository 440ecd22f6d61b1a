"""Tests for the wallet engine: ledger entries, credit limit and admin operations."""

from __future__ import annotations

from decimal import Decimal
from unittest import mock

import pytest

from apps.wallets import services
from apps.wallets.exceptions import (
    InsufficientBalance,
    InvalidAmount,
    InvalidPaymentMethod,
    InvalidTransactionType,
    UserNotFound,
    WalletNotFound,
)
from apps.wallets.models import Wallet, WalletTransaction


def _ledger_matches_balance(user_id) -> bool:
    wallet = Wallet.objects.get(user_id=user_id)
    total = sum((entry.amount for entry in wallet.transactions.all()), Decimal("0.00"))
    return total == wallet.balance


@pytest.mark.django_db
def test_top_up_creates_wallet_lazily(player, clock):
    assert services.get_wallet(player.id) is None

    entry = services.top_up(player.id, "100.00", "flouci", reference_id="FL-123", clock=clock)

    wallet = services.get_wallet(player.id)
    assert wallet.balance == Decimal("100.00")
    assert wallet.max_negative_balance == Decimal("0.00")
    assert entry.type == WalletTransaction.Type.TOPUP
    assert entry.amount == Decimal("100.00")
    assert entry.payment_method == "flouci"
    assert entry.reference_id == "FL-123"
    assert entry.description == "Wallet top-up via flouci"
    assert entry.created_at == clock.now()


@pytest.mark.django_db
@pytest.mark.parametrize("amount", ["0", "-5.00", "abc"])
def test_top_up_requires_positive_amount(amount, player, clock):
    with pytest.raises(InvalidAmount):
        services.top_up(player.id, amount, "d17", clock=clock)

    assert not Wallet.objects.exists()


@pytest.mark.django_db
def test_top_up_rejects_unknown_payment_method(player, clock):
    with pytest.raises(InvalidPaymentMethod):
        services.top_up(player.id, "10.00", "paypal", clock=clock)

    assert not Wallet.objects.exists()


@pytest.mark.django_db
def test_top_up_for_unknown_user_is_refused(clock):
    with pytest.raises(UserNotFound):
        services.top_up(987654, "10.00", "flouci", clock=clock)


@pytest.mark.django_db
def test_debit_may_use_the_credit_limit_but_not_beyond(player, clock):
    services.top_up(player.id, "100.00", "edinar", clock=clock)
    services.set_max_negative_balance(player.id, "50.00", clock=clock)

    services.debit(player.id, "150.00", "booking_payment", clock=clock)
    assert services.get_wallet(player.id).balance == Decimal("-50.00")

    with pytest.raises(InsufficientBalance) as excinfo:
        services.debit(player.id, "0.01", "booking_payment", clock=clock)

    assert excinfo.value.context["available"] == Decimal("0.00")
    assert excinfo.value.context["required"] == Decimal("0.01")
    wallet = services.get_wallet(player.id)
    assert wallet.balance == Decimal("-50.00")
    assert wallet.transactions.count() == 2
    assert _ledger_matches_balance(player.id)


@pytest.mark.django_db
def test_refused_debit_leaves_no_trace(player, clock, django_capture_on_commit_callbacks):
    services.top_up(player.id, "20.00", "flouci", clock=clock)

    with django_capture_on_commit_callbacks() as callbacks:
        with pytest.raises(InsufficientBalance):
            services.debit(player.id, "20.01", "tournament_fee", clock=clock)

    assert callbacks == []
    wallet = services.get_wallet(player.id)
    assert wallet.balance == Decimal("20.00")
    assert list(wallet.transactions.values_list("type", flat=True)) == ["topup"]


@pytest.mark.django_db
def test_debit_requires_existing_wallet(player, clock):
    with pytest.raises(WalletNotFound):
        services.debit(player.id, "1.00", "booking_payment", clock=clock)


@pytest.mark.django_db
@pytest.mark.parametrize("tx_type", ["topup", "facility_payout", "admin_adjustment", "refund"])
def test_debit_rejects_non_debit_types(tx_type, player, clock):
    services.top_up(player.id, "20.00", "flouci", clock=clock)

    with pytest.raises(InvalidTransactionType):
        services.debit(player.id, "1.00", tx_type, clock=clock)


@pytest.mark.django_db
def test_debit_records_negative_entry(player, clock):
    services.top_up(player.id, "80.00", "flouci", clock=clock)

    entry = services.debit(
        player.id,
        Decimal("30.00"),
        "tournament_fee",
        description="Ramadan Cup entry",
        reference_id="tournament:7",
        clock=clock,
    )

    assert entry.amount == Decimal("-30.00")
    assert entry.type == WalletTransaction.Type.TOURNAMENT_FEE
    assert entry.payment_method is None
    assert services.get_wallet(player.id).balance == Decimal("50.00")


@pytest.mark.django_db
def test_debit_of_exactly_the_remaining_cents_succeeds(player, clock):
    services.top_up(player.id, "0.70", "flouci", clock=clock)
    services.debit(player.id, "0.40", "booking_payment", clock=clock)

    services.debit(player.id, "0.30", "booking_payment", clock=clock)

    wallet = services.get_wallet(player.id)
    assert wallet.balance == Decimal("0.00")
    assert _ledger_matches_balance(player.id)
    with pytest.raises(InsufficientBalance):
        services.debit(player.id, "0.01", "booking_payment", clock=clock)


@pytest.mark.django_db
def test_debit_down_to_the_credit_floor_after_fractional_moves(player, clock):
    services.top_up(player.id, "10.10", "d17", clock=clock)
    services.set_max_negative_balance(player.id, "0.20", clock=clock)
    services.debit(player.id, "3.30", "tournament_fee", clock=clock)
    services.credit(player.id, "0.10", "admin_adjustment", clock=clock)

    services.debit(player.id, "7.10", "booking_payment", clock=clock)

    assert services.get_wallet(player.id).balance == Decimal("-0.20")
    assert _ledger_matches_balance(player.id)


@pytest.mark.django_db
def test_credit_creates_wallet_and_adds(owner, clock):
    entry = services.credit(owner.id, "425.00", "facility_payout", description="June payout", clock=clock)

    assert entry.amount == Decimal("425.00")
    assert services.get_wallet(owner.id).balance == Decimal("425.00")


@pytest.mark.django_db
@pytest.mark.parametrize("tx_type", ["topup", "booking_payment", "tournament_fee"])
def test_credit_rejects_non_credit_types(tx_type, owner, clock):
    with pytest.raises(InvalidTransactionType):
        services.credit(owner.id, "1.00", tx_type, clock=clock)


@pytest.mark.django_db
def test_check_balance_counts_credit_limit(player, clock):
    assert services.check_balance(player.id, "1.00") is False

    services.top_up(player.id, "10.00", "flouci", clock=clock)
    services.set_max_negative_balance(player.id, "5.00", clock=clock)

    assert services.check_balance(player.id, "15.00") is True
    assert services.check_balance(player.id, "15.01") is False


@pytest.mark.django_db
def test_list_transactions_newest_first_with_limit(player, clock):
    assert services.list_transactions(player.id) == []

    for amount in ("10.00", "20.00", "30.00"):
        services.top_up(player.id, amount, "flouci", clock=clock)
        clock.tick(seconds=1)

    entries = services.list_transactions(player.id)
    assert [entry.amount for entry in entries] == [Decimal("30.00"), Decimal("20.00"), Decimal("10.00")]
    assert len(services.list_transactions(player.id, limit=2)) == 2


@pytest.mark.django_db
def test_set_max_negative_balance_validation(player, clock):
    with pytest.raises(WalletNotFound):
        services.set_max_negative_balance(player.id, "10.00", clock=clock)

    services.top_up(player.id, "1.00", "flouci", clock=clock)
    with pytest.raises(InvalidAmount):
        services.set_max_negative_balance(player.id, "-1.00", clock=clock)

    wallet = services.set_max_negative_balance(player.id, "0", clock=clock)
    assert wallet.max_negative_balance == Decimal("0.00")


@pytest.mark.django_db
def test_adjust_balance_may_cross_the_floor(player, clock):
    services.top_up(player.id, "10.00", "flouci", clock=clock)

    entry = services.adjust_balance(player.id, "-25.00", "Chargeback on FL-9", clock=clock)

    assert entry.type == WalletTransaction.Type.ADMIN_ADJUSTMENT
    assert entry.amount == Decimal("-25.00")
    assert entry.reference_id == f"admin_adj_{int(clock.now().timestamp() * 1000)}"
    assert services.get_wallet(player.id).balance == Decimal("-15.00")
    assert _ledger_matches_balance(player.id)


@pytest.mark.django_db
def test_adjust_balance_rejects_zero(player, clock):
    services.top_up(player.id, "10.00", "flouci", clock=clock)

    with pytest.raises(InvalidAmount):
        services.adjust_balance(player.id, "0.00", "noop", clock=clock)


@pytest.mark.django_db
def test_ledger_sum_equals_balance_after_mixed_operations(player, clock):
    services.top_up(player.id, "200.00", "flouci", clock=clock)
    services.set_max_negative_balance(player.id, "40.00", clock=clock)
    services.debit(player.id, "150.00", "booking_payment", clock=clock)
    services.debit(player.id, "75.50", "tournament_fee", clock=clock)
    services.credit(player.id, "12.25", "admin_adjustment", clock=clock)
    with pytest.raises(InsufficientBalance):
        services.debit(player.id, "100.00", "booking_payment", clock=clock)

    wallet = services.get_wallet(player.id)
    assert wallet.balance == Decimal("-13.25")
    assert wallet.balance >= -wallet.max_negative_balance
    assert _ledger_matches_balance(player.id)


@pytest.mark.django_db
def test_ledger_entries_are_immutable(player, clock):
    entry = services.top_up(player.id, "10.00", "flouci", clock=clock)

    entry.amount = Decimal("99.00")
    with pytest.raises(ValueError):
        entry.save()
    with pytest.raises(ValueError):
        entry.delete()


@pytest.mark.django_db
def test_mutation_notifies_after_commit(player, clock, django_capture_on_commit_callbacks):
    from apps.wallets import tasks

    with mock.patch.object(tasks.notify_wallet_transaction, "delay") as delay:
        with django_capture_on_commit_callbacks(execute=True):
            entry = services.top_up(player.id, "10.00", "flouci", clock=clock)

    delay.assert_called_once_with(entry.id)
