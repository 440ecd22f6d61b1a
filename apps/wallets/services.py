"""Wallet engine: balance mutations paired with ledger entries.

Every mutation is one unit of work that write-locks the wallet row,
re-reads the balance, stores the new balance and appends exactly one
WalletTransaction. The credit-limit check runs on the re-read Decimal
balance while the lock is held, so concurrent debits on one wallet
cannot both pass on a stale balance.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Iterable

from django.conf import settings  # type: ignore

from apps.users.models import CustomUser
from shared.application.uow import DjangoUnitOfWork
from shared.domain.clock import Clock, system_clock
from shared.domain.value_objects import quantize_amount
from shared.infrastructure.locking import lock_queryset_if_possible

from .events import WalletTransactionRecorded
from .exceptions import (
    InsufficientBalance,
    InvalidAmount,
    InvalidPaymentMethod,
    InvalidTransactionType,
    UserNotFound,
    WalletNotFound,
)
from .models import Wallet, WalletTransaction

logger = logging.getLogger(__name__)

DEBIT_TYPES = frozenset({
    WalletTransaction.Type.BOOKING_PAYMENT,
    WalletTransaction.Type.TOURNAMENT_FEE,
})
CREDIT_TYPES = frozenset({
    WalletTransaction.Type.FACILITY_PAYOUT,
    WalletTransaction.Type.ADMIN_ADJUSTMENT,
})


def _as_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidAmount(f"Amount {value!r} is not a number", amount=value) from exc
    if not amount.is_finite():
        raise InvalidAmount(f"Amount {value!r} is not a number", amount=value)
    return quantize_amount(amount)


def _positive_amount(value) -> Decimal:
    amount = _as_amount(value)
    if amount <= 0:
        raise InvalidAmount(amount=value)
    return amount


def _checked_type(tx_type, allowed: Iterable[str]) -> str:
    if tx_type not in allowed:
        raise InvalidTransactionType(
            f"Transaction type {tx_type!r} is not allowed here; expected one of {sorted(allowed)}",
            type=tx_type,
        )
    return WalletTransaction.Type(tx_type)


def _checked_payment_method(method) -> str:
    if method not in WalletTransaction.PaymentMethod.values:
        raise InvalidPaymentMethod(
            f"Unsupported payment method {method!r}",
            payment_method=method,
        )
    return WalletTransaction.PaymentMethod(method)


# --- Store access ------------------------------------------------------------

def find_wallet(user_id, *, lock: bool = False) -> Wallet | None:
    queryset = Wallet.objects.filter(user_id=user_id)
    if lock:
        queryset = lock_queryset_if_possible(queryset)
    return queryset.first()


def _lock_wallet(user_id, clock: Clock) -> Wallet | None:
    """
    Take the write lock on the user's wallet row and read it back.

    Must run inside a transaction; the lock is held until it ends.
    """

    # The UPDATE is what serialises writers on backends without SELECT ... FOR UPDATE.
    if not Wallet.objects.filter(user_id=user_id).update(updated_at=clock.now()):
        return None
    return find_wallet(user_id, lock=True)


def _get_or_create_wallet(user_id, clock: Clock) -> Wallet:
    """Locked wallet of the user, created with zero balance and limit if absent."""

    wallet = _lock_wallet(user_id, clock)
    if wallet is not None:
        return wallet

    if not CustomUser.objects.filter(pk=user_id).exists():
        raise UserNotFound(user_id=user_id)

    now = clock.now()
    wallet, created = Wallet.objects.get_or_create(
        user_id=user_id,
        defaults={
            "balance": Decimal("0.00"),
            "max_negative_balance": Decimal("0.00"),
            "created_at": now,
            "updated_at": now,
        },
    )
    if created:
        logger.info(f"Created wallet {wallet.pk} for user {user_id}")
    return _lock_wallet(user_id, clock)


def _append_entry(
    uow: DjangoUnitOfWork,
    wallet: Wallet,
    tx_type: str,
    signed_amount: Decimal,
    clock: Clock,
    *,
    description: str | None = None,
    reference_id: str | None = None,
    payment_method: str | None = None,
) -> WalletTransaction:
    """Insert the ledger entry and refresh the wallet; the balance is already moved."""

    transaction_record = WalletTransaction.objects.create(
        wallet=wallet,
        type=tx_type,
        amount=signed_amount,
        description=description,
        reference_id=reference_id,
        payment_method=payment_method,
        created_at=clock.now(),
    )
    wallet.refresh_from_db(fields=["balance", "updated_at"])

    uow.add_event(WalletTransactionRecorded(
        wallet_id=wallet.pk,
        user_id=wallet.user_id,
        transaction_id=transaction_record.pk,
        transaction_type=tx_type,
        amount=signed_amount,
        balance_after=wallet.balance,
    ))
    logger.info(
        f"Wallet {wallet.pk} (user {wallet.user_id}): {tx_type} {signed_amount:+} "
        f"-> balance {wallet.balance}"
    )
    return transaction_record


def _add_to_balance(
    uow: DjangoUnitOfWork,
    wallet: Wallet,
    tx_type: str,
    amount: Decimal,
    clock: Clock,
    **entry,
) -> WalletTransaction:
    """Move a locked wallet's balance by the signed ``amount`` and record it."""

    Wallet.objects.filter(pk=wallet.pk).update(
        balance=quantize_amount(wallet.balance + amount),
        updated_at=clock.now(),
    )
    return _append_entry(uow, wallet, tx_type, amount, clock, **entry)


# --- Public operations -------------------------------------------------------

def get_wallet(user_id) -> Wallet | None:
    return find_wallet(user_id)


def top_up(
    user_id,
    amount,
    payment_method,
    reference_id: str | None = None,
    *,
    clock: Clock | None = None,
) -> WalletTransaction:
    """Credit the wallet from an external payment, creating it if absent."""

    clock = clock or system_clock
    amount = _positive_amount(amount)
    method = _checked_payment_method(payment_method)

    with DjangoUnitOfWork() as uow:
        wallet = _get_or_create_wallet(user_id, clock)
        return _add_to_balance(
            uow,
            wallet,
            WalletTransaction.Type.TOPUP,
            amount,
            clock,
            description=f"Wallet top-up via {method}",
            reference_id=reference_id,
            payment_method=method,
        )


def debit(
    user_id,
    amount,
    tx_type,
    description: str | None = None,
    reference_id: str | None = None,
    *,
    clock: Clock | None = None,
) -> WalletTransaction:
    """
    Take ``amount`` from the wallet for a booking or tournament fee.

    Refused with InsufficientBalance, and without any lasting write, when
    balance + max_negative_balance < amount.
    """

    clock = clock or system_clock
    amount = _positive_amount(amount)
    tx_type = _checked_type(tx_type, DEBIT_TYPES)

    with DjangoUnitOfWork() as uow:
        wallet = _lock_wallet(user_id, clock)
        if wallet is None:
            raise WalletNotFound(f"Wallet for user {user_id} not found", user_id=user_id)

        if not wallet.can_cover(amount):
            logger.warning(
                f"Debit of {amount} refused for wallet {wallet.pk} (user {user_id}): "
                f"available {wallet.available_balance}"
            )
            raise InsufficientBalance(
                f"Insufficient balance: {wallet.available_balance} available, {amount} required",
                user_id=user_id,
                available=wallet.available_balance,
                required=amount,
            )

        return _add_to_balance(
            uow,
            wallet,
            tx_type,
            -amount,
            clock,
            description=description,
            reference_id=reference_id,
        )


def credit(
    user_id,
    amount,
    tx_type,
    description: str | None = None,
    reference_id: str | None = None,
    *,
    clock: Clock | None = None,
) -> WalletTransaction:
    """Add a facility payout or admin credit, creating the wallet if absent."""

    clock = clock or system_clock
    amount = _positive_amount(amount)
    tx_type = _checked_type(tx_type, CREDIT_TYPES)

    with DjangoUnitOfWork() as uow:
        wallet = _get_or_create_wallet(user_id, clock)
        return _add_to_balance(
            uow,
            wallet,
            tx_type,
            amount,
            clock,
            description=description,
            reference_id=reference_id,
        )


def check_balance(user_id, required_amount) -> bool:
    wallet = find_wallet(user_id)
    if wallet is None:
        return False
    return wallet.can_cover(_as_amount(required_amount))


def list_transactions(user_id, limit: int | None = None) -> list[WalletTransaction]:
    """Most recent first; empty when the user has no wallet."""

    if limit is None:
        limit = settings.WALLET_TRANSACTIONS_DEFAULT_LIMIT
    wallet = find_wallet(user_id)
    if wallet is None:
        return []
    return list(wallet.transactions.order_by("-created_at", "-id")[: max(int(limit), 0)])


# --- Administration ----------------------------------------------------------

def set_max_negative_balance(user_id, amount, *, clock: Clock | None = None) -> Wallet:
    """Change the wallet's credit limit; the current balance is left as is."""

    clock = clock or system_clock
    limit = _as_amount(amount)
    if limit < 0:
        raise InvalidAmount("Credit limit cannot be negative", amount=amount)

    with DjangoUnitOfWork():
        wallet = _lock_wallet(user_id, clock)
        if wallet is None:
            raise WalletNotFound(f"Wallet for user {user_id} not found", user_id=user_id)
        wallet.max_negative_balance = limit
        wallet.updated_at = clock.now()
        wallet.save(update_fields=["max_negative_balance", "updated_at"])

    logger.info(f"Wallet {wallet.pk} (user {user_id}) credit limit set to {limit}")
    return wallet


def adjust_balance(user_id, amount, description: str, *, clock: Clock | None = None) -> WalletTransaction:
    """
    Admin correction by a signed, non-zero amount.

    Not bound by the credit limit: an adjustment may leave the wallet
    below its floor, which the settlement report then flags for collection.
    """

    clock = clock or system_clock
    amount = _as_amount(amount)
    if amount == 0:
        raise InvalidAmount("Adjustment amount cannot be zero", amount=amount)

    with DjangoUnitOfWork() as uow:
        wallet = _lock_wallet(user_id, clock)
        if wallet is None:
            raise WalletNotFound(f"Wallet for user {user_id} not found", user_id=user_id)
        reference_id = f"admin_adj_{int(clock.now().timestamp() * 1000)}"
        return _add_to_balance(
            uow,
            wallet,
            WalletTransaction.Type.ADMIN_ADJUSTMENT,
            amount,
            clock,
            description=description,
            reference_id=reference_id,
        )
