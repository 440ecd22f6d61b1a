"""Wallet ledger models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Wallet(models.Model):
    """Кошелёк пользователя: баланс может уходить в минус до кредитного лимита."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="wallet",
    )
    balance = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    max_negative_balance = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("How far the balance may go below zero before debits are refused."),
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _("Wallet")
        verbose_name_plural = _("Wallets")
        ordering = ["user_id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_negative_balance__gte=0),
                name="wallet_credit_limit_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"Wallet of {self.user_id}: {self.balance}"

    @property
    def available_balance(self) -> Decimal:
        """Balance plus the credit limit: the most a debit may take."""
        return self.balance + self.max_negative_balance

    def can_cover(self, amount: Decimal) -> bool:
        return self.available_balance >= amount


class WalletTransaction(models.Model):
    """Неизменяемая запись журнала; сумма со знаком (+ пополнение, - списание)."""

    class Type(models.TextChoices):
        TOPUP = "topup", _("Top-up")
        BOOKING_PAYMENT = "booking_payment", _("Booking payment")
        TOURNAMENT_FEE = "tournament_fee", _("Tournament fee")
        FACILITY_PAYOUT = "facility_payout", _("Facility payout")
        ADMIN_ADJUSTMENT = "admin_adjustment", _("Admin adjustment")

    class PaymentMethod(models.TextChoices):
        FLOUCI = "flouci", _("Flouci")
        EDINAR = "edinar", _("e-Dinar")
        D17 = "d17", _("D17")

    wallet = models.ForeignKey(
        Wallet,
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    type = models.CharField(max_length=32, choices=Type.choices)
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    description = models.TextField(null=True, blank=True)
    reference_id = models.CharField(max_length=255, null=True, blank=True)
    payment_method = models.CharField(
        max_length=16,
        choices=PaymentMethod.choices,
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _("Wallet transaction")
        verbose_name_plural = _("Wallet transactions")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(amount=0),
                name="wallet_transaction_non_zero",
            ),
        ]
        indexes = [
            models.Index(fields=["wallet", "-created_at"], name="wallet_tx_recent_idx"),
            models.Index(fields=["type"], name="wallet_tx_type_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.type} {self.amount} on wallet {self.wallet_id}"

    def save(self, *args, **kwargs):  # type: ignore
        if not self._state.adding:
            raise ValueError("Wallet transactions are immutable once recorded.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):  # type: ignore
        raise ValueError("Wallet transactions are immutable once recorded.")
