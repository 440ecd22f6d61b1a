"""Admin registration for wallets; the ledger is read-only here."""

from __future__ import annotations

from django.contrib import admin

from .models import Wallet, WalletTransaction


class WalletTransactionInline(admin.TabularInline):
    model = WalletTransaction
    extra = 0
    can_delete = False
    fields = ("created_at", "type", "amount", "payment_method", "reference_id", "description")
    readonly_fields = fields
    ordering = ("-created_at",)

    def has_add_permission(self, request, obj=None):  # type: ignore
        return False


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ("user", "balance", "max_negative_balance", "updated_at")
    search_fields = ("user__email", "user__full_name")
    # Balances move only through the wallet engine.
    readonly_fields = ("user", "balance", "created_at", "updated_at")
    inlines = [WalletTransactionInline]


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = ("wallet", "type", "amount", "payment_method", "created_at")
    list_filter = ("type", "payment_method")
    search_fields = ("wallet__user__email", "reference_id")

    def has_add_permission(self, request):  # type: ignore
        return False

    def has_change_permission(self, request, obj=None):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
