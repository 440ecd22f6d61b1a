"""Serializers for the wallet domain.

Input serializers only check shape; amounts, payment methods and
transaction types are validated by the wallet engine so that every
refusal carries the same error body.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Wallet, WalletTransaction


class WalletSerializer(serializers.ModelSerializer):
    available_balance = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = Wallet
        fields = [
            "id",
            "user",
            "balance",
            "max_negative_balance",
            "available_balance",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class WalletTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = WalletTransaction
        fields = [
            "id",
            "type",
            "amount",
            "description",
            "reference_id",
            "payment_method",
            "created_at",
        ]
        read_only_fields = fields


class TopUpSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    payment_method = serializers.CharField(max_length=16)
    reference_id = serializers.CharField(max_length=255, required=False, allow_null=True)


class CheckBalanceSerializer(serializers.Serializer):
    required_amount = serializers.DecimalField(max_digits=15, decimal_places=2)


class WalletEntrySerializer(serializers.Serializer):
    """Admin debit or credit of a user's wallet."""

    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    type = serializers.CharField(max_length=32)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    reference_id = serializers.CharField(max_length=255, required=False, allow_null=True)


class AdjustBalanceSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    description = serializers.CharField()


class CreditLimitSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)


class FacilityWalletSummarySerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    balance = serializers.DecimalField(max_digits=15, decimal_places=2)
    owed_amount = serializers.DecimalField(max_digits=15, decimal_places=2)


class SettlementSerializer(serializers.Serializer):
    owner_id = serializers.IntegerField()
    name = serializers.CharField()
    balance = serializers.DecimalField(max_digits=15, decimal_places=2)
    settlement_amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    settlement_type = serializers.ChoiceField(choices=["payout", "collection"])
