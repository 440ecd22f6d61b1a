"""API views for the wallet ledger.

Players and facility owners see and top up their own wallet through the
``me`` routes. Debits, credits, adjustments, credit limits and settlement
reports are restricted to platform administrators. Domain errors raised by
the wallet engine are turned into responses by the project exception handler.
"""

from __future__ import annotations

import logging

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsPlatformAdmin

from . import services, settlements
from .exceptions import WalletNotFound
from .serializers import (
    AdjustBalanceSerializer,
    CheckBalanceSerializer,
    CreditLimitSerializer,
    FacilityWalletSummarySerializer,
    SettlementSerializer,
    TopUpSerializer,
    WalletEntrySerializer,
    WalletSerializer,
    WalletTransactionSerializer,
)

logger = logging.getLogger(__name__)

ADMIN_ACTIONS = {
    "settlements",
    "facility_summary",
    "debit",
    "credit",
    "adjust",
    "credit_limit",
}


class WalletViewSet(viewsets.GenericViewSet):
    """Wallet self-service and administration."""

    serializer_class = WalletSerializer
    lookup_field = "user_id"
    lookup_value_regex = r"\d+"

    def get_permissions(self):  # type: ignore
        if self.action in ADMIN_ACTIONS:
            return [permissions.IsAuthenticated(), IsPlatformAdmin()]
        return [permissions.IsAuthenticated()]

    def _wallet_response(self, user_id, http_status=status.HTTP_200_OK) -> Response:
        wallet = services.get_wallet(user_id)
        if wallet is None:
            raise WalletNotFound(f"Wallet for user {user_id} not found", user_id=user_id)
        return Response(WalletSerializer(wallet).data, status=http_status)

    # --- self-service ---------------------------------------------------------

    @action(detail=False, methods=["get"], url_path="me")
    def me(self, request):  # type: ignore
        """Кошелёк текущего пользователя."""
        return self._wallet_response(request.user.id)

    @action(detail=False, methods=["get"], url_path="me/transactions")
    def transactions(self, request):  # type: ignore
        """История операций, новые сверху. Параметр ?limit= ограничивает выдачу."""
        limit = request.query_params.get("limit")
        try:
            limit = int(limit) if limit is not None else None
        except ValueError:
            return Response(
                {"detail": "limit must be an integer.", "code": "invalid", "context": {"limit": limit}},
                status=status.HTTP_400_BAD_REQUEST,
            )
        entries = services.list_transactions(request.user.id, limit=limit)
        return Response(WalletTransactionSerializer(entries, many=True).data)

    @action(detail=False, methods=["post"], url_path="me/top-up")
    def top_up(self, request):  # type: ignore
        """Пополнение кошелька через платёжный сервис."""
        serializer = TopUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        entry = services.top_up(
            request.user.id,
            data["amount"],
            data["payment_method"],
            reference_id=data.get("reference_id"),
        )
        logger.info(f"User {request.user.id} topped up {entry.amount} via {entry.payment_method}")
        return Response(WalletTransactionSerializer(entry).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path="me/check-balance")
    def check_balance(self, request):  # type: ignore
        serializer = CheckBalanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        required = serializer.validated_data["required_amount"]
        return Response({
            "required_amount": required,
            "sufficient": services.check_balance(request.user.id, required),
        })

    # --- administration -------------------------------------------------------

    @action(detail=False, methods=["get"], url_path="settlements")
    def settlements(self, request):  # type: ignore
        """Месячные расчёты с владельцами площадок: выплаты и взыскания."""
        report = settlements.financial_settlements()
        return Response(SettlementSerializer(report, many=True).data)

    @action(detail=False, methods=["get"], url_path="facility-summary")
    def facility_summary(self, request):  # type: ignore
        report = settlements.facility_wallet_summary()
        return Response(FacilityWalletSummarySerializer(report, many=True).data)

    @action(detail=True, methods=["post"], url_path="debit")
    def debit(self, request, user_id=None):  # type: ignore
        serializer = WalletEntrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        entry = services.debit(
            int(user_id),
            data["amount"],
            data["type"],
            description=data.get("description"),
            reference_id=data.get("reference_id"),
        )
        return Response(WalletTransactionSerializer(entry).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="credit")
    def credit(self, request, user_id=None):  # type: ignore
        serializer = WalletEntrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        entry = services.credit(
            int(user_id),
            data["amount"],
            data["type"],
            description=data.get("description"),
            reference_id=data.get("reference_id"),
        )
        return Response(WalletTransactionSerializer(entry).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="adjust")
    def adjust(self, request, user_id=None):  # type: ignore
        """Ручная корректировка баланса администратором (без учёта кредитного лимита)."""
        serializer = AdjustBalanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        entry = services.adjust_balance(int(user_id), data["amount"], data["description"])
        logger.info(f"Admin {request.user.id} adjusted wallet of user {user_id} by {entry.amount}")
        return Response(WalletTransactionSerializer(entry).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="credit-limit")
    def credit_limit(self, request, user_id=None):  # type: ignore
        serializer = CreditLimitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        wallet = services.set_max_negative_balance(int(user_id), serializer.validated_data["amount"])
        return Response(WalletSerializer(wallet).data)
