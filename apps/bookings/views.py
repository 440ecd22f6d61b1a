"""API views for the booking domain."""

from __future__ import annotations

import logging

from django.db.models import Q  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import is_platform_admin

from . import services
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    AvailablePitchQuerySerializer,
    AvailablePitchSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusSerializer,
)

logger = logging.getLogger(__name__)


class IsBookingStakeholder(permissions.BasePermission):
    """Игрок, владелец площадки и администраторы имеют доступ к бронированию."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if is_platform_admin(user):
            return True
        if user.is_facility_owner() and obj.facility.owner_id == user.id:
            return True
        return obj.player_id == user.id


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset для запросов на бронирование площадок и решений по ним."""

    queryset = Booking.objects.select_related("player", "pitch", "facility", "facility__owner").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated, IsBookingStakeholder]
    filterset_class = BookingFilterSet

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if not user.is_authenticated:
            return qs.none()
        if is_platform_admin(user):
            return qs
        if user.is_facility_owner():
            return qs.filter(Q(facility__owner=user) | Q(player=user))
        return qs.filter(player=user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        booking = services.create_booking(
            request.user.id,
            data["pitch"],
            data["booking_date"],
            data["start_time"],
            data["end_time"],
            notes=data.get("notes"),
        )
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):  # type: ignore
        """
        Решение по бронированию.

        Подтверждать и отклонять может владелец площадки или администратор;
        игрок может только отменить собственное бронирование.
        """
        booking: Booking = self.get_object()  # type: ignore
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = request.user
        manages_facility = is_platform_admin(user) or booking.facility.owner_id == user.id
        if not manages_facility and data["status"] != Booking.Status.CANCELLED:
            return Response(
                {"detail": "Только владелец площадки может подтверждать или отклонять бронирования."},
                status=status.HTTP_403_FORBIDDEN,
            )

        booking = services.update_booking_status(
            booking.pk,
            data["status"],
            notes=data.get("notes"),
            pay_with_wallet=data.get("pay_with_wallet", False),
        )
        logger.info(f"User {user.id} set booking {booking.pk} to {booking.status}")
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(
        detail=False,
        methods=["get"],
        url_path="available-pitches",
        permission_classes=[permissions.AllowAny],
    )
    def available_pitches(self, request):  # type: ignore
        """Свободные площадки на заданный день и интервал времени."""
        query = AvailablePitchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        pitches = services.search_available_pitches(
            params["booking_date"],
            params["start_time"],
            params["end_time"],
            city=params.get("city"),
            pitch_type=params.get("pitch_type"),
            max_hourly_rate=params.get("max_hourly_rate"),
        )
        return Response(AvailablePitchSerializer(pitches, many=True).data)
