"""Role-based DRF permissions shared by the booking and wallet APIs."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def is_platform_admin(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return True
    return hasattr(user, "is_platform_admin") and user.is_platform_admin()


class IsPlatformAdmin(permissions.BasePermission):
    """
    Permission class that only allows platform administrators.

    Administrators are users with role='admin' or Django staff/superusers.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_platform_admin(request.user)


class IsFacilityOwnerOrAdmin(permissions.BasePermission):
    """Facility owners manage bookings of their own facilities; admins manage all."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return is_platform_admin(user) or user.is_facility_owner()

    def has_object_permission(self, request, view, obj) -> bool:  # type: ignore
        if is_platform_admin(request.user):
            return True
        return obj.facility.owner_id == request.user.id
