"""Admin registration for facilities and pitches."""

from __future__ import annotations

from django.contrib import admin

from .models import Facility, Pitch


class PitchInline(admin.TabularInline):
    model = Pitch
    extra = 0
    fields = ("name", "type", "hourly_rate", "is_active")


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ("name", "city", "owner", "is_active", "created_at")
    list_filter = ("city", "is_active")
    search_fields = ("name", "city", "owner__email")
    readonly_fields = ("created_at", "updated_at")
    inlines = [PitchInline]


@admin.register(Pitch)
class PitchAdmin(admin.ModelAdmin):
    list_display = ("name", "facility", "type", "hourly_rate", "is_active")
    list_filter = ("type", "is_active")
    search_fields = ("name", "facility__name")
