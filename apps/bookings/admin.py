"""Admin registrations for the booking domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "space",
        "slot",
        "renter",
        "vehicle_type",
        "start_time",
        "end_time",
        "total_amount",
        "status",
        "cancelled_by",
    )
    list_filter = ("status", "vehicle_type", "cancelled_by")
    search_fields = ("renter__email", "space__place_name")
    date_hierarchy = "start_time"
    readonly_fields = (
        "renter",
        "space",
        "slot",
        "vehicle_type",
        "start_time",
        "hourly_rate",
        "created_at",
        "updated_at",
    )
