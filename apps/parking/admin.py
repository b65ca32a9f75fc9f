"""Admin registrations for the parking domain."""

from __future__ import annotations

from django.contrib import admin

from .models import ParkingSlot, ParkingSpace


class ParkingSlotInline(admin.TabularInline):
    model = ParkingSlot
    extra = 0
    fields = ("slot_number", "vehicle_type", "is_active")
    readonly_fields = ("slot_number", "vehicle_type")


@admin.register(ParkingSpace)
class ParkingSpaceAdmin(admin.ModelAdmin):
    list_display = (
        "place_name",
        "owner",
        "total_slots_car",
        "total_slots_bike",
        "total_slots_other",
        "is_active",
        "created_at",
    )
    list_filter = ("is_active",)
    search_fields = ("place_name", "address", "owner__email")
    readonly_fields = ("next_slot_number", "created_at", "updated_at")
    inlines = [ParkingSlotInline]


@admin.register(ParkingSlot)
class ParkingSlotAdmin(admin.ModelAdmin):
    list_display = ("space", "slot_number", "vehicle_type", "is_active")
    list_filter = ("vehicle_type", "is_active")
    search_fields = ("space__place_name",)
    readonly_fields = ("space", "slot_number", "vehicle_type")
