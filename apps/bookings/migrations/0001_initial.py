import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("parking", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "vehicle_type",
                    models.CharField(
                        choices=[("car", "Car"), ("bike", "Bike"), ("other", "Other")],
                        help_text="Slot category at booking time.",
                        max_length=10,
                    ),
                ),
                ("start_time", models.DateTimeField()),
                (
                    "end_time",
                    models.DateTimeField(
                        blank=True,
                        help_text="Empty while the booking is open-ended.",
                        null=True,
                    ),
                ),
                (
                    "hourly_rate",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Rate fixed at booking time.",
                        max_digits=10,
                    ),
                ),
                ("total_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("confirmed", "Confirmed"), ("completed", "Completed"), ("cancelled", "Cancelled")],
                        default="confirmed",
                        max_length=20,
                    ),
                ),
                (
                    "cancelled_by",
                    models.CharField(
                        blank=True,
                        choices=[("user", "Renter"), ("owner", "Owner")],
                        max_length=10,
                        null=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "renter",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "slot",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to="parking.parkingslot",
                    ),
                ),
                (
                    "space",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to="parking.parkingspace",
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["slot", "status", "start_time"], name="booking_slot_status_idx"),
                    models.Index(fields=["renter"], name="booking_renter_idx"),
                    models.Index(fields=["space", "status"], name="booking_space_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_time__isnull", True), ("end_time__gt", models.F("start_time")), _connector="OR"),
                        name="booking_valid_interval",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("end_time__isnull", True), ("total_amount__isnull", True)),
                            models.Q(("end_time__isnull", False), ("total_amount__isnull", False)),
                            _connector="OR",
                        ),
                        name="booking_amount_iff_end",
                    ),
                ],
            },
        ),
    ]
