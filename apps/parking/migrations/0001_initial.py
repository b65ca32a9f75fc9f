import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _rate_field():
    return models.DecimalField(
        decimal_places=2,
        default=Decimal("0.00"),
        max_digits=10,
        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ParkingSpace",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("place_name", models.CharField(max_length=255)),
                ("address", models.TextField()),
                (
                    "latitude",
                    models.DecimalField(
                        blank=True,
                        decimal_places=6,
                        max_digits=9,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("-90")),
                            django.core.validators.MaxValueValidator(Decimal("90")),
                        ],
                    ),
                ),
                (
                    "longitude",
                    models.DecimalField(
                        blank=True,
                        decimal_places=6,
                        max_digits=9,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("-180")),
                            django.core.validators.MaxValueValidator(Decimal("180")),
                        ],
                    ),
                ),
                ("description", models.TextField(blank=True)),
                ("price_per_hour_car", _rate_field()),
                ("total_slots_car", models.PositiveIntegerField(default=0)),
                ("price_per_hour_bike", _rate_field()),
                ("total_slots_bike", models.PositiveIntegerField(default=0)),
                ("price_per_hour_other", _rate_field()),
                ("total_slots_other", models.PositiveIntegerField(default=0)),
                (
                    "next_slot_number",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="Next number to issue. Numbers of deleted slots are never reused.",
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="parking_spaces",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Parking space",
                "verbose_name_plural": "Parking spaces",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["owner", "is_active"], name="parking_space_owner_idx"),
                    models.Index(fields=["place_name"], name="parking_space_name_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ParkingSlot",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("slot_number", models.PositiveIntegerField()),
                (
                    "vehicle_type",
                    models.CharField(
                        choices=[("car", "Car"), ("bike", "Bike"), ("other", "Other")],
                        default="car",
                        max_length=10,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                (
                    "space",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="slots",
                        to="parking.parkingspace",
                    ),
                ),
            ],
            options={
                "verbose_name": "Parking slot",
                "verbose_name_plural": "Parking slots",
                "ordering": ["space", "slot_number"],
                "indexes": [
                    models.Index(fields=["space", "vehicle_type"], name="parking_slot_type_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("space", "slot_number"), name="parking_slot_unique_number"),
                ],
            },
        ),
    ]
