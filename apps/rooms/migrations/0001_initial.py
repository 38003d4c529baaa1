from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Room",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("room_number", models.CharField(max_length=20, unique=True)),
                (
                    "room_type",
                    models.CharField(
                        choices=[
                            ("standard", "Standard"),
                            ("single", "Single"),
                            ("double", "Double"),
                            ("twin", "Twin"),
                            ("suite", "Suite"),
                            ("deluxe", "Deluxe"),
                            ("family", "Family"),
                            ("studio", "Studio"),
                            ("executive", "Executive"),
                        ],
                        default="standard",
                        max_length=20,
                    ),
                ),
                (
                    "capacity",
                    models.PositiveSmallIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "price_per_night",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("available", "Available"),
                            ("occupied", "Occupied"),
                            ("maintenance", "Maintenance"),
                        ],
                        default="available",
                        max_length=20,
                    ),
                ),
                ("amenities", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["room_number"],
                "indexes": [models.Index(fields=["status"], name="room_status_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(capacity__gte=1), name="room_capacity_positive"),
                    models.CheckConstraint(condition=models.Q(price_per_night__gte=0), name="room_price_non_negative"),
                ],
            },
        ),
    ]
