import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("account", "0001_initial"),
        ("appointment", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="DoctorSlot",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                ("duration", models.PositiveIntegerField(help_text="Minutes")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("AVAILABLE", "Available"),
                            ("BOOKED", "Booked"),
                            ("EXPIRED", "Expired"),
                        ],
                        default="AVAILABLE",
                        max_length=10,
                    ),
                ),
                (
                    "appointment",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.RESTRICT,
                        related_name="slot",
                        to="appointment.appointment",
                    ),
                ),
                (
                    "doctor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="slots",
                        to="account.doctor",
                    ),
                ),
            ],
            options={
                "db_table": "doctor_slots",
                "ordering": ["start_time"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("appointment__isnull", False), ("status", "BOOKED")
                            ),
                            models.Q(
                                models.Q(("status", "BOOKED"), _negated=True),
                                ("appointment__isnull", True),
                            ),
                            _connector="OR",
                        ),
                        name="slot_booked_iff_appointment",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("end_time__gt", models.F("start_time"))
                        ),
                        name="slot_end_after_start",
                    ),
                ],
            },
        ),
    ]
