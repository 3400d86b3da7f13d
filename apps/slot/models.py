from core.models import BaseModel
from django.db import models

from apps.account.models import Doctor
from apps.appointment.models import Appointment
from core.enum import SlotStatus


class DoctorSlot(BaseModel):
    """A doctor-defined bookable time interval"""

    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="slots")
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    duration = models.PositiveIntegerField(help_text="Minutes")
    status = models.CharField(
        max_length=10,
        choices=SlotStatus.choices(),
        default=SlotStatus.AVAILABLE.value,
    )
    # Deleting the appointment releases the slot first, see apps.appointment.signals
    appointment = models.OneToOneField(
        Appointment,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="slot",
    )

    class Meta:
        db_table = "doctor_slots"
        ordering = ["start_time"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(status=SlotStatus.BOOKED.value, appointment__isnull=False)
                    | (
                        ~models.Q(status=SlotStatus.BOOKED.value)
                        & models.Q(appointment__isnull=True)
                    )
                ),
                name="slot_booked_iff_appointment",
            ),
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="slot_end_after_start",
            ),
        ]

    def __str__(self):
        return f"{self.doctor} {self.start_time:%Y-%m-%d %H:%M} ({self.status})"
