from core.models import BaseModel
from django.db import models

from apps.account.models import Doctor, Patient
from core.enum import AppointmentStatus


class Appointment(BaseModel):

    patient = models.ForeignKey(
        Patient, on_delete=models.CASCADE, related_name="appointments"
    )
    doctor = models.ForeignKey(
        Doctor, on_delete=models.CASCADE, related_name="appointments"
    )
    appointment_date = models.DateTimeField()
    reason = models.TextField(blank=True)
    status = models.CharField(
        max_length=15,
        choices=AppointmentStatus.choices(),
        default=AppointmentStatus.UPCOMING.value,
    )

    class Meta:
        db_table = "appointments"
        ordering = ["appointment_date"]
        indexes = [
            models.Index(
                fields=["doctor", "appointment_date", "status"],
                name="appointment_doctor_date_idx",
            )
        ]

    def __str__(self):
        return f"{self.patient.user.full_name} - {self.doctor.user.full_name}"
