from core.models import BaseModel
from django.db import models

from apps.account.models import Doctor, Patient
from apps.appointment.models import Appointment


class Prescription(BaseModel):
    doctor = models.ForeignKey(
        Doctor, on_delete=models.CASCADE, related_name="prescriptions"
    )
    patient = models.ForeignKey(
        Patient, on_delete=models.CASCADE, related_name="prescriptions"
    )
    # Kept when the appointment is deleted
    appointment = models.OneToOneField(
        Appointment,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="prescription",
    )
    diagnosis = models.TextField(blank=True)
    medicines = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        db_table = "prescriptions"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.patient.user.full_name} - {self.created_at:%Y-%m-%d}"
