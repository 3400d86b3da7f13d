from core.models import BaseModel
from django.db import models

from apps.account.models import Doctor, Patient
from apps.appointment.models import Appointment


class Report(BaseModel):
    """A medical report file attached to a patient by a doctor"""

    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="reports")
    patient = models.ForeignKey(
        Patient, on_delete=models.CASCADE, related_name="reports"
    )
    appointment = models.ForeignKey(
        Appointment,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reports",
    )
    file_url = models.URLField(max_length=500)
    file_type = models.CharField(max_length=50, blank=True)
    description = models.TextField(blank=True)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "reports"
        ordering = ["-uploaded_at"]

    def __str__(self):
        return f"{self.patient.user.full_name} - {self.file_type or 'report'}"
