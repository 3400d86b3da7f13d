from core.models import BaseModel
from django.contrib.auth.models import AbstractUser
from django.db import models

from core.enum import UserType


class User(AbstractUser, BaseModel):
    full_name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    mobile_number = models.CharField(max_length=20, blank=True)
    user_type = models.CharField(
        max_length=10,
        choices=UserType.choices(),
        default=UserType.PATIENT.value,
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username", "full_name"]

    class Meta:
        db_table = "users"

    def __str__(self):
        return self.full_name

    @property
    def role(self) -> UserType:
        return UserType(self.user_type)


class Doctor(BaseModel):
    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name="doctor_profile"
    )
    specialization = models.CharField(max_length=100, blank=True)
    license_number = models.CharField(max_length=50, blank=True)
    experience_years = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        db_table = "doctors"

    def __str__(self):
        return f"Dr. {self.user.full_name}"


class Patient(BaseModel):
    BLOOD_GROUP_CHOICES = [
        ("A+", "A+"),
        ("A-", "A-"),
        ("B+", "B+"),
        ("B-", "B-"),
        ("AB+", "AB+"),
        ("AB-", "AB-"),
        ("O+", "O+"),
        ("O-", "O-"),
    ]

    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name="patient_profile"
    )
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=20, blank=True)
    blood_group = models.CharField(
        max_length=3, choices=BLOOD_GROUP_CHOICES, blank=True
    )
    medical_notes = models.TextField(blank=True)

    class Meta:
        db_table = "patients"

    def __str__(self):
        return self.user.full_name


class DoctorPatient(BaseModel):
    """A patient followed by a doctor, independent of any single appointment"""

    doctor = models.ForeignKey(
        Doctor, on_delete=models.CASCADE, related_name="patient_links"
    )
    patient = models.ForeignKey(
        Patient, on_delete=models.CASCADE, related_name="doctor_links"
    )

    class Meta:
        db_table = "doctor_patients"
        constraints = [
            models.UniqueConstraint(
                fields=["doctor", "patient"], name="unique_doctor_patient_link"
            )
        ]

    def __str__(self):
        return f"{self.doctor} -> {self.patient}"
