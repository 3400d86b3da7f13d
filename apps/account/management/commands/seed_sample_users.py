from django.core.management.base import BaseCommand
from django.db import transaction

from apps.account.models import Doctor, DoctorPatient, Patient, User
from core.enum import UserType


class Command(BaseCommand):
    help = "Create sample admin, doctor and patient users for testing"

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            default="123456",
            help="Password given to every sample user",
        )

    def _get_or_create_user(self, email, full_name, user_type, password, **extra):
        user = User.objects.filter(email=email).first()
        if user:
            self.stdout.write(f"Skipped existing user: {email}")
            return user, False

        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
            full_name=full_name,
            user_type=user_type.value,
            **extra,
        )
        self.stdout.write(f"Created {user_type.value.lower()}: {email}")
        return user, True

    @transaction.atomic
    def handle(self, *args, **options):
        password = options["password"]
        self.stdout.write("Creating sample users...")

        self._get_or_create_user(
            "admin@medsi.com",
            "Admin User",
            UserType.ADMIN,
            password,
            is_staff=True,
            is_superuser=True,
        )

        doctor_user, created = self._get_or_create_user(
            "doctor@medsi.com", "Meena Sharma", UserType.DOCTOR, password
        )
        if created:
            Doctor.objects.create(
                user=doctor_user,
                specialization="Cardiology",
                license_number="DOC12345",
            )

        patient_user, created = self._get_or_create_user(
            "patient@medsi.com", "Soumya Tiwari", UserType.PATIENT, password
        )
        if created:
            Patient.objects.create(
                user=patient_user,
                gender="Female",
                blood_group="B+",
                medical_notes="No known allergies.",
            )

        doctor = Doctor.objects.filter(user=doctor_user).first()
        patient = Patient.objects.filter(user=patient_user).first()
        if doctor and patient:
            DoctorPatient.objects.get_or_create(doctor=doctor, patient=patient)

        self.stdout.write(self.style.SUCCESS("Sample users created successfully!"))
        self.stdout.write("Login credentials:")
        self.stdout.write(f"Admin: admin@medsi.com / {password}")
        self.stdout.write(f"Doctor: doctor@medsi.com / {password}")
        self.stdout.write(f"Patient: patient@medsi.com / {password}")
