import uuid
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.appointment.models import Appointment
from apps.prescription.models import Prescription
from apps.report.models import Report
from core.enum import AppointmentStatus, SlotStatus


@pytest.mark.django_db
class TestPatientBookingApi:
    """/api/patient/doctors/ and /api/patient/appointments/"""

    def test_doctor_directory(self, patient_client, doctor, other_doctor):
        response = patient_client.get("/api/patient/doctors/")

        assert response.status_code == 200
        assert {d["id"] for d in response.data["data"]} == {doctor.id, other_doctor.id}

    def test_doctor_slots_lists_only_available(
        self, patient_client, doctor, make_slot, soon
    ):
        free = make_slot(doctor, soon)
        make_slot(doctor, soon - timedelta(days=5), status=SlotStatus.EXPIRED)

        response = patient_client.get(f"/api/patient/doctors/{doctor.id}/slots/")

        assert response.status_code == 200
        assert [s["id"] for s in response.data["slots"]] == [free.id]

    def test_unknown_doctor_slots(self, patient_client):
        response = patient_client.get(f"/api/patient/doctors/{uuid.uuid4()}/slots/")

        assert response.status_code == 404

    def test_book_then_conflict(self, patient_client, client_for, other_patient, doctor, open_slot):
        payload = {"doctor_id": str(doctor.id), "slot_id": str(open_slot.id)}

        first = patient_client.post("/api/patient/appointments/", payload, format="json")
        second = client_for(other_patient.user).post(
            "/api/patient/appointments/", payload, format="json"
        )

        assert first.status_code == 201
        assert first.data["message"] == "Appointment booked successfully"
        assert second.status_code == 409
        assert second.data["message"] == "Slot not available"
        assert Appointment.objects.count() == 1

    def test_book_missing_fields(self, patient_client):
        response = patient_client.post(
            "/api/patient/appointments/", {"reason": "Checkup"}, format="json"
        )

        assert response.status_code == 400
        assert response.data["message"] == "Missing fields"

    def test_book_unknown_slot(self, patient_client, doctor):
        response = patient_client.post(
            "/api/patient/appointments/",
            {"doctor_id": str(doctor.id), "slot_id": str(uuid.uuid4())},
            format="json",
        )

        assert response.status_code == 404

    def test_doctor_cannot_book(self, doctor_client, doctor, open_slot):
        response = doctor_client.post(
            "/api/patient/appointments/",
            {"doctor_id": str(doctor.id), "slot_id": str(open_slot.id)},
            format="json",
        )

        assert response.status_code == 403


@pytest.mark.django_db
class TestPatientAppointmentApi:
    """PUT/DELETE /api/patient/appointments/<id>/"""

    @pytest.fixture
    def appointment_id(self, patient_client, doctor, open_slot):
        response = patient_client.post(
            "/api/patient/appointments/",
            {"doctor_id": str(doctor.id), "slot_id": str(open_slot.id)},
            format="json",
        )
        return response.data["appointment"]["id"]

    def test_cancel(self, patient_client, appointment_id, open_slot):
        response = patient_client.put(
            f"/api/patient/appointments/{appointment_id}/",
            {"action": "cancel"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["appointment"]["status"] == (
            AppointmentStatus.CANCELLED.value
        )
        open_slot.refresh_from_db()
        assert open_slot.status == SlotStatus.AVAILABLE.value

    def test_patient_cannot_complete(self, patient_client, appointment_id):
        response = patient_client.put(
            f"/api/patient/appointments/{appointment_id}/",
            {"status": "COMPLETED"},
            format="json",
        )

        assert response.status_code == 403

    def test_invalid_status(self, patient_client, appointment_id):
        response = patient_client.put(
            f"/api/patient/appointments/{appointment_id}/",
            {"status": "MAYBE"},
            format="json",
        )

        assert response.status_code == 400

    def test_other_patient_is_forbidden(self, client_for, other_patient, appointment_id):
        response = client_for(other_patient.user).delete(
            f"/api/patient/appointments/{appointment_id}/"
        )

        assert response.status_code == 403
        assert Appointment.objects.filter(id=appointment_id).exists()

    def test_unknown_appointment(self, patient_client):
        response = patient_client.put(
            f"/api/patient/appointments/{uuid.uuid4()}/",
            {"action": "cancel"},
            format="json",
        )

        assert response.status_code == 404

    def test_delete(self, patient_client, appointment_id, open_slot):
        response = patient_client.delete(f"/api/patient/appointments/{appointment_id}/")

        assert response.status_code == 200
        assert not Appointment.objects.filter(id=appointment_id).exists()
        open_slot.refresh_from_db()
        assert open_slot.appointment_id is None

    def test_list_and_dashboard(self, patient_client, appointment_id):
        listing = patient_client.get("/api/patient/appointments/")
        dashboard = patient_client.get("/api/patient/dashboard/")

        assert listing.data["meta"]["total"] == 1
        assert listing.data["data"][0]["id"] == appointment_id
        assert dashboard.status_code == 200
        assert dashboard.data["stats"]["upcoming_appointments"] == 1
        assert dashboard.data["next_appointment"]["id"] == appointment_id


@pytest.mark.django_db
class TestPatientRecordsApi:
    """Prescriptions and reports from the patient side"""

    def test_prescriptions(self, patient_client, doctor, patient):
        prescription = Prescription.objects.create(
            doctor=doctor, patient=patient, diagnosis="Migraine", medicines=[]
        )

        listing = patient_client.get("/api/patient/prescriptions/")
        detail = patient_client.get(f"/api/patient/prescriptions/{prescription.id}/")

        assert listing.status_code == 200
        assert listing.data["meta"]["total"] == 1
        assert detail.status_code == 200
        assert detail.data["prescription"]["diagnosis"] == "Migraine"
        assert detail.data["prescription"]["appointment"] is None

    def test_other_patients_prescription(self, client_for, other_patient, doctor, patient):
        prescription = Prescription.objects.create(
            doctor=doctor, patient=patient, diagnosis="Migraine"
        )

        response = client_for(other_patient.user).get(
            f"/api/patient/prescriptions/{prescription.id}/"
        )

        assert response.status_code == 403

    def test_reports_newest_first(self, patient_client, doctor, patient):
        older = Report.objects.create(
            doctor=doctor, patient=patient, file_url="https://files.example.com/1.pdf"
        )
        newer = Report.objects.create(
            doctor=doctor, patient=patient, file_url="https://files.example.com/2.pdf"
        )
        Report.objects.filter(id=older.id).update(
            uploaded_at=timezone.now() - timedelta(days=1)
        )

        response = patient_client.get("/api/patient/reports/")

        assert response.status_code == 200
        assert [r["id"] for r in response.data["data"]] == [newer.id, older.id]
