from datetime import timedelta

import pytest

from apps.account.models import DoctorPatient, Patient
from apps.appointment.services import AppointmentServices
from apps.prescription.models import Prescription
from apps.report.models import Report
from apps.slot.models import DoctorSlot
from core.enum import AppointmentStatus, SlotStatus


def booked_appointment_id(patient, doctor, slot):
    result = AppointmentServices.book_appointment(patient.user.id, doctor.id, slot.id)
    return result["appointment"]["id"]


@pytest.mark.django_db
class TestDoctorSlotsApi:
    """/api/doctor/slots/"""

    def test_create_slot(self, doctor_client, soon):
        response = doctor_client.post(
            "/api/doctor/slots/",
            {
                "start_time": soon.isoformat(),
                "end_time": (soon + timedelta(minutes=30)).isoformat(),
                "duration": 30,
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["slot"]["status"] == SlotStatus.AVAILABLE.value

    def test_create_slot_missing_fields(self, doctor_client):
        response = doctor_client.post("/api/doctor/slots/", {}, format="json")

        assert response.status_code == 400
        assert response.data["message"] == "Missing fields"

    def test_patient_cannot_create_slots(self, patient_client, soon):
        response = patient_client.post(
            "/api/doctor/slots/", {"start_time": soon.isoformat()}, format="json"
        )

        assert response.status_code == 403
        assert response.data["detail"] == "Access denied: insufficient privileges"

    def test_unauthenticated(self, api_client):
        assert api_client.get("/api/doctor/slots/").status_code == 401

    def test_list_shows_booking(self, doctor_client, doctor, patient, open_slot):
        booked_appointment_id(patient, doctor, open_slot)

        response = doctor_client.get("/api/doctor/slots/")

        assert response.status_code == 200
        [slot] = response.data["slots"]
        assert slot["status"] == SlotStatus.BOOKED.value
        assert slot["appointment"]["patient"]["email"] == patient.user.email

    def test_available_excludes_booked(
        self, doctor_client, doctor, patient, make_slot, soon
    ):
        booked = make_slot(doctor, soon)
        free = make_slot(doctor, soon + timedelta(hours=1))
        booked_appointment_id(patient, doctor, booked)

        response = doctor_client.get("/api/doctor/slots/available/")

        assert [s["id"] for s in response.data["slots"]] == [free.id]

    def test_delete_booked_slot(self, doctor_client, doctor, patient, open_slot):
        booked_appointment_id(patient, doctor, open_slot)

        response = doctor_client.delete(f"/api/doctor/slots/{open_slot.id}/")

        assert response.status_code == 400
        assert response.data["message"] == "Cannot delete a booked slot"

    def test_delete_other_doctors_slot(self, client_for, other_doctor, open_slot):
        response = client_for(other_doctor.user).delete(
            f"/api/doctor/slots/{open_slot.id}/"
        )

        assert response.status_code == 403
        assert response.data["message"] == "Not your slot"

    def test_delete_slot(self, doctor_client, open_slot):
        response = doctor_client.delete(f"/api/doctor/slots/{open_slot.id}/")

        assert response.status_code == 200
        assert not DoctorSlot.objects.filter(id=open_slot.id).exists()


@pytest.mark.django_db
class TestDoctorAppointmentsApi:
    """/api/doctor/appointments/"""

    def test_list_with_meta(self, doctor_client, doctor, patient, open_slot):
        booked_appointment_id(patient, doctor, open_slot)

        response = doctor_client.get("/api/doctor/appointments/", {"limit": 5})

        assert response.status_code == 200
        assert response.data["meta"] == {
            "total": 1,
            "page": 1,
            "limit": 5,
            "total_pages": 1,
        }

    def test_invalid_status_filter(self, doctor_client):
        response = doctor_client.get("/api/doctor/appointments/", {"status": "LATE"})

        assert response.status_code == 400

    def test_detail(self, doctor_client, doctor, patient, open_slot):
        appointment_id = booked_appointment_id(patient, doctor, open_slot)

        response = doctor_client.get(f"/api/doctor/appointments/{appointment_id}/")

        assert response.status_code == 200
        assert response.data["appointment"]["patient"]["blood_group"] == "B+"
        assert response.data["appointment"]["prescription"] is None

    def test_status_route(self, doctor_client, doctor, patient, open_slot):
        appointment_id = booked_appointment_id(patient, doctor, open_slot)

        response = doctor_client.put(
            f"/api/doctor/appointments/{appointment_id}/status/",
            {"status": "COMPLETED"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["appointment"]["status"] == (
            AppointmentStatus.COMPLETED.value
        )

    def test_other_doctor_gets_403(self, client_for, other_doctor, doctor, patient, open_slot):
        appointment_id = booked_appointment_id(patient, doctor, open_slot)

        response = client_for(other_doctor.user).put(
            f"/api/doctor/appointments/{appointment_id}/",
            {"status": "COMPLETED"},
            format="json",
        )

        assert response.status_code == 403

    def test_delete(self, doctor_client, doctor, patient, open_slot):
        appointment_id = booked_appointment_id(patient, doctor, open_slot)

        response = doctor_client.delete(f"/api/doctor/appointments/{appointment_id}/")

        assert response.status_code == 200
        open_slot.refresh_from_db()
        assert open_slot.status == SlotStatus.AVAILABLE.value

    def test_dashboard(self, doctor_client, doctor, patient, open_slot):
        booked_appointment_id(patient, doctor, open_slot)

        response = doctor_client.get("/api/doctor/dashboard/")

        assert response.status_code == 200
        assert response.data["stats"]["total_patients"] == 1
        assert response.data["stats"]["upcoming_appointments"] == 1
        assert response.data["stats"]["available_slots"] == 0


@pytest.mark.django_db
class TestPrescriptionApi:
    """POST /api/doctor/appointments/<id>/prescription/"""

    def test_create_then_update(self, doctor_client, doctor, patient, open_slot):
        appointment_id = booked_appointment_id(patient, doctor, open_slot)
        url = f"/api/doctor/appointments/{appointment_id}/prescription/"
        payload = {
            "diagnosis": "Seasonal flu",
            "medicines": [{"name": "Paracetamol", "dosage": "500mg"}],
        }

        created = doctor_client.post(url, payload, format="json")
        updated = doctor_client.post(
            url, {**payload, "notes": "Rest for two days"}, format="json"
        )

        assert created.status_code == 201
        assert updated.status_code == 200
        prescription = Prescription.objects.get(appointment_id=appointment_id)
        assert prescription.notes == "Rest for two days"
        assert prescription.patient_id == patient.id

    def test_other_doctor_is_forbidden(
        self, client_for, other_doctor, doctor, patient, open_slot
    ):
        appointment_id = booked_appointment_id(patient, doctor, open_slot)

        response = client_for(other_doctor.user).post(
            f"/api/doctor/appointments/{appointment_id}/prescription/",
            {"diagnosis": "Flu"},
            format="json",
        )

        assert response.status_code == 403
        assert not Prescription.objects.exists()

    def test_requires_content(self, doctor_client, doctor, patient, open_slot):
        appointment_id = booked_appointment_id(patient, doctor, open_slot)

        response = doctor_client.post(
            f"/api/doctor/appointments/{appointment_id}/prescription/",
            {"medicines": "Paracetamol"},
            format="json",
        )

        assert response.status_code == 400


@pytest.mark.django_db
class TestDoctorPatientsApi:
    """/api/doctor/patients/ and reports"""

    def test_create_new_patient(self, doctor_client, doctor):
        response = doctor_client.post(
            "/api/doctor/patients/",
            {"full_name": "Walk In", "email": "walk.in@example.com", "gender": "Male"},
            format="json",
        )

        assert response.status_code == 201
        patient = Patient.objects.get(user__email="walk.in@example.com")
        assert DoctorPatient.objects.filter(doctor=doctor, patient=patient).exists()

    def test_create_with_existing_patient_links(self, doctor_client, doctor, patient):
        response = doctor_client.post(
            "/api/doctor/patients/",
            {"full_name": "Ignored", "email": patient.user.email},
            format="json",
        )

        assert response.status_code == 200
        assert DoctorPatient.objects.filter(doctor=doctor, patient=patient).exists()

    def test_create_with_doctor_email(self, doctor_client, other_doctor):
        response = doctor_client.post(
            "/api/doctor/patients/",
            {"full_name": "Dr", "email": other_doctor.user.email},
            format="json",
        )

        assert response.status_code == 400

    def test_link_unknown_email(self, doctor_client):
        response = doctor_client.post(
            "/api/doctor/patients/link/", {"email": "ghost@example.com"}, format="json"
        )

        assert response.status_code == 404

    def test_search_and_pagination(self, doctor_client, doctor, patient, other_patient):
        DoctorPatient.objects.create(doctor=doctor, patient=patient)
        DoctorPatient.objects.create(doctor=doctor, patient=other_patient)

        response = doctor_client.get("/api/doctor/patients/", {"search": "ravi"})

        assert response.data["meta"]["total"] == 1
        assert response.data["data"][0]["email"] == other_patient.user.email

    def test_detail_unlinked_is_404(self, doctor_client, patient):
        response = doctor_client.get(f"/api/doctor/patients/{patient.id}/")

        assert response.status_code == 404

    def test_detail_update_and_unlink(self, doctor_client, doctor, linked_patient):
        url = f"/api/doctor/patients/{linked_patient.id}/"

        detail = doctor_client.get(url)
        assert detail.status_code == 200
        assert detail.data["patient"]["appointments"] == []

        updated = doctor_client.put(url, {"medical_notes": "Asthma"}, format="json")
        assert updated.status_code == 200
        assert updated.data["patient"]["medical_notes"] == "Asthma"

        unlinked = doctor_client.delete(url)
        assert unlinked.status_code == 200
        assert Patient.objects.filter(id=linked_patient.id).exists()
        assert not DoctorPatient.objects.filter(doctor=doctor).exists()

    def test_report_requires_link(self, doctor_client, patient):
        response = doctor_client.post(
            "/api/doctor/reports/",
            {"patient_id": str(patient.id), "file_url": "https://files.example.com/a.pdf"},
            format="json",
        )

        assert response.status_code == 403
        assert not Report.objects.exists()

    def test_upload_report(self, doctor_client, linked_patient):
        response = doctor_client.post(
            "/api/doctor/reports/",
            {
                "patient_id": str(linked_patient.id),
                "file_url": "https://files.example.com/cbc.pdf",
                "file_type": "pdf",
            },
            format="json",
        )

        assert response.status_code == 201
        assert Report.objects.get().patient_id == linked_patient.id

    def test_report_invalid_url(self, doctor_client, linked_patient):
        response = doctor_client.post(
            "/api/doctor/reports/",
            {"patient_id": str(linked_patient.id), "file_url": "not a url"},
            format="json",
        )

        assert response.status_code == 400
