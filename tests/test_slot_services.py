from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from django.db import IntegrityError, transaction

from apps.appointment.services import AppointmentServices
from apps.slot.models import DoctorSlot
from apps.slot.services import SlotServices
from core.enum import ErrorKind, SlotStatus


@pytest.mark.django_db
class TestCreateSlot:
    """Slot creation and interval validation"""

    def test_creates_available_slot(self, doctor, fixed_now):
        result = SlotServices.create_slot(
            doctor.id,
            "2025-01-01T10:00:00Z",
            "2025-01-01T10:30:00Z",
            30,
            now=fixed_now,
        )

        assert result["success"] is True
        assert result["message"] == "Slot created"
        slot = DoctorSlot.objects.get(id=result["slot"]["id"])
        assert slot.status == SlotStatus.AVAILABLE.value
        assert slot.appointment_id is None
        assert slot.start_time == datetime(2025, 1, 1, 10, 0, tzinfo=dt_timezone.utc)
        assert slot.duration == 30

    def test_missing_fields(self, doctor, fixed_now):
        result = SlotServices.create_slot(
            doctor.id, "2025-01-01T10:00:00Z", None, 30, now=fixed_now
        )

        assert result["success"] is False
        assert result["message"] == "Missing fields"
        assert result["error"] == ErrorKind.VALIDATION.value

    def test_end_must_follow_start(self, doctor, fixed_now):
        result = SlotServices.create_slot(
            doctor.id,
            "2025-01-01T10:30:00Z",
            "2025-01-01T10:30:00Z",
            30,
            now=fixed_now,
        )

        assert result["success"] is False
        assert result["message"] == "End time must be after start time"
        assert not DoctorSlot.objects.exists()

    def test_rejects_slot_already_ended(self, doctor, fixed_now):
        result = SlotServices.create_slot(
            doctor.id,
            "2024-12-30T10:00:00Z",
            "2024-12-30T10:30:00Z",
            30,
            now=fixed_now,
        )

        assert result["success"] is False
        assert result["message"] == "Slot must end in the future"

    def test_rejects_non_positive_duration(self, doctor, fixed_now):
        result = SlotServices.create_slot(
            doctor.id,
            "2025-01-01T10:00:00Z",
            "2025-01-01T10:30:00Z",
            "-5",
            now=fixed_now,
        )

        assert result["success"] is False
        assert result["error"] == ErrorKind.VALIDATION.value

    def test_rejects_malformed_times(self, doctor, fixed_now):
        result = SlotServices.create_slot(
            doctor.id, "tomorrow", "2025-01-01T10:30:00Z", 30, now=fixed_now
        )

        assert result["success"] is False
        assert result["error"] == ErrorKind.VALIDATION.value


@pytest.mark.django_db
class TestExpireSlots:
    """Expiry sweep"""

    def test_expires_ended_available_slots(self, doctor, make_slot, fixed_now):
        ended = make_slot(doctor, fixed_now - timedelta(hours=2))
        future = make_slot(doctor, fixed_now + timedelta(hours=2))

        assert SlotServices.expire_slots(fixed_now) == 1

        ended.refresh_from_db()
        future.refresh_from_db()
        assert ended.status == SlotStatus.EXPIRED.value
        assert future.status == SlotStatus.AVAILABLE.value

    def test_sweep_is_idempotent(self, doctor, make_slot, fixed_now):
        make_slot(doctor, fixed_now - timedelta(hours=2))

        assert SlotServices.expire_slots(fixed_now) == 1
        assert SlotServices.expire_slots(fixed_now) == 0
        assert DoctorSlot.objects.get().status == SlotStatus.EXPIRED.value

    def test_booked_slots_are_not_expired(self, doctor, patient, open_slot):
        AppointmentServices.book_appointment(patient.user.id, doctor.id, open_slot.id)

        later = open_slot.end_time + timedelta(days=1)
        assert SlotServices.expire_slots(later) == 0

        open_slot.refresh_from_db()
        assert open_slot.status == SlotStatus.BOOKED.value


@pytest.mark.django_db
class TestDeleteSlot:
    """Deletion ownership and booked-slot policy"""

    def test_owner_deletes_available_slot(self, doctor, open_slot):
        result = SlotServices.delete_slot(open_slot.id, doctor.id)

        assert result == {"success": True, "message": "Slot deleted"}
        assert not DoctorSlot.objects.filter(id=open_slot.id).exists()

    def test_not_found(self, doctor, open_slot):
        open_slot.delete()

        result = SlotServices.delete_slot(open_slot.id, doctor.id)

        assert result["error"] == ErrorKind.NOT_FOUND.value
        assert result["message"] == "Slot not found"

    def test_other_doctor_is_forbidden(self, other_doctor, open_slot):
        result = SlotServices.delete_slot(open_slot.id, other_doctor.id)

        assert result["error"] == ErrorKind.FORBIDDEN.value
        assert result["message"] == "Not your slot"
        assert DoctorSlot.objects.filter(id=open_slot.id).exists()

    def test_booked_slot_is_kept(self, doctor, patient, open_slot):
        AppointmentServices.book_appointment(patient.user.id, doctor.id, open_slot.id)

        result = SlotServices.delete_slot(open_slot.id, doctor.id)

        assert result["error"] == ErrorKind.CONFLICT.value
        assert result["message"] == "Cannot delete a booked slot"
        assert DoctorSlot.objects.filter(id=open_slot.id).exists()


@pytest.mark.django_db
class TestSlotBookingState:
    """Claim/release and the booked-iff-appointment rule"""

    def test_release_without_slot_is_noop(self, doctor, patient, open_slot):
        result = AppointmentServices.book_appointment(
            patient.user.id, doctor.id, open_slot.id
        )
        appointment_id = result["appointment"]["id"]

        assert SlotServices.release_slot(appointment_id) == 1
        assert SlotServices.release_slot(appointment_id) == 0

        open_slot.refresh_from_db()
        assert open_slot.status == SlotStatus.AVAILABLE.value
        assert open_slot.appointment_id is None

    def test_claim_fails_when_not_available(self, doctor, patient, open_slot):
        result = AppointmentServices.book_appointment(
            patient.user.id, doctor.id, open_slot.id
        )

        assert SlotServices.claim_slot(open_slot.id, result["appointment"]["id"]) is False

    def test_booked_without_appointment_is_rejected(self, doctor, soon):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                DoctorSlot.objects.create(
                    doctor=doctor,
                    start_time=soon,
                    end_time=soon + timedelta(minutes=30),
                    duration=30,
                    status=SlotStatus.BOOKED.value,
                )

    def test_end_before_start_is_rejected(self, doctor, soon):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                DoctorSlot.objects.create(
                    doctor=doctor,
                    start_time=soon,
                    end_time=soon - timedelta(minutes=30),
                    duration=30,
                )
