"""
Tests for the booking committer: commit, reschedule and status changes
"""
from datetime import time
import random
import uuid

import pytest

from atlas.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from atlas.models import Appointment, AppointmentStatus, BookingDayLock, Business
from atlas.services.availability.availability_service import AvailabilityService
from atlas.services.scheduling.booking_committer import (
    cancel_booking,
    commit_booking,
    complete_booking,
    confirm_booking,
    reschedule_booking,
    transition_status,
)

from tests.conftest import BEFORE_OPENING, MONDAY, TUESDAY, WEEKLY_SCHEDULE, make_service, new_client_id


def _active_on(db, business_id, day):
    return db.query(Appointment).filter(
        Appointment.business_id == business_id,
        Appointment.appointment_date == day,
        Appointment.status.in_(["pending", "confirmed"]),
    ).order_by(Appointment.start_time).all()


def test_commit_creates_pending_appointment(db, business, service_30):
    appointment = commit_booking(db, business.id, MONDAY, "14:00", [service_30.id], new_client_id())

    assert appointment.status == AppointmentStatus.PENDING.value
    assert appointment.start_time == time(14, 0)
    assert appointment.end_time == time(14, 30)
    assert appointment.service_ids == [service_30.id]
    assert db.query(BookingDayLock).filter_by(business_id=business.id, lock_date=MONDAY).one().version == 1


def test_multiple_services_sum_their_durations(db, business, service_30, service_45):
    appointment = commit_booking(
        db, business.id, MONDAY, "09:00", [service_30.id, service_45.id, service_30.id], new_client_id()
    )

    assert appointment.end_time == time(10, 15)
    assert appointment.service_ids == [service_30.id, service_45.id]
    assert appointment.service_id == service_30.id


def test_auto_confirm_follows_business_setting(db, business, service_30):
    business.auto_confirm_appointments = True
    db.commit()

    appointment = commit_booking(db, business.id, MONDAY, "09:00", [service_30.id], new_client_id())
    assert appointment.status == AppointmentStatus.CONFIRMED.value

    explicit = commit_booking(
        db, business.id, MONDAY, "10:00", [service_30.id], new_client_id(), auto_confirm=False
    )
    assert explicit.status == AppointmentStatus.PENDING.value


def test_overlapping_commit_is_rejected(db, business, service_30, service_60):
    commit_booking(db, business.id, MONDAY, "14:00", [service_60.id], new_client_id())

    with pytest.raises(ConflictError) as exc_info:
        commit_booking(db, business.id, MONDAY, "14:30", [service_30.id], new_client_id())

    assert exc_info.value.error_code == "slot_unavailable"
    assert exc_info.value.details["start_time"] == "14:30"
    assert len(_active_on(db, business.id, MONDAY)) == 1


def test_adjacent_bookings_do_not_conflict(db, business, service_30):
    commit_booking(db, business.id, MONDAY, "14:00", [service_30.id], new_client_id())
    commit_booking(db, business.id, MONDAY, "14:30", [service_30.id], new_client_id())
    commit_booking(db, business.id, MONDAY, "13:30", [service_30.id], new_client_id())

    assert len(_active_on(db, business.id, MONDAY)) == 3


def test_cancelled_appointment_frees_its_slot(db, business, service_30):
    first = commit_booking(db, business.id, MONDAY, "14:00", [service_30.id], new_client_id())
    cancel_booking(db, first.id, "Client asked")

    second = commit_booking(db, business.id, MONDAY, "14:00", [service_30.id], new_client_id())
    assert second.id != first.id


def test_same_time_on_other_business_is_independent(db, business, service_30):
    other = Business(name="Other", opening_hours=WEEKLY_SCHEDULE)
    db.add(other)
    db.commit()
    other_service = make_service(db, other, 30)

    commit_booking(db, business.id, MONDAY, "14:00", [service_30.id], new_client_id())
    commit_booking(db, other.id, MONDAY, "14:00", [other_service.id], new_client_id())


def test_working_hours_are_optional_for_commits(db, business, service_60):
    with pytest.raises(ConflictError):
        commit_booking(
            db, business.id, MONDAY, "11:30", [service_60.id], new_client_id(), enforce_working_hours=True
        )

    # Business-side booking may place an appointment inside the break
    appointment = commit_booking(db, business.id, MONDAY, "11:30", [service_60.id], new_client_id())
    assert appointment.end_time == time(12, 30)


def test_invalid_service_selection(db, business, service_30):
    with pytest.raises(InvalidArgumentError):
        commit_booking(db, business.id, MONDAY, "09:00", [], new_client_id())

    inactive = make_service(db, business, 30, is_active=False)
    with pytest.raises(NotFoundError):
        commit_booking(db, business.id, MONDAY, "09:00", [inactive.id], new_client_id())

    with pytest.raises(NotFoundError):
        commit_booking(db, business.id, MONDAY, "09:00", [uuid.uuid4()], new_client_id())


def test_service_of_another_business_is_not_found(db, business):
    other = Business(name="Other", opening_hours=WEEKLY_SCHEDULE)
    db.add(other)
    db.commit()
    foreign = make_service(db, other, 30)

    with pytest.raises(NotFoundError):
        commit_booking(db, business.id, MONDAY, "09:00", [foreign.id], new_client_id())


def test_booking_cannot_run_past_midnight(db, business, service_60):
    with pytest.raises(InvalidArgumentError):
        commit_booking(db, business.id, MONDAY, "23:30", [service_60.id], new_client_id())


def test_malformed_start_time(db, business, service_30):
    with pytest.raises(InvalidArgumentError):
        commit_booking(db, business.id, MONDAY, "25:00", [service_30.id], new_client_id())


def test_reschedule_moves_the_same_appointment(db, business, service_60):
    booking = commit_booking(db, business.id, MONDAY, "10:00", [service_60.id], new_client_id())

    moved = reschedule_booking(db, booking.id, TUESDAY, "11:00")

    assert moved.id == booking.id
    assert _active_on(db, business.id, MONDAY) == []
    on_tuesday = _active_on(db, business.id, TUESDAY)
    assert [(a.id, a.start_time, a.end_time) for a in on_tuesday] == [(booking.id, time(11, 0), time(12, 0))]


def test_reschedule_onto_taken_slot_leaves_original_untouched(db, business, service_60):
    booking = commit_booking(db, business.id, MONDAY, "10:00", [service_60.id], new_client_id())
    commit_booking(db, business.id, TUESDAY, "11:00", [service_60.id], new_client_id())

    with pytest.raises(ConflictError):
        reschedule_booking(db, booking.id, TUESDAY, "11:30")

    original = db.get(Appointment, booking.id)
    assert original.appointment_date == MONDAY
    assert original.start_time == time(10, 0)
    assert original.status == AppointmentStatus.PENDING.value


def test_reschedule_within_its_own_range(db, business, service_60):
    booking = commit_booking(db, business.id, MONDAY, "10:00", [service_60.id], new_client_id())

    moved = reschedule_booking(db, booking.id, MONDAY, "10:30")
    assert moved.start_time == time(10, 30)
    assert moved.end_time == time(11, 30)


def test_reschedule_can_change_services(db, business, service_30, service_60):
    booking = commit_booking(db, business.id, MONDAY, "10:00", [service_30.id], new_client_id())

    moved = reschedule_booking(db, booking.id, MONDAY, "14:00", service_ids=[service_60.id, service_30.id])

    assert moved.service_ids == [service_60.id, service_30.id]
    assert moved.end_time == time(15, 30)


def test_reschedule_keeps_status(db, business, service_30):
    booking = commit_booking(db, business.id, MONDAY, "10:00", [service_30.id], new_client_id())
    confirm_booking(db, booking.id)

    moved = reschedule_booking(db, booking.id, TUESDAY, "10:00")
    assert moved.status == AppointmentStatus.CONFIRMED.value


def test_reschedule_of_cancelled_appointment_is_invalid(db, business, service_30):
    booking = commit_booking(db, business.id, MONDAY, "10:00", [service_30.id], new_client_id())
    cancel_booking(db, booking.id)

    with pytest.raises(InvalidArgumentError):
        reschedule_booking(db, booking.id, TUESDAY, "10:00")


def test_unknown_appointment(db, business):
    with pytest.raises(NotFoundError):
        cancel_booking(db, uuid.uuid4())
    with pytest.raises(NotFoundError):
        reschedule_booking(db, "nope", TUESDAY, "10:00")


def test_status_transitions(db, business, service_30):
    booking = commit_booking(db, business.id, MONDAY, "10:00", [service_30.id], new_client_id())

    assert confirm_booking(db, booking.id).status == "confirmed"
    assert confirm_booking(db, booking.id).status == "confirmed"
    assert complete_booking(db, booking.id).status == "completed"
    assert complete_booking(db, booking.id).status == "completed"

    with pytest.raises(InvalidArgumentError):
        cancel_booking(db, booking.id)
    with pytest.raises(InvalidArgumentError):
        confirm_booking(db, booking.id)


def test_cancel_is_idempotent(db, business, service_30):
    booking = commit_booking(db, business.id, MONDAY, "10:00", [service_30.id], new_client_id())

    cancel_booking(db, booking.id, "Sick")
    again = cancel_booking(db, booking.id, "Other reason")

    assert again.status == "cancelled"
    assert again.cancellation_reason == "Sick"
    assert again.cancelled_at is not None

    with pytest.raises(InvalidArgumentError):
        complete_booking(db, booking.id)


def test_generated_slots_can_always_be_booked(db, business, service_30, service_45, service_60):
    """Single writer: a slot the generator offers never conflicts"""
    rng = random.Random(42)
    services = [service_30, service_45, service_60]

    for _ in range(12):
        service = rng.choice(services)
        slots = AvailabilityService.get_available_slots(
            db, business.id, MONDAY, service_ids=[service.id], granularity_minutes=15, now=BEFORE_OPENING
        )
        if not slots:
            break
        commit_booking(db, business.id, MONDAY, rng.choice(slots), [service.id], new_client_id())


def test_random_operations_never_double_book(db, business, service_30, service_45, service_60):
    rng = random.Random(7)
    services = [service_30, service_45, service_60]
    booked = []

    for _ in range(80):
        action = rng.random()
        start = f"{rng.randrange(9, 17):02d}:{rng.choice([0, 15, 30, 45]):02d}"
        day = rng.choice([MONDAY, TUESDAY])
        try:
            if action < 0.6 or not booked:
                appointment = commit_booking(
                    db, business.id, day, start, [rng.choice(services).id], new_client_id()
                )
                booked.append(appointment.id)
            elif action < 0.8:
                reschedule_booking(db, rng.choice(booked), day, start)
            else:
                cancel_booking(db, rng.choice(booked))
        except (ConflictError, InvalidArgumentError):
            pass

    for day in (MONDAY, TUESDAY):
        active = _active_on(db, business.id, day)
        for earlier, later in zip(active, active[1:]):
            assert earlier.end_time <= later.start_time


def test_transition_status_reports_changes(db, business, service_30):
    booking = commit_booking(db, business.id, MONDAY, "10:00", [service_30.id], new_client_id())

    _, changed = transition_status(db, booking.id, AppointmentStatus.CANCELLED, "Sick")
    assert changed
    appointment, changed = transition_status(db, booking.id, AppointmentStatus.CANCELLED)
    assert not changed
    assert appointment.cancellation_reason == "Sick"
