"""
Reducers for the manager report.

All functions are pure: they take already fetched rows (model instances
or anything exposing the same attributes) and never touch the database.
Empty input yields zero-valued results.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from clinic.models import Appointment

ZERO = Decimal('0')


@dataclass(frozen=True)
class AppointmentSummary:
    total: int
    completed: int
    pending: int
    cancelled: int


@dataclass(frozen=True)
class DoctorReport:
    id: int
    name: str
    completed: int
    cancelled: int
    revenue: Decimal


@dataclass(frozen=True)
class RevenueTotals:
    total_paid: Decimal
    total_expected: Decimal

    def __add__(self, other: 'RevenueTotals') -> 'RevenueTotals':
        return RevenueTotals(
            total_paid=self.total_paid + other.total_paid,
            total_expected=self.total_expected + other.total_expected,
        )


def count_by_status(appointments: Iterable) -> dict[str, int]:
    """Count appointments per known status.

    Statuses with no rows are absent from the result.  Rows whose status
    is not an :class:`Appointment.Status` value are not counted at all.
    """
    known = set(Appointment.Status.values)
    return dict(Counter(a.status for a in appointments if a.status in known))


def summarize_appointments(appointments: Sequence) -> AppointmentSummary:
    counts = count_by_status(appointments)
    # total counts every row, including statuses outside the summary buckets
    return AppointmentSummary(
        total=len(appointments),
        completed=counts.get(Appointment.Status.COMPLETE, 0),
        pending=counts.get(Appointment.Status.PENDING, 0),
        cancelled=counts.get(Appointment.Status.CANCELLED, 0),
    )


def _doctor_name(doctor) -> str:
    person = getattr(doctor, 'person', None)
    if person is not None:
        return person.full_name
    return getattr(doctor, 'full_name', '') or ''


def join_doctor_revenue(doctors: Sequence, appointments: Sequence, billings: Sequence) -> list[DoctorReport]:
    """Per-doctor completed/cancelled counts and collected revenue.

    Billings are attributed through the appointment they were raised
    for, looked up in an ``appointment id -> doctor id`` map built from
    ``appointments``.  A billing whose appointment is not in that set
    counts for nobody.  Every doctor in ``doctors`` gets a row, in input
    order, even when all of its numbers are zero.
    """
    appointment_doctor: dict[int, Optional[int]] = {a.id: a.doctor_id for a in appointments}

    completed: Counter = Counter()
    cancelled: Counter = Counter()
    for a in appointments:
        if a.status == Appointment.Status.COMPLETE:
            completed[a.doctor_id] += 1
        elif a.status == Appointment.Status.CANCELLED:
            cancelled[a.doctor_id] += 1

    revenue: dict[int, Decimal] = {}
    for b in billings:
        doctor_id = appointment_doctor.get(b.appointment_id)
        if doctor_id is None:
            continue
        revenue[doctor_id] = revenue.get(doctor_id, ZERO) + b.amount_paid

    return [
        DoctorReport(
            id=d.id,
            name=_doctor_name(d),
            completed=completed[d.id],
            cancelled=cancelled[d.id],
            revenue=revenue.get(d.id, ZERO),
        )
        for d in doctors
    ]


def revenue_totals(billings: Iterable) -> RevenueTotals:
    """Sum paid and expected amounts over every billing, cancelled ones included."""
    paid = ZERO
    expected = ZERO
    for b in billings:
        paid += b.amount_paid
        expected += b.total_amount
    return RevenueTotals(total_paid=paid, total_expected=expected)
