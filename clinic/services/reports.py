"""
Manager report composition.

The three reads (appointments, doctors, billings) are independent
queries, not one snapshot: a billing written between them may point at
an appointment missing from the appointment set, in which case it is
left out of the per-doctor revenue while still counting in the totals.
Callers that need a consistent view must wrap the call in a
snapshot-isolated transaction themselves.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from clinic.models import Staff
from clinic.services.aggregation import (
    AppointmentSummary,
    DoctorReport,
    RevenueTotals,
    join_doctor_revenue,
    revenue_totals,
    summarize_appointments,
)
from clinic.services.fetch import RowKind, fetch_created_between, fetch_staff_by_role, validate_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManagerReport:
    appointments: AppointmentSummary
    doctors: list[DoctorReport]
    revenue: RevenueTotals


def build_manager_report(start: datetime, end: datetime) -> ManagerReport:
    validate_range(start, end)

    appointments = fetch_created_between(RowKind.APPOINTMENT, start, end)
    # doctors are not time-scoped: every doctor gets a row
    doctors = fetch_staff_by_role(Staff.Role.DOCTOR)
    billings = fetch_created_between(RowKind.BILLING, start, end)

    logger.info(
        'manager report %s .. %s: %d appointments, %d doctors, %d billings',
        start.isoformat(), end.isoformat(), len(appointments), len(doctors), len(billings),
    )
    return ManagerReport(
        appointments=summarize_appointments(appointments),
        doctors=join_doctor_revenue(doctors, appointments, billings),
        revenue=revenue_totals(billings),
    )


def format_manager_report(report: ManagerReport) -> dict:
    summary = report.appointments
    return {
        'appointments': {
            'total': summary.total,
            'completed': summary.completed,
            'pending': summary.pending,
            'cancelled': summary.cancelled,
        },
        'doctors': [
            {
                'id': d.id,
                'name': d.name,
                'completed': d.completed,
                'cancelled': d.cancelled,
                'revenue': d.revenue,
            }
            for d in report.doctors
        ],
        'revenue': {
            'totalPaid': report.revenue.total_paid,
            'totalExpected': report.revenue.total_expected,
        },
    }
