"""
Dashboard counters for the current day.

Nothing is cached: every call recomputes the day window from the
current time so the numbers always describe "today".
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from django.conf import settings
from django.utils import timezone

from clinic.exceptions import NotFound
from clinic.models import Appointment, LogEntry, Staff
from clinic.services.aggregation import count_by_status
from clinic.services.fetch import RowKind, fetch_created_between, fetch_recent_logs, reading

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManagerStats:
    total_staff: int
    staff_on_duty: int
    daily_appointments: int
    activity: list[LogEntry]


@dataclass(frozen=True)
class ReceptionistStats:
    daily_appointments: int
    completed: int
    pending: int
    activity: list[LogEntry]


def day_window(now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Return ``(start of today, start of tomorrow)`` in the current time zone."""
    now = timezone.localtime(now or timezone.now())
    start = timezone.make_aware(datetime.combine(now.date(), time.min), now.tzinfo)
    return start, start + timedelta(days=1)


def manager_daily_stats(now: Optional[datetime] = None) -> ManagerStats:
    start, end = day_window(now)
    appointments = fetch_created_between(RowKind.APPOINTMENT, start, end)
    with reading('staff counts'):
        total_staff = Staff.objects.count()
        on_duty = Staff.objects.filter(status=Staff.Status.ON_DUTY).count()
    stats = ManagerStats(
        total_staff=total_staff,
        staff_on_duty=on_duty,
        daily_appointments=len(appointments),
        activity=fetch_recent_logs(settings.CLINIC_RECENT_ACTIVITY),
    )
    logger.info('manager stats for %s: %d appointments', start.date(), stats.daily_appointments)
    return stats


def receptionist_daily_stats(staff_id: int, now: Optional[datetime] = None) -> ReceptionistStats:
    """Today's bookings and recent activity of a single receptionist."""
    with reading('staff member'):
        known = Staff.objects.filter(id=staff_id).exists()
    if not known:
        raise NotFound('The specified staff member doesn\'t exist!')
    start, end = day_window(now)
    appointments = [
        a for a in fetch_created_between(RowKind.APPOINTMENT, start, end)
        if a.receptionist_id == staff_id
    ]
    counts = count_by_status(appointments)
    return ReceptionistStats(
        daily_appointments=len(appointments),
        completed=counts.get(Appointment.Status.COMPLETE, 0),
        pending=counts.get(Appointment.Status.PENDING, 0),
        activity=fetch_recent_logs(settings.CLINIC_RECENT_ACTIVITY, staff_id=staff_id),
    )


def format_log(entry: LogEntry) -> dict:
    return {
        'id': entry.id,
        'action': entry.action,
        'time': entry.time.isoformat(),
    }


def format_manager_stats(stats: ManagerStats) -> dict:
    return {
        'totalStaff': stats.total_staff,
        'staffOnDuty': stats.staff_on_duty,
        'dailyAppointments': stats.daily_appointments,
        'activity': [format_log(e) for e in stats.activity],
    }


def format_receptionist_stats(stats: ReceptionistStats) -> dict:
    return {
        'dailyAppointments': stats.daily_appointments,
        'completed': stats.completed,
        'pending': stats.pending,
        'activity': [format_log(e) for e in stats.activity],
    }
