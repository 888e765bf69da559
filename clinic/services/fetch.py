"""
Unpaged reads for the aggregation services.

The date-range and role reads return complete lists.  Paginated
listings live in :mod:`clinic.services.staff`; aggregation input must
never go through them, otherwise a report silently covers a single page
of rows.
"""
from __future__ import annotations

import enum
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Optional

from django.db import DatabaseError
from django.db.models import QuerySet

from clinic.exceptions import InvalidRange, Unexpected
from clinic.models import Appointment, Billing, LogEntry, Staff

logger = logging.getLogger(__name__)


class RowKind(enum.Enum):
    APPOINTMENT = 'appointment'
    BILLING = 'billing'
    STAFF = 'staff'


# Base queryset and creation timestamp lookup per row kind.
_SOURCES: dict[RowKind, tuple[Callable[[], QuerySet], str]] = {
    RowKind.APPOINTMENT: (lambda: Appointment.objects.all(), 'created_at'),
    RowKind.BILLING: (lambda: Billing.objects.all(), 'created_at'),
    RowKind.STAFF: (lambda: Staff.objects.select_related('person'), 'person__created_at'),
}


def validate_range(start: datetime, end: datetime) -> None:
    if end < start:
        logger.warning('rejected window %s .. %s', start.isoformat(), end.isoformat())
        raise InvalidRange()


@contextmanager
def reading(what: str):
    """Turn a database failure inside the block into :class:`Unexpected`."""
    try:
        yield
    except DatabaseError as exc:
        logger.exception('failed to fetch %s', what)
        raise Unexpected(f'Failed to fetch {what}') from exc


def _evaluate(qs: QuerySet, what: str) -> list:
    with reading(what):
        return list(qs)


def fetch_created_between(kind: RowKind, start: datetime, end: datetime) -> list:
    """Return every ``kind`` row created in ``[start, end)``."""
    validate_range(start, end)
    base, field = _SOURCES[kind]
    qs = base().filter(**{f'{field}__gte': start, f'{field}__lt': end})
    return _evaluate(qs, f'{kind.value} rows')


def fetch_staff_by_role(role: str) -> list[Staff]:
    qs = Staff.objects.select_related('person').filter(role=role).order_by('id')
    return _evaluate(qs, f'{role} staff')


def fetch_recent_logs(limit: int, *, staff_id: Optional[int] = None) -> list[LogEntry]:
    qs = LogEntry.objects.all()
    if staff_id is not None:
        qs = qs.filter(staff_id=staff_id)
    return _evaluate(qs.order_by('-time', '-id')[:limit], 'log entries')
