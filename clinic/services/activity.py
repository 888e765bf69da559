from datetime import datetime
from typing import Optional

import bleach
from django.utils import timezone

from clinic.models import LogEntry, Staff


def log_action(*, staff: Optional[Staff], action: str, time: Optional[datetime] = None) -> LogEntry:
    """Record ``action`` for the dashboards; markup is stripped before storing."""
    return LogEntry.objects.create(
        staff=staff if getattr(staff, 'id', None) else None,
        action=bleach.clean((action or '').strip(), strip=True),
        time=time or timezone.now(),
    )
