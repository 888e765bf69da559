from datetime import datetime

import pytest
from django.utils import timezone

from .factories import make_patient


@pytest.fixture
def noon():
    """A fixed 'now' in the middle of a day in the configured time zone."""
    return timezone.make_aware(datetime(2025, 5, 24, 12, 0))


@pytest.fixture
def patient(db):
    return make_patient()
