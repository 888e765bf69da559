"""
Dashboard statistics endpoints.

Both endpoints describe the current day only and are recomputed on every
request.
"""
from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.response import Response

from clinic.services.statistics import (
    format_manager_stats,
    format_receptionist_stats,
    manager_daily_stats,
    receptionist_daily_stats,
)


@api_view(['GET'])
def manager_statistics(request):
    """Staff counts, today's appointments and the latest activity log entries."""
    return Response(format_manager_stats(manager_daily_stats()))


@api_view(['GET'])
def receptionist_statistics(request, pk: int):
    """Today's bookings and recent activity for receptionist ``pk``."""
    return Response(format_receptionist_stats(receptionist_daily_stats(pk)))
