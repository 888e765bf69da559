from rest_framework.decorators import api_view
from rest_framework.response import Response

from clinic.serializers.report import ReportRangeQuerySerializer
from clinic.services.reports import build_manager_report, format_manager_report


@api_view(['GET'])
def manager_report(request):
    """Appointment, per-doctor and revenue report for ``[start, end)``.

    Query params:
      - start, end: ISO-8601 datetimes; ``end`` before ``start`` is a 400
    """
    q = ReportRangeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    report = build_manager_report(q.validated_data['start'], q.validated_data['end'])
    return Response(format_manager_report(report))
