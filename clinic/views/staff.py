from rest_framework.decorators import api_view
from rest_framework.response import Response

from clinic.serializers.staff import StaffQuerySerializer
from clinic.services.staff import (
    decode_staff_query,
    doctors_on_duty,
    format_staff_page,
    list_staff,
    search_sort_and_filter,
)


@api_view(['GET'])
def search_staff(request):
    """Search, filter or sort the staff list.

    Query params:
      - identifier: email | phone | name (needs ``value``)
      - value: the searched email, phone or name fragment
      - filter: a role (NURSE, DOCTOR ...) or a status (ON_DUTY, OFF, SUSPENDED)
      - sort: ascendingDate | descendingDate | lastLogin
      - page: 1-based page number (required)
    """
    s = StaffQuerySerializer(data=request.query_params)
    s.is_valid(raise_exception=True)
    query = decode_staff_query(
        identifier=s.validated_data.get('identifier'),
        value=s.validated_data.get('value'),
        filter=s.validated_data.get('filter'),
        sort=s.validated_data.get('sort'),
        page=s.validated_data['page'],
    )
    return Response(format_staff_page(search_sort_and_filter(query)))


@api_view(['GET'])
def staff_page(request, page: int):
    return Response(format_staff_page(list_staff(page)))


@api_view(['GET'])
def active_doctors(request):
    """Doctors currently on duty, unpaged."""
    return Response(format_staff_page(doctors_on_duty()))
