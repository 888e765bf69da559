"""
Staff search, filter and sort.

Raw query tokens are decoded once by :func:`decode_staff_query` into
closed enums; :func:`search_sort_and_filter` then picks exactly one
retrieval strategy, first match wins:

1. exact ``email`` / ``phone`` lookup (single row, 404 when missing)
2. case-insensitive ``name`` substring search, optionally narrowed by a
   role or status filter
3. role or status filter alone
4. full listing

Pages are 1-based here and sliced 0-based against the queryset.
"""
from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

from django.conf import settings
from django.db.models import QuerySet

from clinic.exceptions import InvalidArgument, NotFound
from clinic.models import Staff
from clinic.services.fetch import reading

logger = logging.getLogger(__name__)


class SearchField(enum.Enum):
    EMAIL = 'email'
    PHONE = 'phone'
    NAME = 'name'


class SortOrder(enum.Enum):
    ASCENDING_DATE = 'ascendingDate'
    DESCENDING_DATE = 'descendingDate'
    LAST_LOGIN = 'lastLogin'


ORDERINGS = {
    SortOrder.ASCENDING_DATE: ('person__created_at', 'id'),
    SortOrder.DESCENDING_DATE: ('-person__created_at', '-id'),
    SortOrder.LAST_LOGIN: ('-last_login', 'id'),
}

StaffFilter = Union[Staff.Role, Staff.Status]


@dataclass(frozen=True)
class StaffQuery:
    page: int = 1
    search: Optional[SearchField] = None
    value: Optional[str] = None
    filter: Optional[StaffFilter] = None
    sort: Optional[SortOrder] = None


@dataclass(frozen=True)
class StaffPage:
    total_pages: int
    items: list[Staff]


def decode_filter(token: str) -> StaffFilter:
    """Roles are tried before statuses; the two sets do not overlap."""
    token = token.strip().upper()
    if token in Staff.Role.values:
        return Staff.Role(token)
    if token in Staff.Status.values:
        return Staff.Status(token)
    raise InvalidArgument(f'Invalid filter: {token}')


def decode_sort(token: str) -> SortOrder:
    try:
        return SortOrder(token.strip())
    except ValueError:
        raise InvalidArgument('Invalid sort criteria!') from None


def decode_search(token: str) -> SearchField:
    try:
        return SearchField(token.strip().lower())
    except ValueError:
        raise InvalidArgument(f'Invalid search identifier: {token}') from None


def decode_staff_query(*, identifier=None, value=None, filter=None, sort=None, page=None) -> StaffQuery:
    """Turn raw query parameters into a :class:`StaffQuery`.

    Every token is validated up front, including ones the chosen case
    ends up ignoring, so a malformed request never reaches the database.
    A search identifier without a value (or the reverse) is no search.
    """
    if page is None or page <= 0:
        raise InvalidArgument('Provide a valid page!')
    value = (value or '').strip() or None
    identifier = (identifier or '').strip() or None
    search = decode_search(identifier) if identifier and value else None
    return StaffQuery(
        page=page,
        search=search,
        value=value if search else None,
        filter=decode_filter(filter) if filter else None,
        sort=decode_sort(sort) if sort else None,
    )


def _apply_filter(qs: QuerySet, staff_filter: Optional[StaffFilter]) -> QuerySet:
    if isinstance(staff_filter, Staff.Role):
        return qs.filter(role=staff_filter)
    if isinstance(staff_filter, Staff.Status):
        return qs.filter(status=staff_filter)
    return qs


def _paginate(qs: QuerySet, page: int, page_size: int) -> StaffPage:
    with reading('staff'):
        total = qs.count()
        total_pages = math.ceil(total / page_size)
        start = (page - 1) * page_size
        # past the end; very large offsets overflow the database integer type
        if start >= total:
            return StaffPage(total_pages=total_pages, items=[])
        items = list(qs[start:start + page_size])
    return StaffPage(total_pages=total_pages, items=items)


def _exact_lookup(field: SearchField, value: str) -> StaffPage:
    qs = Staff.objects.select_related('person')
    if field is SearchField.EMAIL:
        qs = qs.filter(person__email__iexact=value)
    else:
        qs = qs.filter(person__phone=value)
    with reading('staff'):
        staff = qs.first()
    if staff is None:
        raise NotFound(f'No staff member with the specified {field.value} exists!')
    return StaffPage(total_pages=1, items=[staff])


def search_sort_and_filter(query: StaffQuery, page_size: Optional[int] = None) -> StaffPage:
    page_size = page_size or settings.CLINIC_PAGE_SIZE

    if query.search in (SearchField.EMAIL, SearchField.PHONE):
        return _exact_lookup(query.search, query.value)

    qs = Staff.objects.select_related('person')
    if query.search is SearchField.NAME:
        qs = _apply_filter(qs.filter(person__full_name__icontains=query.value), query.filter)
    elif query.filter is not None:
        qs = _apply_filter(qs, query.filter)

    qs = qs.order_by(*ORDERINGS[query.sort]) if query.sort else qs.order_by('id')
    logger.debug('staff query %s', query)
    return _paginate(qs, query.page, page_size)


def list_staff(page: int, page_size: Optional[int] = None) -> StaffPage:
    if page <= 0:
        raise InvalidArgument('Provide a valid page!')
    qs = Staff.objects.select_related('person').order_by('id')
    return _paginate(qs, page, page_size or settings.CLINIC_PAGE_SIZE)


def doctors_on_duty() -> StaffPage:
    qs = Staff.objects.select_related('person').filter(
        role=Staff.Role.DOCTOR, status=Staff.Status.ON_DUTY
    ).order_by('id')
    with reading('doctors on duty'):
        items = list(qs)
    return StaffPage(total_pages=1, items=items)


def format_staff(staff: Staff) -> dict:
    person = staff.person
    return {
        'id': staff.id,
        'fullName': person.full_name,
        'email': person.email,
        'phone': person.phone,
        'nationalId': person.national_id,
        'address': person.address,
        'dateOfBirth': person.date_of_birth.isoformat() if person.date_of_birth else None,
        'gender': person.gender or None,
        'image': person.image or None,
        'status': staff.status,
        'role': staff.role,
        'lastLogin': staff.last_login.isoformat() if staff.last_login else None,
        'createdAt': person.created_at.isoformat(),
        'updatedAt': person.updated_at.isoformat() if person.updated_at else None,
    }


def format_staff_page(page: StaffPage) -> dict:
    return {
        'totalPages': page.total_pages,
        'staffList': [format_staff(s) for s in page.items],
    }
