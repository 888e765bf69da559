"""
Integration tests for the clinic reporting API.

These tests go through URL routing, query parameter validation and the
exception handler using Django REST Framework's APIClient within the
APITestCase base class.

To run the tests:

```
pytest -q clinic/tests
```
"""
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.core.management import call_command
from django.db import DatabaseError
from django.db.models import QuerySet
from rest_framework import status
from rest_framework.test import APITestCase

from ..models import Appointment, Billing, LogEntry, Staff
from ..services.activity import log_action
from ..services.statistics import day_window
from .factories import make_patient, make_staff


class ClinicAPITests(APITestCase):
    def setUp(self) -> None:
        """Two doctors, a receptionist and a handful of today's bookings."""
        # Midday of the current local day, frozen so the views' day window
        # cannot roll over between setUp and the request.
        self.now = day_window()[0] + timedelta(hours=12)
        clock = mock.patch('django.utils.timezone.now', return_value=self.now)
        clock.start()
        self.addCleanup(clock.stop)

        self.patient = make_patient()
        self.doc1 = make_staff('Doctor One', status=Staff.Status.ON_DUTY, email='one@clinic.example')
        self.doc2 = make_staff('Doctor Two')
        self.desk = make_staff('Brian Kiptoo', role=Staff.Role.RECEPTIONIST, status=Staff.Status.ON_DUTY)

        self.a1 = Appointment.objects.create(
            patient=self.patient, doctor=self.doc1, receptionist=self.desk,
            status=Appointment.Status.COMPLETE, created_at=self.now,
        )
        Appointment.objects.create(
            patient=self.patient, doctor=self.doc1, receptionist=self.desk,
            status=Appointment.Status.CANCELLED, created_at=self.now,
        )
        Appointment.objects.create(
            patient=self.patient, doctor=self.doc2, receptionist=self.desk,
            status=Appointment.Status.PENDING, created_at=self.now,
        )
        Billing.objects.create(
            patient=self.patient, appointment=self.a1, bills={'consultation': '150'},
            amount_paid=Decimal('100'), created_at=self.now,
        )
        log_action(staff=self.desk, action='Booked appointment', time=self.now)

    def window(self, before=timedelta(hours=1), after=timedelta(hours=1)):
        return {
            'start': (self.now - before).isoformat(),
            'end': (self.now + after).isoformat(),
        }

    def test_manager_report(self):
        """The report covers appointments, every doctor and revenue in the window."""
        response = self.client.get('/api/report/manager', self.window())
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body['appointments'], {'total': 3, 'completed': 1, 'pending': 1, 'cancelled': 1})
        doctors = {d['id']: d for d in body['doctors']}
        self.assertEqual([d['id'] for d in body['doctors']], [self.doc1.id, self.doc2.id])
        self.assertEqual(doctors[self.doc1.id]['completed'], 1)
        self.assertEqual(doctors[self.doc1.id]['cancelled'], 1)
        self.assertEqual(doctors[self.doc1.id]['revenue'], 100)
        self.assertEqual(doctors[self.doc2.id]['revenue'], 0)
        self.assertEqual(body['revenue'], {'totalPaid': 100, 'totalExpected': 150})

    def test_manager_report_rejects_reversed_range(self):
        params = {'start': self.now.isoformat(), 'end': (self.now - timedelta(days=1)).isoformat()}
        response = self.client.get('/api/report/manager', params)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        body = response.json()
        self.assertFalse(body['ok'])
        self.assertEqual(body['error']['code'], 'invalid_range')
        self.assertEqual(body['error']['message'], 'Enter valid start and end dates!')

    def test_manager_report_rejects_malformed_dates(self):
        response = self.client.get('/api/report/manager', {'start': 'yesterday', 'end': 'today'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['error']['code'], 'api_error')

        response = self.client.get('/api/report/manager')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_manager_statistics(self):
        response = self.client.get('/api/statistics/manager')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body['totalStaff'], 3)
        self.assertEqual(body['staffOnDuty'], 2)
        self.assertEqual(body['dailyAppointments'], 3)
        self.assertEqual([a['action'] for a in body['activity']], ['Booked appointment'])

    def test_receptionist_statistics(self):
        response = self.client.get(f'/api/statistics/receptionist/{self.desk.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body['dailyAppointments'], 3)
        self.assertEqual(body['completed'], 1)
        self.assertEqual(body['pending'], 1)
        self.assertEqual(len(body['activity']), 1)

    def test_receptionist_statistics_unknown_staff(self):
        response = self.client.get('/api/statistics/receptionist/99999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['error']['code'], 'not_found')

    def test_search_staff_by_email_ignores_filter(self):
        response = self.client.get(
            '/api/staff/get',
            {'identifier': 'email', 'value': 'one@clinic.example', 'filter': 'NURSE', 'page': 3},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body['totalPages'], 1)
        self.assertEqual([s['id'] for s in body['staffList']], [self.doc1.id])

    def test_search_staff_filter_and_sort(self):
        response = self.client.get('/api/staff/get', {'filter': 'DOCTOR', 'sort': 'descendingDate', 'page': 1})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [s['id'] for s in response.json()['staffList']]
        self.assertEqual(sorted(ids), sorted([self.doc1.id, self.doc2.id]))

    def test_search_staff_bad_requests(self):
        for params in (
            {'page': 0},
            {'page': 'first'},
            {},
            {'page': 1, 'filter': 'SURGEON'},
            {'page': 1, 'sort': 'byName'},
        ):
            response = self.client.get('/api/staff/get', params)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, params)
            self.assertFalse(response.json()['ok'])

    def test_search_staff_missing_phone(self):
        response = self.client.get('/api/staff/get', {'identifier': 'phone', 'value': '0799999999', 'page': 1})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('phone', response.json()['error']['message'])

    def test_search_staff_name_with_ampersand(self):
        """Search values reach the query untouched, HTML-special characters included."""
        duo = make_staff('Tom & Jerry', role=Staff.Role.TECHNICIAN)
        response = self.client.get('/api/staff/get', {'identifier': 'name', 'value': 'Tom & Jerry', 'page': 1})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['id'] for s in response.json()['staffList']], [duo.id])

    def test_search_staff_page_far_past_the_end(self):
        """A huge page is an empty page, not a database overflow."""
        response = self.client.get('/api/staff/get', {'page': '10000000000000000000'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {'totalPages': 1, 'staffList': []})

    def test_database_failure_is_unexpected(self):
        """A failing read comes back as a logged 500 with code ``unexpected``."""
        for url in ('/api/statistics/manager', '/api/staff/get?page=1', '/api/staff/page/1'):
            broken = mock.patch.object(QuerySet, 'count', side_effect=DatabaseError('connection lost'))
            with broken, self.assertLogs('clinic', level='ERROR') as logs:
                response = self.client.get(url)
            self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR, url)
            body = response.json()
            self.assertFalse(body['ok'])
            self.assertEqual(body['error']['code'], 'unexpected')
            self.assertTrue(any('failed to fetch' in line for line in logs.output))

    def test_receptionist_lookup_failure_is_unexpected(self):
        with mock.patch.object(QuerySet, 'exists', side_effect=DatabaseError('connection lost')), \
                self.assertLogs('clinic.services.fetch', level='ERROR'):
            response = self.client.get(f'/api/statistics/receptionist/{self.desk.id}')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json()['error']['code'], 'unexpected')

    def test_staff_page(self):
        response = self.client.get('/api/staff/page/1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body['totalPages'], 1)
        self.assertEqual([s['id'] for s in body['staffList']], [self.doc1.id, self.doc2.id, self.desk.id])

        response = self.client.get('/api/staff/page/0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_active_doctors(self):
        response = self.client.get('/api/staff/doctors/active')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['fullName'] for s in response.json()['staffList']], ['Doctor One'])

    def test_healthz(self):
        response = self.client.get('/healthz')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {'ok': True, 'db': True})


class SeedCommandTests(APITestCase):
    def test_seed_clinic_populates_every_table(self):
        call_command('seed_clinic', '--days', '3', '--appointments', '12', '--seed', '7', verbosity=0)
        self.assertEqual(Staff.objects.filter(role=Staff.Role.DOCTOR).count(), 3)
        self.assertEqual(Appointment.objects.count(), 12)
        self.assertTrue(LogEntry.objects.exists())

        response = self.client.get('/api/staff/doctors/active')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
