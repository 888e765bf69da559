"""
URL mappings for the clinic backend API.

Paths follow the front-end contract and deliberately omit trailing
slashes.
"""
from django.urls import path, include

from .views import health
from .views.report import manager_report
from .views.statistics import manager_statistics, receptionist_statistics
from .views.staff import search_staff, staff_page, active_doctors


urlpatterns = [
    # django_prometheus mounts itself at ``metrics``
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Reports
    path('api/report/manager', manager_report, name='manager_report'),
    # Dashboard statistics
    path('api/statistics/manager', manager_statistics, name='manager_statistics'),
    path('api/statistics/receptionist/<int:pk>', receptionist_statistics, name='receptionist_statistics'),
    # Staff listings
    path('api/staff/get', search_staff, name='search_staff'),
    path('api/staff/page/<int:page>', staff_page, name='staff_page'),
    path('api/staff/doctors/active', active_doctors, name='active_doctors'),
]
