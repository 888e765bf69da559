"""Clinic application for the administration backend.

This package holds the data model read by the reporting core, the
report/statistics/staff-search services and the API views over them.
"""
