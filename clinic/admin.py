"""
Django admin registrations for the clinic models.

The admin is a development aid for inspecting the rows the reports are
computed from; log entries are read-only because the log is append-only.
"""

from django.contrib import admin

from .models import Appointment, Billing, LogEntry, Patient, Person, Staff


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'email', 'phone', 'created_at')
    search_fields = ('full_name', 'email', 'phone', 'national_id')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('person', 'insurance_provider', 'insurance_number')
    search_fields = ('person__full_name', 'insurance_number')


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ('username', 'person', 'role', 'status', 'last_login')
    list_filter = ('role', 'status')
    search_fields = ('username', 'person__full_name', 'person__email')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'status', 'created_at')
    list_filter = ('status',)


@admin.register(Billing)
class BillingAdmin(admin.ModelAdmin):
    list_display = ('id', 'appointment', 'total_amount', 'amount_paid', 'status', 'created_at')
    list_filter = ('status', 'payment_method')


@admin.register(LogEntry)
class LogEntryAdmin(admin.ModelAdmin):
    list_display = ('time', 'staff', 'action')
    search_fields = ('action',)

    def has_change_permission(self, request, obj=None):
        return False
