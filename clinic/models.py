"""
Database models for the clinic backend.

The rows here are owned by the CRUD layer; the reporting services only
read them.  Identity fields shared by patients and staff live on
:class:`Person`, which both profiles reference one-to-one instead of
inheriting from a common base table.
"""
from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.utils import timezone


class Person(models.Model):
    """Identity and contact details shared by patients and staff."""

    class Gender(models.TextChoices):
        MALE = 'MALE', 'Male'
        FEMALE = 'FEMALE', 'Female'

    full_name = models.CharField(max_length=255)
    email = models.EmailField(unique=True, null=True, blank=True)
    phone = models.CharField(max_length=20, unique=True)
    national_id = models.CharField(max_length=32, unique=True)
    address = models.CharField(max_length=255, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=Gender.choices, blank=True)
    image = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.full_name


class Patient(models.Model):
    person = models.OneToOneField(Person, on_delete=models.CASCADE, related_name='patient')
    emergency_name = models.CharField(max_length=255, blank=True)
    emergency_contact = models.CharField(max_length=20, blank=True)
    insurance_provider = models.CharField(max_length=100, blank=True)
    insurance_number = models.CharField(max_length=64, unique=True, null=True, blank=True)
    blood_type = models.CharField(max_length=4, blank=True)

    def __str__(self) -> str:
        return f"Patient {self.person.full_name}"


class Staff(models.Model):
    """A staff account.  Role and availability drive the staff listings."""

    class Role(models.TextChoices):
        NURSE = 'NURSE', 'Nurse'
        RECEPTIONIST = 'RECEPTIONIST', 'Receptionist'
        DOCTOR = 'DOCTOR', 'Doctor'
        PHARMACIST = 'PHARMACIST', 'Pharmacist'
        TECHNICIAN = 'TECHNICIAN', 'Technician'

    class Status(models.TextChoices):
        ON_DUTY = 'ON_DUTY', 'On duty'
        OFF = 'OFF', 'Off'
        SUSPENDED = 'SUSPENDED', 'Suspended'

    person = models.OneToOneField(Person, on_delete=models.CASCADE, related_name='staff')
    username = models.CharField(max_length=150, unique=True)
    # Filtered on by the staff listings and the daily statistics.
    role = models.CharField(max_length=20, choices=Role.choices, db_index=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.OFF, db_index=True)
    last_login = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name_plural = 'staff'

    @property
    def full_name(self) -> str:
        return self.person.full_name

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Appointment(models.Model):
    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        COMPLETE = 'COMPLETE', 'Complete'
        INCOMPLETE = 'INCOMPLETE', 'Incomplete'
        CANCELLED = 'CANCELLED', 'Cancelled'

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='appointments')
    # Only empty between booking and doctor assignment.
    doctor = models.ForeignKey(
        Staff, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments'
    )
    receptionist = models.ForeignKey(
        Staff, null=True, blank=True, on_delete=models.SET_NULL, related_name='booked_appointments'
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['created_at']),
            models.Index(fields=['receptionist', 'created_at']),
        ]

    def __str__(self) -> str:
        return f"Appointment #{self.pk} ({self.status})"


class Billing(models.Model):
    """A bill raised for one appointment.

    ``bills`` maps a bill type (``consultation``, ``pharmacy`` ...) to an
    amount; ``total_amount`` is kept equal to the sum of those amounts.
    """

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        PARTIALLY_PAID = 'PARTIALLY_PAID', 'Partially paid'
        PAID = 'PAID', 'Paid'
        CANCELLED = 'CANCELLED', 'Cancelled'

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='billings')
    appointment = models.ForeignKey(Appointment, on_delete=models.CASCADE, related_name='billings')
    bills = models.JSONField(default=dict, blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    amount_paid = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    payment_method = models.CharField(max_length=32, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        if self.bills:
            self.total_amount = sum((Decimal(str(v)) for v in self.bills.values()), Decimal('0'))
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"Billing #{self.pk} {self.amount_paid}/{self.total_amount}"


class LogEntry(models.Model):
    """Append-only record of something a staff member did."""
    staff = models.ForeignKey(Staff, null=True, blank=True, on_delete=models.SET_NULL, related_name='logs')
    action = models.CharField(max_length=255)
    time = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        verbose_name_plural = 'log entries'
        indexes = [
            models.Index(fields=['staff', 'time']),
        ]

    def __str__(self):
        return f"{self.action} by {self.staff_id} @ {self.time:%F %T}"
