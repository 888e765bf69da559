"""
Management command to populate the database with demo data for the
reports and dashboards.
"""
import random
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from clinic.models import Appointment, Billing, Patient, Person, Staff
from clinic.services.activity import log_action


class Command(BaseCommand):
    help = 'Populate database with demo staff, patients, appointments and billings'

    def add_arguments(self, parser):
        parser.add_argument('--days', type=int, default=14, help='spread appointments over this many past days')
        parser.add_argument('--appointments', type=int, default=40)
        parser.add_argument('--seed', type=int, default=None, help='random seed for reproducible data')

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        self.stdout.write('Creating demo data...')

        staff = self.create_staff()
        patients = self.create_patients()
        appointments = self.create_appointments(rng, staff, patients, options['days'], options['appointments'])
        self.create_billings(rng, appointments)
        self.create_logs(rng, staff)

        self.stdout.write(self.style.SUCCESS(
            f'Created {len(staff)} staff, {len(patients)} patients, {len(appointments)} appointments'
        ))

    def _person(self, idx: int, name: str, prefix: str) -> Person:
        person, _ = Person.objects.get_or_create(
            national_id=f'{prefix}{idx:06d}',
            defaults={
                'full_name': name,
                'email': f'{prefix.lower()}{idx}@clinic.example',
                'phone': f'07{"1" if prefix == "S" else "2"}{idx:07d}',
                'address': 'Street X, Nakuru',
                'gender': Person.Gender.FEMALE if idx % 2 else Person.Gender.MALE,
            },
        )
        return person

    def create_staff(self):
        staff_data = [
            ('Jane Wanjiku', Staff.Role.DOCTOR, Staff.Status.ON_DUTY),
            ('Peter Otieno', Staff.Role.DOCTOR, Staff.Status.OFF),
            ('Amina Hassan', Staff.Role.DOCTOR, Staff.Status.ON_DUTY),
            ('Grace Mutua', Staff.Role.NURSE, Staff.Status.ON_DUTY),
            ('Brian Kiptoo', Staff.Role.RECEPTIONIST, Staff.Status.ON_DUTY),
            ('Lucy Njeri', Staff.Role.PHARMACIST, Staff.Status.OFF),
            ('Samuel Kamau', Staff.Role.TECHNICIAN, Staff.Status.SUSPENDED),
        ]
        staff = []
        for idx, (name, role, status) in enumerate(staff_data, start=1):
            member, _ = Staff.objects.get_or_create(
                person=self._person(idx, name, 'S'),
                defaults={
                    'username': name.split()[0].lower() + str(idx),
                    'role': role,
                    'status': status,
                },
            )
            staff.append(member)
            self.stdout.write(f'Staff: {member.username} ({member.role})')
        return staff

    def create_patients(self):
        names = ['John Doe', 'Mary Achieng', 'Ali Yusuf', 'Ruth Chebet', 'Kevin Mwangi', 'Faith Wairimu']
        patients = []
        for idx, name in enumerate(names, start=1):
            patient, _ = Patient.objects.get_or_create(
                person=self._person(idx, name, 'P'),
                defaults={'insurance_provider': 'SHIF', 'insurance_number': f'SH{idx:04d}'},
            )
            patients.append(patient)
        return patients

    def create_appointments(self, rng, staff, patients, days, count):
        doctors = [s for s in staff if s.role == Staff.Role.DOCTOR]
        receptionists = [s for s in staff if s.role == Staff.Role.RECEPTIONIST]
        now = timezone.now()
        appointments = []
        for _ in range(count):
            appointments.append(Appointment.objects.create(
                patient=rng.choice(patients),
                doctor=rng.choice(doctors),
                receptionist=rng.choice(receptionists) if receptionists else None,
                status=rng.choice(Appointment.Status.values),
                created_at=now - timedelta(days=rng.randint(0, max(days - 1, 0)), minutes=rng.randint(0, 600)),
            ))
        return appointments

    def create_billings(self, rng, appointments):
        for appt in appointments:
            if appt.status == Appointment.Status.PENDING:
                continue
            consultation = Decimal(rng.choice([1500, 2000, 3000]))
            pharmacy = Decimal(rng.randint(0, 40) * 100)
            paid = rng.choice([Decimal('0'), consultation, consultation + pharmacy])
            if appt.status == Appointment.Status.CANCELLED:
                status = Billing.Status.CANCELLED
            elif paid == consultation + pharmacy:
                status = Billing.Status.PAID
            elif paid:
                status = Billing.Status.PARTIALLY_PAID
            else:
                status = Billing.Status.PENDING
            Billing.objects.create(
                patient=appt.patient,
                appointment=appt,
                bills={'consultation': str(consultation), 'pharmacy': str(pharmacy)},
                amount_paid=paid,
                payment_method=rng.choice(['cash', 'card', 'mobile']),
                status=status,
                created_at=appt.created_at,
            )

    def create_logs(self, rng, staff):
        actions = ['Logged in', 'Booked an appointment', 'Updated a patient record', 'Raised a bill']
        now = timezone.now()
        for i in range(12):
            member = rng.choice(staff)
            log_action(staff=member, action=f'{member.username}: {rng.choice(actions)}', time=now - timedelta(minutes=15 * i))
