"""
Seed development data.
Usage: python manage.py seed_data
"""

from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.medications.models import Medication
from apps.patients.models import Patient
from apps.prescriptions.models import Prescription
from apps.prescriptions.services import PrescriptionLifecycleService
from apps.providers.models import Pharmacist, Prescriber


class Command(BaseCommand):
    help = "Seed database with development data"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding database...")

        prescribers = [
            Prescriber.objects.get_or_create(
                user_id="prescriber1",
                defaults={
                    "first_name": "Anna",
                    "last_name": "Lindqvist",
                    "license_number": "SE-LK-100234",
                    "specialty": "General practice",
                    "workplace": "Vårdcentralen Södermalm",
                },
            )[0],
            Prescriber.objects.get_or_create(
                user_id="prescriber2",
                defaults={
                    "first_name": "Erik",
                    "last_name": "Nyström",
                    "license_number": "SE-LK-100987",
                    "specialty": "Cardiology",
                    "workplace": "Karolinska Universitetssjukhuset",
                },
            )[0],
        ]
        self.stdout.write(f"  Created {len(prescribers)} prescribers")

        Pharmacist.objects.get_or_create(
            user_id="pharmacist1",
            defaults={
                "first_name": "Sara",
                "last_name": "Holm",
                "license_number": "SE-AP-200111",
                "pharmacy_name": "Apoteket Hjärtat Götgatan",
            },
        )
        self.stdout.write("  Created 1 pharmacist")

        patients_data = [
            {
                "id": "patient-001",
                "user_id": "patient1",
                "national_id": "19121212-1212",
                "first_name": "Karin",
                "last_name": "Berg",
                "date_of_birth": "1912-12-12",
                "gender": "FEMALE",
                "city": "Stockholm",
                "allergies": "Penicillin",
            },
            {
                "id": "patient-002",
                "user_id": "patient2",
                "national_id": "19900101-1239",
                "first_name": "Johan",
                "last_name": "Ek",
                "date_of_birth": "1990-01-01",
                "gender": "MALE",
                "city": "Uppsala",
            },
            {
                "id": "patient-003",
                "user_id": "patient3",
                "national_id": "19850615-4569",
                "first_name": "Lena",
                "last_name": "Sjöberg",
                "date_of_birth": "1985-06-15",
                "gender": "FEMALE",
                "city": "Göteborg",
                "chronic_conditions": "Hypertension",
            },
        ]

        patients = []
        for data in patients_data:
            patient = Patient.all_objects.filter(pk=data["id"]).first()
            if patient is None:
                patient = Patient(**data)
                patient.save()
            patients.append(patient)
        self.stdout.write(f"  Created {len(patients)} patients")

        medications_data = [
            ("NPL-19750101", "Alvedon", "Paracetamol", "Tablet", "500 mg", "N02BE01", "Karo Pharma"),
            ("NPL-19920315", "Trombyl", "Acetylsalicylic acid", "Tablet", "75 mg", "B01AC06", "Karo Pharma"),
            ("NPL-20010620", "Metformin Sandoz", "Metformin", "Film-coated tablet", "500 mg", "A10BA02", "Sandoz"),
            ("NPL-19960910", "Enalapril Actavis", "Enalapril", "Tablet", "10 mg", "C09AA02", "Actavis"),
            ("NPL-20050412", "Omeprazol Mylan", "Omeprazole", "Gastro-resistant capsule", "20 mg", "A02BC01", "Mylan"),
        ]

        medications = []
        for npl_id, trade_name, generic_name, form, strength, atc_code, manufacturer in medications_data:
            medication, _ = Medication.objects.get_or_create(
                npl_id=npl_id,
                defaults={
                    "trade_name": trade_name,
                    "generic_name": generic_name,
                    "form": form,
                    "strength": strength,
                    "route": "ORAL",
                    "atc_code": atc_code,
                    "manufacturer": manufacturer,
                },
            )
            medications.append(medication)
        self.stdout.write(f"  Created {len(medications)} medications")

        if Prescription.objects.exists():
            self.stdout.write("  Prescriptions already present, skipping")
            self.stdout.write(self.style.SUCCESS("Database seeded successfully!"))
            return

        today = timezone.localdate()
        prescriptions_data = [
            (patients[0], medications[1], prescribers[1], Decimal("75"), "mg", "ONCE_DAILY", 100, 3),
            (patients[0], medications[3], prescribers[1], Decimal("10"), "mg", "ONCE_DAILY", 90, 2),
            (patients[1], medications[2], prescribers[0], Decimal("500"), "mg", "TWICE_DAILY", 180, 1),
            (patients[2], medications[4], prescribers[0], Decimal("20"), "mg", "ONCE_DAILY", 28, 0),
            (patients[2], medications[0], prescribers[0], Decimal("1000"), "mg", "AS_NEEDED", 50, 0),
        ]

        for patient, medication, prescriber, dose, unit, frequency, quantity, refills in prescriptions_data:
            PrescriptionLifecycleService.create(
                {
                    "patient_id": patient.pk,
                    "medication_id": medication.pk,
                    "dose": dose,
                    "dose_unit": unit,
                    "frequency": frequency,
                    "route": "ORAL",
                    "start_date": today,
                    "quantity_prescribed": quantity,
                    "quantity_unit": "tablets",
                    "days_supply": 30,
                    "refills_allowed": refills,
                    "is_prn": frequency == "AS_NEEDED",
                },
                prescriber.user_id,
            )

        # First patient can refill today
        Prescription.objects.filter(patient=patients[0], refills_remaining__gt=0).update(
            next_refill_eligible_date=today - timedelta(days=1)
        )
        self.stdout.write(f"  Created {len(prescriptions_data)} prescriptions")

        self.stdout.write(self.style.SUCCESS("Database seeded successfully!"))
