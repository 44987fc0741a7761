"""
Pytest configuration and fixtures.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.medications.models import Medication
from apps.patients.models import Patient
from apps.prescriptions.models import Prescription, PrescriptionStatus
from apps.prescriptions.services import PrescriptionLifecycleService
from apps.providers.models import Pharmacist, Prescriber


@pytest.fixture
def api_client():
    """Return an API client for testing."""
    return APIClient()


@pytest.fixture
def patient(db):
    return Patient.objects.create(
        id="patient-001",
        user_id="patient1",
        national_id="19121212-1212",
        first_name="Karin",
        last_name="Berg",
        date_of_birth=date(1912, 12, 12),
        gender="FEMALE",
    )


@pytest.fixture
def other_patient(db):
    return Patient.objects.create(
        id="patient-002",
        user_id="patient2",
        national_id="19900101-1239",
        first_name="Johan",
        last_name="Ek",
        date_of_birth=date(1990, 1, 1),
        gender="MALE",
    )


@pytest.fixture
def prescriber(db):
    return Prescriber.objects.create(
        user_id="prescriber1",
        first_name="Anna",
        last_name="Lindqvist",
        license_number="SE-LK-100234",
        specialty="General practice",
    )


@pytest.fixture
def other_prescriber(db):
    return Prescriber.objects.create(
        user_id="prescriber2",
        first_name="Erik",
        last_name="Nyström",
        license_number="SE-LK-100987",
        specialty="Cardiology",
    )


@pytest.fixture
def pharmacist(db):
    return Pharmacist.objects.create(
        user_id="pharmacist1",
        first_name="Sara",
        last_name="Holm",
        license_number="SE-AP-200111",
        pharmacy_name="Apoteket Hjärtat",
    )


@pytest.fixture
def medication(db):
    return Medication.objects.create(
        npl_id="NPL-19750101",
        trade_name="Alvedon",
        generic_name="Paracetamol",
        form="Tablet",
        strength="500 mg",
        route="ORAL",
        atc_code="N02BE01",
        manufacturer="Karo Pharma",
        price=Decimal("39.50"),
    )


@pytest.fixture
def other_medication(db):
    return Medication.objects.create(
        npl_id="NPL-19920315",
        trade_name="Trombyl",
        generic_name="Acetylsalicylic acid",
        form="Tablet",
        strength="75 mg",
        atc_code="B01AC06",
    )


@pytest.fixture
def prescription_data(patient, medication):
    """Valid create payload (service-level types)."""
    return {
        "patient_id": patient.pk,
        "medication_id": medication.pk,
        "dose": Decimal("500"),
        "dose_unit": "mg",
        "frequency": "TWICE_DAILY",
        "route": "ORAL",
        "start_date": date.today(),
        "quantity_prescribed": 90,
        "quantity_unit": "tablets",
        "days_supply": 45,
        "refills_allowed": 2,
    }


@pytest.fixture
def active_prescription(prescription_data, prescriber):
    return PrescriptionLifecycleService.create(prescription_data, prescriber.user_id)


@pytest.fixture
def make_prescription(patient, medication, prescriber):
    """Insert a prescription row directly, bypassing the service."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        values = {
            "prescription_number": f"RX-{counter['n']:08X}",
            "patient": patient,
            "medication": medication,
            "prescriber": prescriber,
            "status": PrescriptionStatus.ACTIVE,
            "dose": Decimal("1"),
            "dose_unit": "tablet",
            "frequency": "ONCE_DAILY",
            "route": "ORAL",
            "start_date": date.today() - timedelta(days=30),
            "quantity_prescribed": 30,
            "refills_allowed": 1,
            "refills_remaining": 1,
            "created_by": prescriber.user_id,
        }
        values.update(overrides)
        return Prescription.objects.create(**values)

    return _make


@pytest.fixture
def prescriber_headers(prescriber):
    return {"HTTP_X_PRESCRIBER_ID": prescriber.user_id}


@pytest.fixture
def patient_headers(patient):
    return {"HTTP_X_PATIENT_ID": patient.pk}


@pytest.fixture
def pharmacist_headers(pharmacist):
    return {"HTTP_X_PHARMACIST_ID": pharmacist.user_id}
