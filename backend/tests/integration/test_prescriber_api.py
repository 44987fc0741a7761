"""
Integration tests for the prescriber API.
"""

from datetime import date

import pytest
from django.urls import reverse
from rest_framework import status

from apps.prescriptions.models import Prescription, PrescriptionStatus


@pytest.fixture
def create_payload(patient, medication):
    return {
        "patient_id": patient.pk,
        "medication_id": medication.pk,
        "dose": "500",
        "dose_unit": "mg",
        "frequency": "TWICE_DAILY",
        "route": "ORAL",
        "start_date": date.today().isoformat(),
        "quantity_prescribed": 90,
        "refills_allowed": 2,
    }


@pytest.mark.django_db
class TestCreatePrescription:
    def test_create_success(self, api_client, create_payload, prescriber_headers):
        url = reverse("prescriber-prescription-list")
        response = api_client.post(url, create_payload, format="json", **prescriber_headers)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["status"] == "ACTIVE"
        assert data["prescription_number"].startswith("RX-")
        assert data["quantity_dispensed"] == 0
        assert data["refills_remaining"] == 2
        assert data["medication_name"] == "Alvedon"
        assert data["prescriber_name"] == "Anna Lindqvist"
        assert Prescription.objects.count() == 1

    def test_create_without_identity(self, api_client, create_payload):
        url = reverse("prescriber-prescription-list")
        response = api_client.post(url, create_payload, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["code"] == "PRESCRIBER_IDENTITY_REQUIRED"
        assert Prescription.objects.count() == 0

    def test_create_with_unknown_patient(self, api_client, create_payload, prescriber_headers):
        create_payload["patient_id"] = "patient-missing"

        url = reverse("prescriber-prescription-list")
        response = api_client.post(url, create_payload, format="json", **prescriber_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "REFERENCE_NOT_FOUND"

    def test_create_with_unknown_prescriber(self, api_client, create_payload):
        url = reverse("prescriber-prescription-list")
        response = api_client.post(url, create_payload, format="json", HTTP_X_PRESCRIBER_ID="nobody")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_create_validation(self, api_client, create_payload, prescriber_headers):
        create_payload["dose"] = "0"
        create_payload["quantity_prescribed"] = 0
        del create_payload["route"]

        url = reverse("prescriber-prescription-list")
        response = api_client.post(url, create_payload, format="json", **prescriber_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["code"] == "VALIDATION_FAILED"
        assert set(body["field_errors"]) == {"dose", "quantity_prescribed", "route"}

    def test_end_date_before_start(self, api_client, create_payload, prescriber_headers):
        create_payload["end_date"] = "2000-01-01"

        url = reverse("prescriber-prescription-list")
        response = api_client.post(url, create_payload, format="json", **prescriber_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "end_date" in response.json()["field_errors"]


@pytest.mark.django_db
class TestPrescriberReads:
    def test_list_own_only(self, api_client, make_prescription, other_prescriber, prescriber_headers):
        mine = make_prescription()
        make_prescription(prescriber=other_prescriber)

        response = api_client.get(reverse("prescriber-prescription-list"), **prescriber_headers)

        assert response.status_code == status.HTTP_200_OK
        assert [p["id"] for p in response.json()] == [mine.pk]

    def test_list_filtered_by_patient(self, api_client, make_prescription, other_patient, prescriber_headers):
        make_prescription()
        theirs = make_prescription(patient=other_patient)

        response = api_client.get(
            reverse("prescriber-prescription-list"), {"patient_id": other_patient.pk}, **prescriber_headers
        )

        assert [p["id"] for p in response.json()] == [theirs.pk]

    def test_retrieve_other_prescribers_prescription(self, api_client, make_prescription, other_prescriber, prescriber_headers):
        theirs = make_prescription(prescriber=other_prescriber)

        url = reverse("prescriber-prescription-detail", args=[theirs.pk])
        response = api_client.get(url, **prescriber_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestUpdatePrescription:
    def test_update_success(self, api_client, active_prescription, prescriber_headers):
        url = reverse("prescriber-prescription-detail", args=[active_prescription.pk])
        response = api_client.put(
            url,
            {"dose": "250", "instructions": "With food", "modification_reason": "Dose reduction"},
            format="json",
            **prescriber_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["dose"] == "250.000"
        assert response.json()["instructions"] == "With food"

    def test_patch_works_like_put(self, api_client, active_prescription, prescriber_headers):
        url = reverse("prescriber-prescription-detail", args=[active_prescription.pk])
        response = api_client.patch(
            url, {"frequency": "ONCE_DAILY", "modification_reason": "Simplify"}, format="json", **prescriber_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["frequency"] == "ONCE_DAILY"

    def test_update_requires_reason(self, api_client, active_prescription, prescriber_headers):
        url = reverse("prescriber-prescription-detail", args=[active_prescription.pk])
        response = api_client.put(url, {"dose": "250"}, format="json", **prescriber_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "modification_reason" in response.json()["field_errors"]

    def test_update_by_other_prescriber(self, api_client, active_prescription, other_prescriber):
        url = reverse("prescriber-prescription-detail", args=[active_prescription.pk])
        response = api_client.put(
            url,
            {"dose": "1", "modification_reason": "x"},
            format="json",
            HTTP_X_PRESCRIBER_ID=other_prescriber.user_id,
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["code"] == "FORBIDDEN"

    def test_update_cancelled(self, api_client, make_prescription, prescriber_headers):
        prescription = make_prescription(status=PrescriptionStatus.CANCELLED)

        url = reverse("prescriber-prescription-detail", args=[prescription.pk])
        response = api_client.put(url, {"dose": "1", "modification_reason": "x"}, format="json", **prescriber_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "INVALID_STATE"

    def test_update_missing(self, api_client, prescriber_headers):
        url = reverse("prescriber-prescription-detail", args=[424242])
        response = api_client.put(url, {"modification_reason": "x"}, format="json", **prescriber_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCancelPrescription:
    def test_cancel_with_reason(self, api_client, active_prescription, prescriber_headers):
        url = reverse("prescriber-prescription-detail", args=[active_prescription.pk])
        response = api_client.delete(url, {"reason": "Allergic reaction"}, format="json", **prescriber_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        active_prescription.refresh_from_db()
        assert active_prescription.status == PrescriptionStatus.CANCELLED
        assert active_prescription.cancellation_reason == "Allergic reaction"

    def test_cancel_without_reason_uses_default(self, api_client, active_prescription, prescriber_headers):
        url = reverse("prescriber-prescription-detail", args=[active_prescription.pk])
        response = api_client.delete(url, **prescriber_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        active_prescription.refresh_from_db()
        assert active_prescription.cancellation_reason == "No reason provided"

    def test_cancel_twice(self, api_client, active_prescription, prescriber_headers):
        url = reverse("prescriber-prescription-detail", args=[active_prescription.pk])
        api_client.delete(url, **prescriber_headers)

        response = api_client.delete(url, **prescriber_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Prescription already cancelled"

    def test_cancel_by_other_prescriber(self, api_client, active_prescription, other_prescriber):
        url = reverse("prescriber-prescription-detail", args=[active_prescription.pk])
        response = api_client.delete(url, HTTP_X_PRESCRIBER_ID=other_prescriber.user_id)

        assert response.status_code == status.HTTP_403_FORBIDDEN
