"""
Integration tests for patient, prescriber, pharmacist and medication endpoints.
"""

import pytest
from django.urls import reverse
from rest_framework import status

from apps.patients.models import Patient
from apps.providers.models import Prescriber


@pytest.fixture
def patient_payload():
    return {
        "id": "patient-010",
        "user_id": "patient10",
        "national_id": "19850615-4569",
        "first_name": "  Lena ",
        "last_name": "Sjöberg",
        "date_of_birth": "1985-06-15",
        "gender": "FEMALE",
    }


@pytest.mark.django_db
class TestPatientAPI:
    def test_create_patient(self, api_client, patient_payload):
        response = api_client.post(reverse("patient-list"), patient_payload, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert "national_id" not in data
        assert data["national_id_masked"].endswith("4569")
        assert data["first_name"] == "Lena"
        assert Patient.objects.get(pk="patient-010").national_id == "19850615-4569"

    def test_create_patient_invalid_national_id(self, api_client, patient_payload):
        patient_payload["national_id"] = "19850615-4568"

        response = api_client.post(reverse("patient-list"), patient_payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "national_id" in response.json()["field_errors"]

    def test_duplicate_national_id(self, api_client, patient, patient_payload):
        patient_payload["national_id"] = "191212121212"

        response = api_client.post(reverse("patient-list"), patient_payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "national_id" in response.json()["field_errors"]

    def test_soft_delete(self, api_client, patient):
        response = api_client.delete(reverse("patient-detail", args=[patient.pk]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Patient.objects.filter(pk=patient.pk).exists()
        assert Patient.all_objects.filter(pk=patient.pk).exists()

        response = api_client.get(reverse("patient-detail", args=[patient.pk]))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_id_cannot_change_on_update(self, api_client, patient):
        response = api_client.patch(
            reverse("patient-detail", args=[patient.pk]), {"id": "patient-999", "city": "Lund"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == patient.pk
        assert response.json()["city"] == "Lund"

    def test_by_user(self, api_client, patient):
        response = api_client.get(reverse("patient-by-user", args=[patient.user_id]))
        assert response.json()["id"] == patient.pk

        response = api_client.get(reverse("patient-by-user", args=["unknown"]))
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestProviderAPI:
    def test_create_prescriber(self, api_client):
        payload = {
            "user_id": "prescriber9",
            "first_name": "Maria",
            "last_name": "Ström",
            "license_number": " se-lk-555 ",
            "specialty": "Psychiatry",
        }
        response = api_client.post(reverse("prescriber-list"), payload, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert Prescriber.objects.get(user_id="prescriber9").license_number == "SE-LK-555"

    def test_duplicate_license(self, api_client, prescriber):
        payload = {
            "user_id": "prescriber9",
            "first_name": "Maria",
            "last_name": "Ström",
            "license_number": prescriber.license_number,
        }
        response = api_client.post(reverse("prescriber-list"), payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "license_number" in response.json()["field_errors"]

    def test_prescriber_by_user(self, api_client, prescriber):
        response = api_client.get(reverse("prescriber-by-user", args=[prescriber.user_id]))
        assert response.json()["full_name"] == "Anna Lindqvist"

    def test_list_pharmacists(self, api_client, pharmacist):
        response = api_client.get(reverse("pharmacist-list"))

        assert response.status_code == status.HTTP_200_OK
        assert [p["user_id"] for p in response.json()] == ["pharmacist1"]


@pytest.mark.django_db
class TestMedicationAPI:
    def test_list(self, api_client, medication, other_medication):
        response = api_client.get(reverse("medication-list"))

        assert response.status_code == status.HTTP_200_OK
        assert [m["trade_name"] for m in response.json()] == ["Alvedon", "Trombyl"]

    def test_retrieve(self, api_client, medication):
        response = api_client.get(reverse("medication-detail", args=[medication.pk]))

        assert response.json()["atc_code"] == "N02BE01"
        assert response.json()["price"] == "39.50"

    def test_retrieve_missing(self, api_client):
        response = api_client.get(reverse("medication-detail", args=[424242]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "NOT_FOUND"

    @pytest.mark.parametrize("name", ["alve", "PARACET", "Alvedon"])
    def test_search_case_insensitive(self, api_client, medication, other_medication, name):
        response = api_client.get(reverse("medication-search"), {"name": name})

        assert [m["trade_name"] for m in response.json()] == ["Alvedon"]

    def test_search_requires_name(self, api_client):
        response = api_client.get(reverse("medication-search"))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_catalog_is_read_only(self, api_client):
        response = api_client.post(reverse("medication-list"), {"trade_name": "X"}, format="json")

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


@pytest.mark.django_db
class TestOperational:
    def test_health(self, client):
        response = client.get(reverse("health"))

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_request_id_header(self, api_client, medication):
        response = api_client.get(reverse("medication-list"), HTTP_X_REQUEST_ID="abc123")

        assert response["X-Request-ID"] == "abc123"
