"""
Integration tests for the pharmacist dispense API.
"""

import pytest
from django.urls import reverse
from rest_framework import status

from apps.prescriptions.models import Dispensation, PrescriptionStatus


@pytest.mark.django_db
class TestDispense:
    url = "/api/v1/pharmacist/prescriptions/dispense/"

    def test_url_name(self):
        assert reverse("pharmacist-dispense") == "/api/v1/pharmacist/prescriptions/dispense"

    def test_dispense_scenario(self, api_client, active_prescription, pharmacist_headers):
        payload = {"prescription_id": active_prescription.pk, "quantity_to_dispense": 30}
        response = api_client.post(self.url, payload, format="json", **pharmacist_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "ACTIVE"
        assert response.json()["quantity_dispensed"] == 30

        payload["quantity_to_dispense"] = 60
        response = api_client.post(self.url, payload, format="json", **pharmacist_headers)
        assert response.json()["status"] == "COMPLETED"
        assert response.json()["quantity_dispensed"] == 90

        payload["quantity_to_dispense"] = 1
        response = api_client.post(self.url, payload, format="json", **pharmacist_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "INVALID_STATE"

        assert Dispensation.objects.count() == 2

    def test_dispense_response_lists_dispensations(self, api_client, active_prescription, pharmacist_headers):
        payload = {"prescription_id": active_prescription.pk, "quantity_to_dispense": 30, "notes": "First fill"}
        response = api_client.post(self.url, payload, format="json", **pharmacist_headers)

        dispensations = response.json()["dispensations"]
        assert len(dispensations) == 1
        assert dispensations[0]["quantity"] == 30
        assert dispensations[0]["pharmacist_user_id"] == "pharmacist1"
        assert dispensations[0]["notes"] == "First fill"
        assert dispensations[0]["prescription_id"] == active_prescription.pk

    def test_dispense_exceeding_quantity(self, api_client, active_prescription, pharmacist_headers):
        payload = {"prescription_id": active_prescription.pk, "quantity_to_dispense": 91}
        response = api_client.post(self.url, payload, format="json", **pharmacist_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        active_prescription.refresh_from_db()
        assert active_prescription.quantity_dispensed == 0
        assert active_prescription.status == PrescriptionStatus.ACTIVE

    def test_dispense_zero(self, api_client, active_prescription, pharmacist_headers):
        payload = {"prescription_id": active_prescription.pk, "quantity_to_dispense": 0}
        response = api_client.post(self.url, payload, format="json", **pharmacist_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "quantity_to_dispense" in response.json()["field_errors"]

    def test_dispense_missing_prescription(self, api_client, pharmacist_headers):
        payload = {"prescription_id": 424242, "quantity_to_dispense": 1}
        response = api_client.post(self.url, payload, format="json", **pharmacist_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_dispense_requires_identity(self, api_client, active_prescription):
        payload = {"prescription_id": active_prescription.pk, "quantity_to_dispense": 1}
        response = api_client.post(self.url, payload, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_dispense_with_unregistered_pharmacist(self, api_client, active_prescription):
        payload = {"prescription_id": active_prescription.pk, "quantity_to_dispense": 1}
        response = api_client.post(self.url, payload, format="json", HTTP_X_PHARMACIST_ID="nobody")

        assert response.status_code == status.HTTP_404_NOT_FOUND
