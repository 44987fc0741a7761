"""
HTTP client for the medication API.

The web front end never touches the database: everything goes through
this client, which forwards the signed-in user's role header.
"""

import requests
import structlog
from django.conf import settings

from apps.core.identity import Role

logger = structlog.get_logger(__name__)


class ApiError(Exception):
    """The API answered with an error, or could not be reached."""

    def __init__(self, message, status_code=None, code=None, field_errors=None):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.field_errors = field_errors or {}
        super().__init__(self.message)


class MedicationApiClient:
    """
    Thin wrapper over ``requests.Session``.

    One instance per signed-in user: ``role`` and ``user_id`` become the
    identity header on every call.
    """

    def __init__(self, role: Role, user_id: str, base_url=None, timeout=None, session=None):
        self.role = role
        self.user_id = user_id
        self.base_url = (base_url or settings.MEDICATION_API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.MEDICATION_API_TIMEOUT
        self.session = session or requests.Session()

    # ------------------------------------------------------------
    # Patient
    # ------------------------------------------------------------
    def patient_prescriptions(self, status=None):
        params = {"status": status} if status else None
        return self._request("GET", "/api/v1/prescriptions/", params=params)

    def patient_prescription(self, prescription_id):
        return self._request("GET", f"/api/v1/prescriptions/{prescription_id}/")

    def refill_eligible(self):
        return self._request("GET", "/api/v1/prescriptions/refill-eligible/")

    def record_adherence(self, prescription_id, status, notes=None, side_effects=None):
        payload = {"status": status, "notes": notes, "side_effects_reported": side_effects}
        return self._request("POST", f"/api/v1/prescriptions/{prescription_id}/take/", json=payload)

    def adherence_history(self, prescription_id):
        return self._request("GET", f"/api/v1/prescriptions/{prescription_id}/adherence/")

    # ------------------------------------------------------------
    # Prescriber
    # ------------------------------------------------------------
    def prescriber_prescriptions(self, patient_id=None):
        params = {"patient_id": patient_id} if patient_id else None
        return self._request("GET", "/api/v1/prescriber/prescriptions/", params=params)

    def create_prescription(self, payload):
        return self._request("POST", "/api/v1/prescriber/prescriptions/", json=payload)

    def cancel_prescription(self, prescription_id, reason=None):
        return self._request(
            "DELETE",
            f"/api/v1/prescriber/prescriptions/{prescription_id}/",
            json={"reason": reason},
        )

    # ------------------------------------------------------------
    # Pharmacist
    # ------------------------------------------------------------
    def dispense(self, prescription_id, quantity, notes=None):
        payload = {"prescription_id": prescription_id, "quantity_to_dispense": quantity, "notes": notes}
        return self._request("POST", "/api/v1/pharmacist/prescriptions/dispense/", json=payload)

    # ------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------
    def medications(self):
        return self._request("GET", "/api/v1/medications/")

    def medication(self, medication_id):
        return self._request("GET", f"/api/v1/medications/{medication_id}/")

    def search_medications(self, name):
        return self._request("GET", "/api/v1/medications/search/", params={"name": name})

    # ------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------
    def _request(self, method, path, **kwargs):
        headers = {self.role.header: self.user_id, "Accept": "application/json"}
        url = f"{self.base_url}{path}"

        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("api_unreachable", method=method, path=path, error=str(exc))
            raise ApiError("The medication service is unavailable") from exc

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            logger.warning(
                "api_error_response",
                method=method,
                path=path,
                status_code=response.status_code,
                code=body.get("code"),
            )
            raise ApiError(
                body.get("message") or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
                code=body.get("code"),
                field_errors=body.get("field_errors"),
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()
