"""
Unit tests for role dashboards.
"""

from unittest.mock import MagicMock

import pytest

from apps.core.identity import Role
from apps.web.client import ApiError
from apps.web.dashboards import (
    DASHBOARD_BUILDERS,
    PatientDashboard,
    PharmacistDashboard,
    PrescriberDashboard,
    build_dashboard,
)


def _client(role, user_id="user-1"):
    client = MagicMock()
    client.role = role
    client.user_id = user_id
    return client


def test_every_role_has_a_builder():
    assert set(DASHBOARD_BUILDERS) == set(Role)


@pytest.mark.parametrize(
    "role, expected_type",
    [
        (Role.PATIENT, PatientDashboard),
        (Role.PRESCRIBER, PrescriberDashboard),
        (Role.PHARMACIST, PharmacistDashboard),
    ],
)
def test_builder_returns_role_dashboard(role, expected_type):
    dashboard = build_dashboard(role, _client(role))

    assert isinstance(dashboard, expected_type)
    assert dashboard.role is role
    assert dashboard.errors == []


def test_patient_dashboard_contents():
    client = _client(Role.PATIENT, "patient-001")
    client.patient_prescriptions.return_value = [{"id": 1, "status": "ACTIVE"}]
    client.refill_eligible.return_value = [{"id": 1, "status": "ACTIVE"}]

    dashboard = build_dashboard(client.role, client)

    assert dashboard.user_id == "patient-001"
    assert dashboard.prescriptions == [{"id": 1, "status": "ACTIVE"}]
    assert dashboard.refill_eligible == [{"id": 1, "status": "ACTIVE"}]


def test_prescriber_dashboard_filters_and_counts():
    client = _client(Role.PRESCRIBER)
    client.prescriber_prescriptions.return_value = [
        {"id": 1, "status": "ACTIVE"},
        {"id": 2, "status": "CANCELLED"},
        {"id": 3, "status": "ACTIVE"},
    ]
    client.medications.return_value = [{"id": 9}]

    dashboard = build_dashboard(client.role, client, patient_id="patient-001")

    client.prescriber_prescriptions.assert_called_once_with("patient-001")
    assert dashboard.active_count == 2
    assert dashboard.medications == [{"id": 9}]


def test_pharmacist_dashboard_search():
    client = _client(Role.PHARMACIST)
    client.search_medications.return_value = [{"id": 1, "trade_name": "Alvedon"}]

    dashboard = build_dashboard(client.role, client, q=" alve ")

    client.search_medications.assert_called_once_with("alve")
    client.medications.assert_not_called()
    assert dashboard.search_query == "alve"


def test_api_failure_is_collected_not_raised():
    client = _client(Role.PATIENT)
    client.patient_prescriptions.side_effect = ApiError("The medication service is unavailable")
    client.refill_eligible.return_value = []

    dashboard = build_dashboard(client.role, client)

    assert dashboard.prescriptions == []
    assert dashboard.errors == ["Could not load prescriptions: The medication service is unavailable"]
