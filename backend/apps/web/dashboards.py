"""
Dashboard view models.

Each role gets its own dashboard type. ``build_dashboard`` looks the
builder up by role, so adding a role means adding one dataclass and one
builder. API failures are collected into ``errors`` instead of aborting
the page.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from apps.core.identity import Role

from .client import ApiError, MedicationApiClient


@dataclass
class PatientDashboard:
    user_id: str
    prescriptions: List[dict] = field(default_factory=list)
    refill_eligible: List[dict] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    role: Role = Role.PATIENT
    template_name: str = "web/patient_dashboard.html"


@dataclass
class PrescriberDashboard:
    user_id: str
    prescriptions: List[dict] = field(default_factory=list)
    medications: List[dict] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    role: Role = Role.PRESCRIBER
    template_name: str = "web/prescriber_dashboard.html"

    @property
    def active_count(self):
        return sum(1 for p in self.prescriptions if p.get("status") == "ACTIVE")


@dataclass
class PharmacistDashboard:
    user_id: str
    medications: List[dict] = field(default_factory=list)
    search_query: str = ""
    errors: List[str] = field(default_factory=list)
    role: Role = Role.PHARMACIST
    template_name: str = "web/pharmacist_dashboard.html"


def _load(errors, label, call, *args, **kwargs):
    try:
        return call(*args, **kwargs) or []
    except ApiError as exc:
        errors.append(f"Could not load {label}: {exc.message}")
        return []


def build_patient_dashboard(client: MedicationApiClient, **options) -> PatientDashboard:
    dashboard = PatientDashboard(user_id=client.user_id)
    dashboard.prescriptions = _load(dashboard.errors, "prescriptions", client.patient_prescriptions)
    dashboard.refill_eligible = _load(dashboard.errors, "refill-eligible prescriptions", client.refill_eligible)
    return dashboard


def build_prescriber_dashboard(client: MedicationApiClient, **options) -> PrescriberDashboard:
    dashboard = PrescriberDashboard(user_id=client.user_id)
    dashboard.prescriptions = _load(
        dashboard.errors, "prescriptions", client.prescriber_prescriptions, options.get("patient_id")
    )
    dashboard.medications = _load(dashboard.errors, "medications", client.medications)
    return dashboard


def build_pharmacist_dashboard(client: MedicationApiClient, **options) -> PharmacistDashboard:
    query = (options.get("q") or "").strip()
    dashboard = PharmacistDashboard(user_id=client.user_id, search_query=query)
    if query:
        dashboard.medications = _load(dashboard.errors, "medications", client.search_medications, query)
    else:
        dashboard.medications = _load(dashboard.errors, "medications", client.medications)
    return dashboard


DASHBOARD_BUILDERS: Dict[Role, object] = {
    Role.PATIENT: build_patient_dashboard,
    Role.PRESCRIBER: build_prescriber_dashboard,
    Role.PHARMACIST: build_pharmacist_dashboard,
}


def build_dashboard(role: Role, client: MedicationApiClient, **options):
    """Dashboard for the signed-in role, loaded through ``client``."""
    return DASHBOARD_BUILDERS[role](client, **options)
