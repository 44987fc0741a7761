"""
Web front end views.

Server-rendered pages for patients, prescribers and pharmacists. Every
view talks to the API through ``request.api``; failures are shown as a
message on the page.
"""

import structlog
from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods, require_POST

from apps.core.identity import Role

from .client import ApiError
from .dashboards import build_dashboard
from .forms import AdherenceForm, CancelForm, DispenseForm, LoginForm, PrescriptionForm
from .session import current_identity, role_required, sign_in, sign_out

logger = structlog.get_logger(__name__)

DASHBOARD_URLS = {
    Role.PATIENT: "web:patient-dashboard",
    Role.PRESCRIBER: "web:prescriber-dashboard",
    Role.PHARMACIST: "web:pharmacist-dashboard",
}


def index(request):
    """Send the user to their role's dashboard."""
    identity = current_identity(request)
    if identity is None:
        return redirect("web:login")
    return redirect(DASHBOARD_URLS[identity[0]])


@require_http_methods(["GET", "POST"])
def login_view(request):
    form = LoginForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        role = Role(form.cleaned_data["role"])
        sign_in(request, role, form.cleaned_data["user_id"])
        logger.info("web_sign_in", role=role.value)
        return redirect(DASHBOARD_URLS[role])
    return render(request, "web/login.html", {"form": form})


def logout_view(request):
    sign_out(request)
    return redirect("web:login")


def _render_dashboard(request, **options):
    dashboard = build_dashboard(request.identity[0], request.api, **options)
    return render(request, dashboard.template_name, {"dashboard": dashboard})


# ============================================================
# Patient
# ============================================================
@role_required(Role.PATIENT)
def patient_dashboard(request):
    return _render_dashboard(request)


@role_required(Role.PATIENT)
def patient_prescription_detail(request, prescription_id):
    context = {"prescription": None, "history": [], "form": AdherenceForm()}
    try:
        context["prescription"] = request.api.patient_prescription(prescription_id)
        context["history"] = request.api.adherence_history(prescription_id) or []
    except ApiError as exc:
        context["error"] = f"Could not load prescription: {exc.message}"
        return render(request, "web/prescription_detail.html", context, status=exc.status_code or 502)
    return render(request, "web/prescription_detail.html", context)


@require_POST
@role_required(Role.PATIENT)
def patient_take(request, prescription_id):
    form = AdherenceForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Invalid adherence entry")
        return redirect("web:patient-prescription", prescription_id=prescription_id)

    try:
        request.api.record_adherence(
            prescription_id,
            form.cleaned_data["status"],
            notes=form.cleaned_data["notes"] or None,
            side_effects=form.cleaned_data["side_effects_reported"] or None,
        )
        messages.success(request, "Dose recorded")
    except ApiError as exc:
        messages.error(request, f"Could not record dose: {exc.message}")
    return redirect("web:patient-prescription", prescription_id=prescription_id)


# ============================================================
# Prescriber
# ============================================================
@role_required(Role.PRESCRIBER)
def prescriber_dashboard(request):
    return _render_dashboard(request, patient_id=request.GET.get("patient_id"))


@require_http_methods(["GET", "POST"])
@role_required(Role.PRESCRIBER)
def prescriber_new_prescription(request):
    context = {}
    try:
        medications = request.api.medications() or []
    except ApiError as exc:
        medications = []
        context["error"] = f"Could not load medications: {exc.message}"

    form = PrescriptionForm(request.POST or None, medications=medications)
    context["form"] = form

    if request.method == "POST" and form.is_valid():
        try:
            created = request.api.create_prescription(form.to_payload())
        except ApiError as exc:
            form.add_api_errors(exc.field_errors)
            context["error"] = f"Could not create prescription: {exc.message}"
        else:
            messages.success(request, f"Prescription {created['prescription_number']} created")
            return redirect("web:prescriber-dashboard")

    return render(request, "web/prescription_form.html", context)


@require_POST
@role_required(Role.PRESCRIBER)
def prescriber_cancel(request, prescription_id):
    form = CancelForm(request.POST)
    reason = form.cleaned_data["reason"] if form.is_valid() else ""
    try:
        request.api.cancel_prescription(prescription_id, reason or None)
        messages.success(request, "Prescription cancelled")
    except ApiError as exc:
        messages.error(request, f"Could not cancel prescription: {exc.message}")
    return redirect("web:prescriber-dashboard")


# ============================================================
# Pharmacist
# ============================================================
@role_required(Role.PHARMACIST)
def pharmacist_dashboard(request):
    return _render_dashboard(request, q=request.GET.get("q"))


@require_POST
@role_required(Role.PHARMACIST)
def pharmacist_dispense(request):
    form = DispenseForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Prescription id and a quantity of at least 1 are required")
        return redirect("web:pharmacist-dashboard")

    try:
        prescription = request.api.dispense(
            form.cleaned_data["prescription_id"],
            form.cleaned_data["quantity_to_dispense"],
            notes=form.cleaned_data["notes"] or None,
        )
        messages.success(
            request,
            f"Dispensed {form.cleaned_data['quantity_to_dispense']} for "
            f"{prescription['prescription_number']} ({prescription['status']})",
        )
    except ApiError as exc:
        messages.error(request, f"Could not dispense: {exc.message}")
    return redirect("web:pharmacist-dashboard")


@role_required(Role.PHARMACIST)
def pharmacist_medication_detail(request, medication_id):
    try:
        medication = request.api.medication(medication_id)
    except ApiError as exc:
        context = {"medication": None, "error": f"Could not load medication: {exc.message}"}
        return render(request, "web/medication_detail.html", context, status=exc.status_code or 502)
    return render(request, "web/medication_detail.html", {"medication": medication})
