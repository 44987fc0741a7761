"""
Web front end URL configuration.
"""

from django.urls import path

from . import views

app_name = "web"

urlpatterns = [
    path("", views.index, name="index"),
    path("login/", views.login_view, name="login"),
    path("logout/", views.logout_view, name="logout"),
    path("patient/dashboard/", views.patient_dashboard, name="patient-dashboard"),
    path(
        "patient/prescriptions/<int:prescription_id>/",
        views.patient_prescription_detail,
        name="patient-prescription",
    ),
    path(
        "patient/prescriptions/<int:prescription_id>/take/",
        views.patient_take,
        name="patient-take",
    ),
    path("prescriber/dashboard/", views.prescriber_dashboard, name="prescriber-dashboard"),
    path(
        "prescriber/prescriptions/new/",
        views.prescriber_new_prescription,
        name="prescriber-new-prescription",
    ),
    path(
        "prescriber/prescriptions/<int:prescription_id>/cancel/",
        views.prescriber_cancel,
        name="prescriber-cancel",
    ),
    path("pharmacist/dashboard/", views.pharmacist_dashboard, name="pharmacist-dashboard"),
    path("pharmacist/dispense/", views.pharmacist_dispense, name="pharmacist-dispense"),
    path(
        "pharmacist/medications/<int:medication_id>/",
        views.pharmacist_medication_detail,
        name="pharmacist-medication",
    ),
]
