"""
Patient admin configuration.
"""

from django.contrib import admin

from .models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ["id", "user_id", "last_name", "first_name", "date_of_birth", "deleted_at"]
    list_filter = ["gender", "deleted_at"]
    search_fields = ["id", "user_id", "last_name", "first_name"]
    readonly_fields = ["national_id_digest", "created_at", "updated_at", "deleted_at", "deleted_by"]
    ordering = ["last_name", "first_name"]

    fieldsets = (
        (None, {
            "fields": ("id", "user_id", "national_id", "national_id_digest")
        }),
        ("Demographics", {
            "fields": ("first_name", "last_name", "date_of_birth", "gender"),
        }),
        ("Contact", {
            "fields": (
                "email", "phone", "address_line1", "address_line2", "postal_code", "city", "country",
                "emergency_contact_name", "emergency_contact_phone", "emergency_contact_relationship",
            ),
            "classes": ("collapse",),
        }),
        ("Medical Profile", {
            "fields": ("allergies", "chronic_conditions", "weight_kg", "height_cm", "blood_type"),
            "classes": ("collapse",),
        }),
        ("Consent", {
            "fields": ("preferred_language", "consent_data_sharing", "consent_marketing"),
        }),
        ("Audit", {
            "fields": ("created_by", "created_at", "updated_at", "deleted_at", "deleted_by"),
        }),
    )

    def get_queryset(self, request):
        return Patient.all_objects.all()
