"""
Prescription admin configuration.
"""

from django.contrib import admin

from .models import Dispensation, Prescription


class DispensationInline(admin.TabularInline):
    model = Dispensation
    extra = 0
    can_delete = False
    readonly_fields = ["pharmacist_user_id", "quantity", "notes", "dispensed_at"]

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = [
        "prescription_number",
        "patient",
        "medication",
        "prescriber",
        "status",
        "quantity_dispensed",
        "quantity_prescribed",
        "prescribed_date",
    ]
    list_filter = ["status", "is_controlled_substance", "prescribed_date"]
    search_fields = ["prescription_number", "patient__id", "prescriber__user_id", "medication__trade_name"]
    # Lifecycle fields only change through the service
    readonly_fields = [
        "prescription_number",
        "status",
        "quantity_dispensed",
        "refills_remaining",
        "created_by",
        "created_at",
        "updated_at",
        "cancelled_at",
        "cancelled_by",
        "cancellation_reason",
    ]
    ordering = ["-prescribed_date"]
    inlines = [DispensationInline]

    fieldsets = (
        (None, {
            "fields": ("prescription_number", "status", "patient", "medication", "prescriber")
        }),
        ("Dosing", {
            "fields": (
                "dose", "dose_unit", "frequency", "frequency_description", "route",
                "max_daily_dose", "max_daily_dose_unit",
            ),
        }),
        ("Clinical", {
            "fields": ("indication", "instructions", "clinical_notes"),
            "classes": ("collapse",),
        }),
        ("Dates & Refills", {
            "fields": (
                "prescribed_date", "start_date", "end_date",
                "refills_allowed", "refills_remaining", "last_refill_date", "next_refill_eligible_date",
            ),
        }),
        ("Quantity", {
            "fields": ("quantity_prescribed", "quantity_dispensed", "quantity_unit", "days_supply"),
        }),
        ("Flags", {
            "fields": (
                "is_prn", "is_substitution_allowed", "is_controlled_substance",
                "requires_prior_authorization", "prior_authorization_number",
            ),
            "classes": ("collapse",),
        }),
        ("Audit", {
            "fields": (
                "created_by", "created_at", "updated_at",
                "cancelled_at", "cancelled_by", "cancellation_reason",
            ),
        }),
    )
