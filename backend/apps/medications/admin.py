"""
Medication admin configuration.
"""

from django.contrib import admin

from .models import Medication


@admin.register(Medication)
class MedicationAdmin(admin.ModelAdmin):
    list_display = ["npl_id", "trade_name", "generic_name", "strength", "form", "atc_code", "is_available"]
    list_filter = ["is_available", "requires_prescription", "form"]
    search_fields = ["npl_id", "trade_name", "generic_name", "atc_code"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["trade_name"]
