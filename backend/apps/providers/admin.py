"""
Prescriber and pharmacist admin configuration.
"""

from django.contrib import admin

from .models import Pharmacist, Prescriber


@admin.register(Prescriber)
class PrescriberAdmin(admin.ModelAdmin):
    list_display = ["user_id", "last_name", "first_name", "license_number", "specialty", "is_active"]
    list_filter = ["is_active", "specialty"]
    search_fields = ["user_id", "last_name", "license_number"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(Pharmacist)
class PharmacistAdmin(admin.ModelAdmin):
    list_display = ["user_id", "last_name", "first_name", "license_number", "pharmacy_name", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["user_id", "last_name", "license_number", "pharmacy_name"]
    readonly_fields = ["created_at", "updated_at"]
