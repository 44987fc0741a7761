"""
Adherence admin configuration. Records are read-only here.
"""

from django.contrib import admin

from .models import AdherenceRecord


@admin.register(AdherenceRecord)
class AdherenceRecordAdmin(admin.ModelAdmin):
    list_display = ["id", "prescription", "patient", "status", "scheduled_time", "source"]
    list_filter = ["status", "source"]
    search_fields = ["prescription__prescription_number", "patient__id"]
    ordering = ["-scheduled_time"]

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
