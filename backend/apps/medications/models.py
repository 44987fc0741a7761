"""
Medication catalog.
"""

from django.db import models

from apps.core.validators import validate_atc_code


class Medication(models.Model):
    """
    A product from the national product register (NPL).

    Reference data: loaded by import or the admin, read by everything else.
    """

    npl_id = models.CharField(max_length=50, unique=True, help_text="National product register id")
    trade_name = models.CharField(max_length=200)
    generic_name = models.CharField(max_length=200)
    form = models.CharField(max_length=100, blank=True, null=True, help_text="e.g. tablet, oral solution")
    strength = models.CharField(max_length=100, blank=True, null=True, help_text="e.g. 500 mg")
    route = models.CharField(max_length=50, blank=True, null=True)
    atc_code = models.CharField(max_length=10, blank=True, null=True, validators=[validate_atc_code])
    manufacturer = models.CharField(max_length=200, blank=True, null=True)
    is_available = models.BooleanField(default=True)
    requires_prescription = models.BooleanField(default=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    description = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "medications"
        ordering = ["trade_name"]
        indexes = [
            models.Index(fields=["trade_name"]),
            models.Index(fields=["generic_name"]),
            models.Index(fields=["atc_code"]),
        ]

    def __str__(self):
        return f"{self.trade_name} {self.strength or ''}".strip()
