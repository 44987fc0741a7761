"""
Prescriber and pharmacist models.
"""

from django.db import models


class Prescriber(models.Model):
    """
    A clinician allowed to issue prescriptions.

    ``user_id`` is the id the identity provider sends in ``X-Prescriber-Id``
    and is what prescriptions record as their creator.
    """

    user_id = models.CharField(max_length=100, unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    license_number = models.CharField(max_length=50, unique=True)
    specialty = models.CharField(max_length=100, blank=True, null=True)
    workplace = models.CharField(max_length=200, blank=True, null=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "prescribers"
        ordering = ["last_name", "first_name"]

    def __str__(self):
        return f"Prescriber {self.user_id}"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"


class Pharmacist(models.Model):
    """A pharmacist allowed to dispense. Identified by ``X-Pharmacist-Id``."""

    user_id = models.CharField(max_length=100, unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    license_number = models.CharField(max_length=50, unique=True)
    pharmacy_name = models.CharField(max_length=200, blank=True, null=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "pharmacists"
        ordering = ["last_name", "first_name"]

    def __str__(self):
        return f"Pharmacist {self.user_id}"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"
