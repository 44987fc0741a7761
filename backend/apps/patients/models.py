"""
Patient models.
"""

from django.db import models
from django.utils import timezone

from apps.core.fields import EncryptedCharField, keyed_digest


class ActivePatientManager(models.Manager):
    """Hides soft-deleted patients."""

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)


class Patient(models.Model):
    """
    Patient.

    Identified by a string id (e.g. ``patient-001``) that the identity
    provider also puts on the patient's token. The national id is stored
    encrypted; ``national_id_digest`` is a keyed hash used for the
    uniqueness check and for lookups.
    """

    GENDER_CHOICES = [
        ("MALE", "Male"),
        ("FEMALE", "Female"),
        ("OTHER", "Other"),
    ]

    id = models.CharField(primary_key=True, max_length=64)

    user_id = models.CharField(
        max_length=100,
        unique=True,
        blank=True,
        null=True,
        help_text="External identity provider user id",
    )

    national_id = EncryptedCharField(help_text="Personal identity number (encrypted at rest)")
    national_id_digest = models.CharField(max_length=64, unique=True, editable=False)

    # Demographics
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, null=True)

    # Contact
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=30, blank=True, null=True)
    address_line1 = models.CharField(max_length=255, blank=True, null=True)
    address_line2 = models.CharField(max_length=255, blank=True, null=True)
    postal_code = models.CharField(max_length=10, blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    country = models.CharField(max_length=50, default="Sweden")

    emergency_contact_name = models.CharField(max_length=200, blank=True, null=True)
    emergency_contact_phone = models.CharField(max_length=20, blank=True, null=True)
    emergency_contact_relationship = models.CharField(max_length=50, blank=True, null=True)

    # Medical profile
    allergies = models.TextField(blank=True, null=True)
    chronic_conditions = models.TextField(blank=True, null=True)
    weight_kg = models.DecimalField(max_digits=5, decimal_places=2, blank=True, null=True)
    height_cm = models.PositiveSmallIntegerField(blank=True, null=True)
    blood_type = models.CharField(max_length=5, blank=True, null=True)

    # Preferences & consent
    preferred_language = models.CharField(max_length=10, default="sv")
    consent_data_sharing = models.BooleanField(default=False)
    consent_marketing = models.BooleanField(default=False)

    # Audit
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.CharField(max_length=100, blank=True, null=True)

    # Soft delete (GDPR erasure requests are handled separately)
    deleted_at = models.DateTimeField(blank=True, null=True)
    deleted_by = models.CharField(max_length=100, blank=True, null=True)

    objects = ActivePatientManager()
    all_objects = models.Manager()

    class Meta:
        db_table = "patients"
        ordering = ["last_name", "first_name"]
        base_manager_name = "all_objects"
        indexes = [
            models.Index(fields=["user_id"]),
            models.Index(fields=["last_name", "first_name"]),
        ]

    def __str__(self):
        return f"Patient {self.id}"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def save(self, *args, **kwargs):
        if self.national_id:
            self.national_id_digest = keyed_digest(self.national_id)
        super().save(*args, **kwargs)

    def soft_delete(self, deleted_by=None):
        self.deleted_at = timezone.now()
        self.deleted_by = deleted_by
        self.save(update_fields=["deleted_at", "deleted_by", "updated_at"])

    @classmethod
    def find_by_national_id(cls, national_id):
        return cls.objects.filter(national_id_digest=keyed_digest(national_id)).first()
