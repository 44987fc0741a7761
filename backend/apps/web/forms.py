"""
Web forms.
"""

from decimal import Decimal

from django import forms

from apps.core.identity import Role


class LoginForm(forms.Form):
    role = forms.ChoiceField(choices=[(role.value, role.value.title()) for role in Role])
    user_id = forms.CharField(max_length=100, label="User id")

    def clean_user_id(self):
        value = self.cleaned_data["user_id"].strip()
        if not value:
            raise forms.ValidationError("User id is required")
        return value


class PrescriptionForm(forms.Form):
    patient_id = forms.CharField(max_length=64)
    medication_id = forms.TypedChoiceField(coerce=int, choices=())
    dose = forms.DecimalField(max_digits=10, decimal_places=3, min_value=Decimal("0.001"))
    dose_unit = forms.CharField(max_length=20, initial="mg")
    frequency = forms.CharField(max_length=50, initial="ONCE_DAILY")
    frequency_description = forms.CharField(max_length=200, required=False)
    route = forms.CharField(max_length=50, initial="ORAL")
    indication = forms.CharField(max_length=500, required=False)
    instructions = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}), required=False)
    start_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}))
    end_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}), required=False)
    quantity_prescribed = forms.IntegerField(min_value=1)
    quantity_unit = forms.CharField(max_length=20, required=False)
    days_supply = forms.IntegerField(min_value=1, required=False)
    refills_allowed = forms.IntegerField(min_value=0, initial=0, required=False)
    is_prn = forms.BooleanField(required=False, label="As needed (PRN)")
    is_substitution_allowed = forms.BooleanField(required=False, initial=True, label="Substitution allowed")

    def __init__(self, *args, medications=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["medication_id"].choices = [
            (m["id"], f"{m['trade_name']} {m.get('strength') or ''}".strip()) for m in medications
        ]

    def to_payload(self):
        """cleaned_data as the JSON body the API expects."""
        data = self.cleaned_data
        payload = {}
        for name, value in data.items():
            if value in (None, "") and name not in ("is_prn", "is_substitution_allowed"):
                continue
            if hasattr(value, "isoformat"):
                value = value.isoformat()
            elif name == "dose":
                value = str(value)
            payload[name] = value
        return payload

    def add_api_errors(self, field_errors):
        for name, message in (field_errors or {}).items():
            self.add_error(name if name in self.fields else None, message)


class AdherenceForm(forms.Form):
    status = forms.ChoiceField(
        choices=[("TAKEN", "Taken"), ("MISSED", "Missed"), ("SKIPPED", "Skipped")],
        initial="TAKEN",
    )
    notes = forms.CharField(widget=forms.Textarea(attrs={"rows": 2}), required=False)
    side_effects_reported = forms.CharField(widget=forms.Textarea(attrs={"rows": 2}), required=False)


class DispenseForm(forms.Form):
    prescription_id = forms.IntegerField(min_value=1)
    quantity_to_dispense = forms.IntegerField(min_value=1)
    notes = forms.CharField(widget=forms.Textarea(attrs={"rows": 2}), required=False)


class CancelForm(forms.Form):
    reason = forms.CharField(max_length=500, required=False)
