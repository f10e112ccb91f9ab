from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.utils.dateparse import parse_datetime

from .models import Diklat, DiklatFormField


class DiklatForm(forms.ModelForm):
    class Meta:
        model = Diklat
        fields = ['title', 'description', 'location', 'method', 'registration_link', 'image', 'is_active']


def clean_dates(raw_dates):
    """Returns [(start, end)] from [{start_date, end_date}], ISO strings."""
    if not isinstance(raw_dates, list) or not raw_dates:
        raise ValidationError("Minimal satu jadwal harus diisi.")

    dates = []
    for raw in raw_dates:
        if not isinstance(raw, dict):
            raise ValidationError("Format jadwal tidak valid.")
        start = parse_datetime(str(raw.get('start_date') or ''))
        end = parse_datetime(str(raw.get('end_date') or ''))
        if start is None or end is None:
            raise ValidationError("Format tanggal tidak valid.")
        if end < start:
            raise ValidationError("Tanggal selesai harus setelah tanggal mulai.")
        dates.append((start, end))
    return dates


def clean_form_fields(raw_fields):
    """Returns unsaved DiklatFormField instances, ordered as given."""
    if not raw_fields:
        return []
    if not isinstance(raw_fields, list):
        raise ValidationError("Format isian tidak valid.")

    valid_types = {choice for choice, _ in DiklatFormField.FIELD_TYPE_CHOICES}
    fields = []
    for index, raw in enumerate(raw_fields):
        if not isinstance(raw, dict) or not raw.get('label'):
            raise ValidationError("Setiap isian harus punya label.")
        field_type = raw.get('field_type', DiklatFormField.TEXT)
        if field_type not in valid_types:
            raise ValidationError(f"Jenis isian tidak dikenal: {field_type}")
        options = raw.get('options') or []
        if field_type in DiklatFormField.CHOICE_TYPES and not options:
            raise ValidationError(f"Isian '{raw['label']}' butuh pilihan.")
        fields.append(DiklatFormField(
            label=raw['label'],
            field_type=field_type,
            options=list(options),
            is_required=bool(raw.get('is_required', False)),
            placeholder=raw.get('placeholder') or '',
            order=index,
        ))
    return fields


class DiklatRegistrationForm(forms.Form):
    name = forms.CharField(label="Nama Lengkap", max_length=200)
    email = forms.EmailField()
    phone = forms.CharField(label="WhatsApp/Telepon", max_length=20)

    def __init__(self, *args, diklat=None, form_data=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.diklat = diklat
        self.form_data = form_data if isinstance(form_data, dict) else {}

    def clean(self):
        cleaned_data = super().clean()
        if not self.diklat.is_active:
            raise ValidationError("Pendaftaran diklat ini sudah ditutup.")

        answers = {}
        for field in self.diklat.form_fields.all():
            value = self.form_data.get(field.label)
            if value in (None, '', []):
                if field.is_required:
                    self.add_error(None, f"'{field.label}' wajib diisi.")
                continue
            if field.field_type in DiklatFormField.CHOICE_TYPES and value not in field.options:
                self.add_error(None, f"Pilihan '{value}' tidak tersedia untuk '{field.label}'.")
                continue
            if field.field_type == DiklatFormField.EMAIL:
                try:
                    validate_email(value)
                except ValidationError:
                    self.add_error(None, f"'{field.label}' harus berupa email.")
                    continue
            answers[field.label] = value
        cleaned_data['form_data'] = answers
        return cleaned_data
