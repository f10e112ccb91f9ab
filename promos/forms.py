from django import forms

from .models import Promo
from .evaluator import PERCENTAGE


class PromoForm(forms.ModelForm):
    class Meta:
        model = Promo
        fields = ['code', 'discount_type', 'discount_value', 'max_usage',
                  'is_active', 'valid_from', 'valid_until']

    def clean_code(self):
        return self.cleaned_data['code'].strip().upper()

    def clean(self):
        cleaned_data = super().clean()
        discount_type = cleaned_data.get('discount_type')
        discount_value = cleaned_data.get('discount_value')
        if discount_type == PERCENTAGE and discount_value is not None and discount_value > 100:
            self.add_error('discount_value', "Diskon persentase maksimal 100.")

        valid_from = cleaned_data.get('valid_from')
        valid_until = cleaned_data.get('valid_until')
        if valid_from and valid_until and valid_until < valid_from:
            self.add_error('valid_until', "Tanggal berakhir harus setelah tanggal mulai.")
        return cleaned_data
