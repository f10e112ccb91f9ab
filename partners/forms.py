from django import forms
from .models import Partner


class PartnerForm(forms.ModelForm):
    class Meta:
        model = Partner
        fields = ['pesantren_name', 'city', 'province', 'logo', 'description', 'joined_date', 'is_active']
