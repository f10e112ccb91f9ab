from django import forms
from django.contrib.auth.models import User
from django.db import transaction

from .models import Address, Profile


class AddressForm(forms.ModelForm):
    class Meta:
        model = Address
        fields = ['label', 'recipient_name', 'pesantren_name', 'phone', 'address', 'city',
                  'province', 'postal_code', 'is_default']


class UserCreateForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField(min_length=8, strip=False)
    name = forms.CharField(max_length=150)
    role = forms.ChoiceField(choices=Profile.ROLE_CHOICES, required=False)
    pesantren_name = forms.CharField(max_length=200, required=False)
    phone = forms.CharField(max_length=20, required=False)
    address = forms.CharField(required=False)
    city = forms.CharField(max_length=100, required=False)
    province = forms.CharField(max_length=100, required=False)
    postal_code = forms.CharField(max_length=10, required=False)

    PROFILE_FIELDS = ['pesantren_name', 'phone', 'address', 'city', 'province', 'postal_code']

    def clean_email(self):
        email = self.cleaned_data['email'].strip().lower()
        if User.objects.filter(email__iexact=email).exists() or User.objects.filter(username=email).exists():
            raise forms.ValidationError("Email sudah terdaftar.")
        return email

    def save(self):
        data = self.cleaned_data
        with transaction.atomic():
            user = User.objects.create_user(
                username=data['email'],
                email=data['email'],
                password=data['password'],
                first_name=data['name'],
            )
            Profile.objects.create(
                user=user,
                role=data.get('role') or Profile.USER,
                **{field: data.get(field) or '' for field in self.PROFILE_FIELDS},
            )
        return user
