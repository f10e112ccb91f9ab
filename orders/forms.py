from django import forms
from .models import Order

SHIPPING_FIELDS = ['shipping_name', 'shipping_address', 'shipping_phone', 'shipping_city',
                   'shipping_province', 'shipping_postal']


class OrderCreateForm(forms.ModelForm):
    promo_code = forms.CharField(max_length=50, required=False)
    paid_amount = forms.DecimalField(max_digits=14, decimal_places=2, required=False)

    class Meta:
        model = Order
        fields = SHIPPING_FIELDS + ['payment_method']

    def shipping(self):
        return {field: self.cleaned_data[field] for field in SHIPPING_FIELDS}


class OrderUpdateForm(forms.ModelForm):
    class Meta:
        model = Order
        fields = ['status', 'shipping_method', 'expedition_name', 'tracking_number', 'shipped_at']
