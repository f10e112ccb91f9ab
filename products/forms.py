from django import forms
from .models import Product, Package


class ProductForm(forms.ModelForm):
    class Meta:
        model = Product
        fields = ['category', 'name', 'description', 'price', 'stock', 'min_stock',
                  'image', 'is_active', 'is_bestseller']


class PackageForm(forms.ModelForm):
    class Meta:
        model = Package
        fields = ['name', 'description', 'price', 'image', 'is_active']
