from django.contrib import admin
from .models import Promo
from .forms import PromoForm


@admin.register(Promo)
class PromoAdmin(admin.ModelAdmin):
    form = PromoForm
    list_display = ['code', 'discount_type', 'discount_value', 'used_count', 'max_usage',
                    'is_active', 'valid_from', 'valid_until']
    list_filter = ['is_active', 'discount_type', 'valid_from', 'valid_until']
    search_fields = ['code']
    list_editable = ['is_active']
    readonly_fields = ['used_count']
    ordering = ['-created_at']
