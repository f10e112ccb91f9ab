from django.contrib import admin
from .models import Address, Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'role', 'pesantren_name', 'city', 'province']
    list_filter = ['role', 'province']
    search_fields = ['user__username', 'user__email', 'pesantren_name']
    raw_id_fields = ['user']


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ['label', 'user', 'recipient_name', 'city', 'province', 'is_default']
    list_filter = ['is_default', 'province']
    search_fields = ['user__username', 'recipient_name', 'pesantren_name', 'city']
    raw_id_fields = ['user']
