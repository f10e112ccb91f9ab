from django.contrib import admin
from .models import Diklat, DiklatDate, DiklatFormField, DiklatRegistration


class DiklatDateInline(admin.TabularInline):
    model = DiklatDate
    extra = 1


class DiklatFormFieldInline(admin.StackedInline):
    model = DiklatFormField
    extra = 0


@admin.register(Diklat)
class DiklatAdmin(admin.ModelAdmin):
    inlines = [DiklatDateInline, DiklatFormFieldInline]
    list_display = ['title', 'location', 'method', 'is_active', 'created_at']
    list_filter = ['method', 'is_active']
    search_fields = ['title', 'location']


@admin.register(DiklatRegistration)
class DiklatRegistrationAdmin(admin.ModelAdmin):
    list_display = ['name', 'diklat', 'email', 'phone', 'status', 'created_at']
    list_filter = ['status', 'diklat']
    search_fields = ['name', 'email', 'phone']
    list_editable = ['status']
    readonly_fields = ['form_data', 'created_at']
