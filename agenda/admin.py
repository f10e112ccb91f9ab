from django.contrib import admin
from .models import Agenda


@admin.register(Agenda)
class AgendaAdmin(admin.ModelAdmin):
    list_display = ('title', 'event_type', 'pesantren_name', 'event_date', 'is_active')
    search_fields = ('title', 'pesantren_name', 'location')
    list_filter = ('is_active', 'event_type')
    list_editable = ('is_active',)
    ordering = ('event_date',)
