from django.contrib import admin
from .models import Partner


@admin.register(Partner)
class PartnerAdmin(admin.ModelAdmin):
    list_display = ('pesantren_name', 'city', 'province', 'joined_date_formatted', 'is_active')
    search_fields = ('pesantren_name', 'city')
    list_filter = ('is_active', 'province')
    list_editable = ('is_active',)
    ordering = ('-joined_date',)

    def joined_date_formatted(self, obj):
        return obj.joined_date.strftime('%d/%m/%Y')

    joined_date_formatted.short_description = 'Bergabung Sejak'
