from django.contrib import admin
from .models import Debt, DebtPayment


class DebtPaymentInline(admin.TabularInline):
    model = DebtPayment
    extra = 0
    can_delete = False
    readonly_fields = ['amount', 'payment_proof', 'notes', 'created_at']
    fields = readonly_fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Debt)
class DebtAdmin(admin.ModelAdmin):
    list_display = ['user', 'order', 'total_debt', 'paid_amount', 'remaining_debt', 'created_at']
    list_filter = ['created_at']
    search_fields = ['user__username', 'user__email', 'user__profile__pesantren_name']
    readonly_fields = ['total_debt', 'paid_amount', 'remaining_debt']
    raw_id_fields = ['user', 'order']
    inlines = [DebtPaymentInline]


@admin.register(DebtPayment)
class DebtPaymentAdmin(admin.ModelAdmin):
    list_display = ['debt', 'user', 'amount', 'created_at']
    list_filter = ['created_at']
    search_fields = ['user__username', 'notes']

    # Payments go through the ledger; the admin only reads them
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
