from django.contrib import admin
from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    raw_id_fields = ['product', 'package']
    readonly_fields = ['name', 'price', 'quantity']
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'user', 'shipping_city', 'total', 'payment_method',
                    'remaining_debt', 'status', 'created_at']
    list_filter = ['status', 'payment_method', 'created_at', 'shipping_province']
    search_fields = ['order_number', 'user__username', 'shipping_name', 'tracking_number']
    list_editable = ['status']
    readonly_fields = ['order_number', 'subtotal', 'discount', 'total', 'paid_amount',
                       'remaining_debt', 'promo', 'created_at']
    inlines = [OrderItemInline]

    fieldsets = (
        ('Pemesan', {
            'fields': ('order_number', 'user', 'created_at')
        }),
        ('Alamat Pengiriman', {
            'fields': ('shipping_name', 'shipping_address', 'shipping_phone', 'shipping_city',
                       'shipping_province', 'shipping_postal')
        }),
        ('Pembayaran', {
            'fields': ('payment_method', 'payment_proof', 'subtotal', 'promo', 'discount', 'total',
                       'paid_amount', 'remaining_debt')
        }),
        ('Pengiriman', {
            'fields': ('status', 'shipping_method', 'expedition_name', 'tracking_number', 'shipped_at'),
        }),
    )
