import uuid

from django.db import models
from django.contrib.auth.models import User

from products.models import Product, Package


class Order(models.Model):
    LUNAS = 'LUNAS'
    SEBAGIAN = 'SEBAGIAN'
    UTANG = 'UTANG'
    PAYMENT_METHOD_CHOICES = [
        (LUNAS, 'Lunas'),
        (SEBAGIAN, 'Bayar Sebagian'),
        (UTANG, 'Utang'),
    ]

    PENDING_PAYMENT = 'PENDING_PAYMENT'
    PROCESSING = 'PROCESSING'
    SHIPPED = 'SHIPPED'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (PENDING_PAYMENT, 'Menunggu Verifikasi'),
        (PROCESSING, 'Diproses'),
        (SHIPPED, 'Dikirim'),
        (COMPLETED, 'Selesai'),
        (CANCELLED, 'Dibatalkan'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=40, unique=True)
    user = models.ForeignKey(User, on_delete=models.PROTECT, related_name='orders')

    # Alamat pengiriman
    shipping_name = models.CharField(max_length=200)
    shipping_address = models.TextField()
    shipping_phone = models.CharField(max_length=20)
    shipping_city = models.CharField(max_length=100)
    shipping_province = models.CharField(max_length=100)
    shipping_postal = models.CharField(max_length=10, blank=True)

    # Pembayaran
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES)
    payment_proof = models.FileField(upload_to='payment_proofs/', blank=True, null=True)
    subtotal = models.DecimalField(max_digits=14, decimal_places=2)
    discount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=14, decimal_places=2)
    paid_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    remaining_debt = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    promo = models.ForeignKey('promos.Promo', on_delete=models.SET_NULL, null=True, blank=True,
                              related_name='orders')

    # Pengiriman
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING_PAYMENT)
    shipping_method = models.CharField(max_length=50, blank=True)
    expedition_name = models.CharField(max_length=100, blank=True)
    tracking_number = models.CharField(max_length=100, blank=True)
    shipped_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Pesanan"
        verbose_name_plural = "Pesanan"

    def __str__(self):
        return self.order_number

    def get_items_cost(self):
        return sum((item.get_cost() for item in self.items.all()), 0)

    def to_dict(self):
        return {
            'id': str(self.id),
            'order_number': self.order_number,
            'user_id': self.user_id,
            'shipping_name': self.shipping_name,
            'shipping_address': self.shipping_address,
            'shipping_phone': self.shipping_phone,
            'shipping_city': self.shipping_city,
            'shipping_province': self.shipping_province,
            'shipping_postal': self.shipping_postal,
            'payment_method': self.payment_method,
            'payment_proof': self.payment_proof.name if self.payment_proof else None,
            'subtotal': self.subtotal,
            'discount': self.discount,
            'total': self.total,
            'paid_amount': self.paid_amount,
            'remaining_debt': self.remaining_debt,
            'promo_code': self.promo.code if self.promo_id else None,
            'status': self.status,
            'shipping_method': self.shipping_method,
            'expedition_name': self.expedition_name,
            'tracking_number': self.tracking_number,
            'shipped_at': self.shipped_at,
            'created_at': self.created_at,
            'items': [item.to_dict() for item in self.items.all()],
        }


class OrderItem(models.Model):
    order = models.ForeignKey(Order, related_name='items', on_delete=models.CASCADE)
    product = models.ForeignKey(Product, related_name='order_items', on_delete=models.SET_NULL,
                                null=True, blank=True)
    package = models.ForeignKey(Package, related_name='order_items', on_delete=models.SET_NULL,
                                null=True, blank=True)
    name = models.CharField(max_length=255)  # Nama saat dipesan
    price = models.DecimalField(max_digits=14, decimal_places=2)  # Harga saat dipesan
    quantity = models.PositiveIntegerField(default=1)

    def __str__(self):
        return f"{self.quantity}x {self.name}"

    def get_cost(self):
        return self.price * self.quantity

    def to_dict(self):
        return {
            'product_id': self.product_id,
            'package_id': self.package_id,
            'name': self.name,
            'price': self.price,
            'quantity': self.quantity,
        }
