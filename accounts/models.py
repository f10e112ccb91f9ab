from django.db import models, transaction
from django.db.models import Q
from django.contrib.auth.models import User


class Profile(models.Model):
    SUPERADMIN = 'SUPERADMIN'
    ADMIN = 'ADMIN'
    USER = 'USER'
    ROLE_CHOICES = [
        (SUPERADMIN, 'Super Admin'),
        (ADMIN, 'Admin'),
        (USER, 'Pesantren'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=USER)

    # Data pesantren (dipakai sebagai alamat kirim default)
    pesantren_name = models.CharField("Nama Pesantren", max_length=200, blank=True)
    phone = models.CharField("Telepon", max_length=20, blank=True)
    address = models.TextField("Alamat", blank=True)
    city = models.CharField("Kota", max_length=100, blank=True)
    province = models.CharField("Provinsi", max_length=100, blank=True)
    postal_code = models.CharField("Kode Pos", max_length=10, blank=True)

    def __str__(self):
        return f"{self.user.username} ({self.role})"


def user_to_dict(user):
    profile = getattr(user, 'profile', None)
    return {
        'id': user.id,
        'email': user.email,
        'name': user.get_full_name() or user.username,
        'role': profile.role if profile else (Profile.SUPERADMIN if user.is_superuser else Profile.USER),
        'pesantren_name': profile.pesantren_name if profile else '',
        'phone': profile.phone if profile else '',
        'city': profile.city if profile else '',
        'province': profile.province if profile else '',
        'created_at': user.date_joined,
    }


class Address(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='addresses')
    label = models.CharField("Label", max_length=50)
    recipient_name = models.CharField("Nama Penerima", max_length=200)
    pesantren_name = models.CharField("Nama Pesantren", max_length=200, blank=True)
    phone = models.CharField("Telepon", max_length=20)
    address = models.TextField("Alamat")
    city = models.CharField("Kota", max_length=100)
    province = models.CharField("Provinsi", max_length=100)
    postal_code = models.CharField("Kode Pos", max_length=10, blank=True)
    is_default = models.BooleanField("Alamat Utama", default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-is_default', '-created_at']
        verbose_name = "Alamat"
        verbose_name_plural = "Alamat"
        constraints = [
            models.UniqueConstraint(fields=['user'], condition=Q(is_default=True),
                                    name='one_default_address_per_user'),
        ]

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if self.is_default:
                # At most one default per user
                (Address.objects.filter(user_id=self.user_id, is_default=True)
                 .exclude(pk=self.pk).update(is_default=False))
            super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.label} - {self.recipient_name}"

    def as_shipping(self):
        """Shipping fields of an order placed to this address."""
        return {
            'shipping_name': self.recipient_name,
            'shipping_address': self.address,
            'shipping_phone': self.phone,
            'shipping_city': self.city,
            'shipping_province': self.province,
            'shipping_postal': self.postal_code,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'label': self.label,
            'recipient_name': self.recipient_name,
            'pesantren_name': self.pesantren_name,
            'phone': self.phone,
            'address': self.address,
            'city': self.city,
            'province': self.province,
            'postal_code': self.postal_code,
            'is_default': self.is_default,
            'created_at': self.created_at,
        }
