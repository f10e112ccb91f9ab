import uuid

from django.db import models
from django.core.validators import MinValueValidator

from .evaluator import PERCENTAGE, FIXED, PromoTerms


class Promo(models.Model):
    DISCOUNT_TYPE_CHOICES = [
        (PERCENTAGE, 'Persentase (%)'),
        (FIXED, 'Nominal (Rp)'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=50, unique=True, verbose_name="Kode")
    discount_type = models.CharField(max_length=20, choices=DISCOUNT_TYPE_CHOICES, default=PERCENTAGE,
                                     verbose_name="Jenis Diskon")
    discount_value = models.DecimalField(max_digits=14, decimal_places=2,
                                         validators=[MinValueValidator(0)],
                                         verbose_name="Nilai Diskon")
    max_usage = models.PositiveIntegerField(null=True, blank=True, verbose_name="Batas Pemakaian")
    used_count = models.PositiveIntegerField(default=0, verbose_name="Sudah Dipakai")
    is_active = models.BooleanField(default=True, verbose_name="Aktif")
    valid_from = models.DateTimeField(null=True, blank=True, verbose_name="Berlaku Dari")
    valid_until = models.DateTimeField(null=True, blank=True, verbose_name="Berlaku Sampai")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def save(self, *args, **kwargs):
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.code

    def to_terms(self):
        return PromoTerms(
            id=str(self.id),
            code=self.code,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            max_usage=self.max_usage,
            used_count=self.used_count,
            is_active=self.is_active,
            valid_from=self.valid_from,
            valid_until=self.valid_until,
        )

    def to_dict(self):
        return {
            'id': str(self.id),
            'code': self.code,
            'discount_type': self.discount_type,
            'discount_value': str(self.discount_value),
            'max_usage': self.max_usage,
            'used_count': self.used_count,
            'is_active': self.is_active,
            'valid_from': self.valid_from.isoformat() if self.valid_from else None,
            'valid_until': self.valid_until.isoformat() if self.valid_until else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


def find_promo_by_code(code):
    """Lookup used by the evaluator. Database errors propagate to the caller."""
    promo = Promo.objects.filter(code=code).first()
    return promo.to_terms() if promo else None
