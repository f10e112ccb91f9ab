from django.db import models


class Partner(models.Model):
    pesantren_name = models.CharField("Nama Pesantren", max_length=200)
    city = models.CharField("Kota", max_length=100)
    province = models.CharField("Provinsi", max_length=100)
    logo = models.ImageField(upload_to='partners/', blank=True, null=True)
    description = models.TextField(blank=True)
    joined_date = models.DateField("Bergabung Sejak")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-joined_date']
        verbose_name = "Mitra Pesantren"
        verbose_name_plural = "Mitra Pesantren"

    def __str__(self):
        return f"{self.pesantren_name} ({self.city})"

    def to_dict(self):
        return {
            'id': self.id,
            'pesantren_name': self.pesantren_name,
            'city': self.city,
            'province': self.province,
            'logo': self.logo.url if self.logo else None,
            'description': self.description,
            'joined_date': self.joined_date,
            'is_active': self.is_active,
        }
