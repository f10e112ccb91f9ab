from django.db import models


class Agenda(models.Model):
    title = models.CharField("Judul", max_length=200)
    description = models.TextField(blank=True)
    event_type = models.CharField("Jenis Acara", max_length=100, blank=True)
    pesantren_name = models.CharField("Nama Pesantren", max_length=200, blank=True)
    location = models.CharField("Lokasi", max_length=255, blank=True)
    event_date = models.DateTimeField("Tanggal Acara")
    image = models.ImageField(upload_to='agenda/', blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['event_date']
        verbose_name = "Agenda"
        verbose_name_plural = "Agenda"

    def __str__(self):
        return f"{self.title} ({self.event_date:%d/%m/%Y})"

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'event_type': self.event_type,
            'pesantren_name': self.pesantren_name,
            'location': self.location,
            'event_date': self.event_date,
            'image': self.image.url if self.image else None,
            'is_active': self.is_active,
        }
