from django.db import models
from django.contrib.auth.models import User


class Diklat(models.Model):
    ONLINE = 'ONLINE'
    OFFLINE = 'OFFLINE'
    HYBRID = 'HYBRID'
    METHOD_CHOICES = [
        (ONLINE, 'Online'),
        (OFFLINE, 'Offline'),
        (HYBRID, 'Hybrid'),
    ]

    title = models.CharField("Judul", max_length=200)
    description = models.TextField("Deskripsi", blank=True)
    location = models.CharField("Lokasi", max_length=255, blank=True)
    method = models.CharField("Metode", max_length=10, choices=METHOD_CHOICES, default=OFFLINE)
    registration_link = models.URLField("Link Pendaftaran", blank=True)
    image = models.ImageField("Poster", upload_to='diklat/', blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Diklat"
        verbose_name_plural = "Diklat"

    def __str__(self):
        return self.title

    def to_dict(self, include_fields=True):
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'location': self.location,
            'method': self.method,
            'registration_link': self.registration_link,
            'image': self.image.url if self.image else None,
            'is_active': self.is_active,
            'dates': [
                {'start_date': date.start_date, 'end_date': date.end_date}
                for date in self.dates.all()
            ],
            'created_at': self.created_at,
        }
        if include_fields:
            data['form_fields'] = [field.to_dict() for field in self.form_fields.all()]
        return data


class DiklatDate(models.Model):
    diklat = models.ForeignKey(Diklat, related_name='dates', on_delete=models.CASCADE)
    start_date = models.DateTimeField("Mulai")
    end_date = models.DateTimeField("Selesai")

    class Meta:
        ordering = ['start_date']
        verbose_name = "Jadwal"
        verbose_name_plural = "Jadwal"

    def __str__(self):
        return f"{self.diklat.title} - {self.start_date:%d/%m/%Y}"


class DiklatFormField(models.Model):
    TEXT = 'text'
    TEXTAREA = 'textarea'
    SELECT = 'select'
    RADIO = 'radio'
    CHECKBOX = 'checkbox'
    EMAIL = 'email'
    PHONE = 'phone'
    NUMBER = 'number'
    FIELD_TYPE_CHOICES = [
        (TEXT, 'Teks'),
        (TEXTAREA, 'Paragraf'),
        (SELECT, 'Pilihan (dropdown)'),
        (RADIO, 'Pilihan (radio)'),
        (CHECKBOX, 'Centang'),
        (EMAIL, 'Email'),
        (PHONE, 'Telepon'),
        (NUMBER, 'Angka'),
    ]
    CHOICE_TYPES = (SELECT, RADIO)

    diklat = models.ForeignKey(Diklat, related_name='form_fields', on_delete=models.CASCADE)
    label = models.CharField(max_length=200)
    field_type = models.CharField(max_length=10, choices=FIELD_TYPE_CHOICES, default=TEXT)
    options = models.JSONField(default=list, blank=True)
    is_required = models.BooleanField(default=False)
    placeholder = models.CharField(max_length=200, blank=True)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['order']

    def __str__(self):
        return self.label

    def to_dict(self):
        return {
            'id': self.id,
            'label': self.label,
            'field_type': self.field_type,
            'options': self.options,
            'is_required': self.is_required,
            'placeholder': self.placeholder,
            'order': self.order,
        }


class DiklatRegistration(models.Model):
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (PENDING, 'Menunggu'),
        (CONFIRMED, 'Terkonfirmasi'),
        (CANCELLED, 'Dibatalkan'),
    ]

    diklat = models.ForeignKey(Diklat, related_name='registrations', on_delete=models.CASCADE)
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True,
                             related_name='diklat_registrations')
    name = models.CharField("Nama", max_length=200)
    email = models.EmailField()
    phone = models.CharField("Telepon", max_length=20)
    form_data = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Pendaftaran Diklat"
        verbose_name_plural = "Pendaftaran Diklat"

    def __str__(self):
        return f"{self.name} - {self.diklat.title}"

    def to_dict(self):
        return {
            'id': self.id,
            'diklat_id': self.diklat_id,
            'diklat_title': self.diklat.title,
            'user_id': self.user_id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'form_data': self.form_data,
            'status': self.status,
            'created_at': self.created_at,
        }
