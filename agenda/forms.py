from django import forms
from .models import Agenda


class AgendaForm(forms.ModelForm):
    class Meta:
        model = Agenda
        fields = ['title', 'description', 'event_type', 'pesantren_name', 'location', 'event_date',
                  'image', 'is_active']
