import logging

from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from accounts.auth import superadmin_required
from core.http import PayloadError, read_payload, error_response, form_error_response
from .forms import AgendaForm
from .models import Agenda

logger = logging.getLogger(__name__)


@require_http_methods(['GET', 'POST'])
def agenda_collection(request):
    if request.method == 'POST':
        return create_agenda(request)
    agendas = Agenda.objects.filter(is_active=True)
    if request.GET.get('upcoming') == 'true':
        agendas = agendas.filter(event_date__gte=timezone.now())
    return JsonResponse([agenda.to_dict() for agenda in agendas], safe=False)


@superadmin_required
def create_agenda(request):
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    data.setdefault('is_active', True)
    form = AgendaForm(data=data, files=request.FILES)
    if not form.is_valid():
        return form_error_response(form)

    agenda = form.save()
    logger.info("Agenda %s added: %s", agenda.id, agenda.title)
    return JsonResponse(agenda.to_dict(), status=201)


@require_http_methods(['GET', 'PUT', 'DELETE'])
def agenda_detail(request, agenda_id):
    if request.method == 'PUT':
        return update_agenda(request, agenda_id)
    if request.method == 'DELETE':
        return delete_agenda(request, agenda_id)
    agenda = get_object_or_404(Agenda, pk=agenda_id)
    return JsonResponse(agenda.to_dict())


@superadmin_required
def update_agenda(request, agenda_id):
    agenda = get_object_or_404(Agenda, pk=agenda_id)
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    form = AgendaForm(data={**model_to_dict(agenda, fields=AgendaForm.Meta.fields), **data},
                      files=request.FILES, instance=agenda)
    if not form.is_valid():
        return form_error_response(form)
    agenda = form.save()
    return JsonResponse(agenda.to_dict())


@superadmin_required
def delete_agenda(request, agenda_id):
    agenda = get_object_or_404(Agenda, pk=agenda_id)
    agenda.delete()
    logger.info("Agenda %s deleted", agenda_id)
    return JsonResponse({'success': True})
