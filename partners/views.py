import logging

from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from accounts.auth import superadmin_required
from core.http import PayloadError, read_payload, error_response, form_error_response
from .forms import PartnerForm
from .models import Partner

logger = logging.getLogger(__name__)


@require_http_methods(['GET', 'POST'])
def partner_collection(request):
    if request.method == 'POST':
        return create_partner(request)
    partners = Partner.objects.filter(is_active=True)
    return JsonResponse([partner.to_dict() for partner in partners], safe=False)


@superadmin_required
def create_partner(request):
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    data.setdefault('is_active', True)
    form = PartnerForm(data=data, files=request.FILES)
    if not form.is_valid():
        return form_error_response(form)

    partner = form.save()
    logger.info("Partner %s added: %s", partner.id, partner.pesantren_name)
    return JsonResponse(partner.to_dict(), status=201)


@require_http_methods(['GET', 'PUT', 'DELETE'])
def partner_detail(request, partner_id):
    if request.method == 'PUT':
        return update_partner(request, partner_id)
    if request.method == 'DELETE':
        return delete_partner(request, partner_id)
    partner = get_object_or_404(Partner, pk=partner_id, is_active=True)
    return JsonResponse(partner.to_dict())


@superadmin_required
def update_partner(request, partner_id):
    partner = get_object_or_404(Partner, pk=partner_id)
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    form = PartnerForm(data={**model_to_dict(partner, fields=PartnerForm.Meta.fields), **data},
                       instance=partner)
    if not form.is_valid():
        return form_error_response(form)
    partner = form.save()
    return JsonResponse(partner.to_dict())


@superadmin_required
def delete_partner(request, partner_id):
    partner = get_object_or_404(Partner, pk=partner_id)
    partner.delete()
    logger.info("Partner %s deleted", partner_id)
    return JsonResponse({'success': True})
