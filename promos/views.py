import logging
from decimal import Decimal, InvalidOperation

from django.db import DatabaseError
from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.views.decorators.http import require_POST, require_http_methods

from accounts.auth import superadmin_required
from core.http import PayloadError, read_payload, error_response, form_error_response
from .evaluator import evaluate
from .forms import PromoForm
from .models import Promo, find_promo_by_code

logger = logging.getLogger(__name__)

MSG_INVALID_SUBTOTAL = 'invalid subtotal'
MSG_VALIDATION_FAILED = 'promo validation failed'


def parse_subtotal(value):
    if value is None or value == '':
        return Decimal('0')
    try:
        subtotal = Decimal(str(value))
    except InvalidOperation:
        return None
    if not subtotal.is_finite() or subtotal < 0:
        return None
    return subtotal


@require_POST
def validate_promo(request):
    """
    Checkout calls this before placing the order.
    Business outcomes always answer 200 with {valid, message?, discount?, promo?}.
    """
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return JsonResponse({'valid': False, 'message': str(exc)})

    subtotal = parse_subtotal(data.get('subtotal'))
    if subtotal is None:
        return JsonResponse({'valid': False, 'message': MSG_INVALID_SUBTOTAL})

    code = data.get('code')
    try:
        result = evaluate(code, subtotal, find_promo_by_code, timezone.now())
    except DatabaseError:
        logger.exception("Promo lookup failed for code %r", code)
        return JsonResponse({'valid': False, 'message': MSG_VALIDATION_FAILED}, status=500)

    if not result.valid:
        logger.info("Promo %r rejected: %s", code, result.message)
    return JsonResponse(result.to_dict())


@require_http_methods(['GET', 'POST'])
def promo_collection(request):
    if request.method == 'POST':
        return create_promo(request)
    promos = [promo.to_dict() for promo in Promo.objects.all()]
    return JsonResponse(promos, safe=False)


@superadmin_required
def create_promo(request):
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    data.setdefault('is_active', True)
    form = PromoForm(data=data)
    if not form.is_valid():
        return form_error_response(form)

    promo = form.save()
    logger.info("Promo %s created by user %s", promo.code, request.requester.id)
    return JsonResponse(promo.to_dict(), status=201)


@require_http_methods(['GET', 'PUT', 'DELETE'])
def promo_detail(request, promo_id):
    if request.method == 'PUT':
        return update_promo(request, promo_id)
    if request.method == 'DELETE':
        return delete_promo(request, promo_id)
    promo = get_object_or_404(Promo, pk=promo_id)
    return JsonResponse(promo.to_dict())


@superadmin_required
def update_promo(request, promo_id):
    promo = get_object_or_404(Promo, pk=promo_id)
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    form = PromoForm(data={**model_to_dict(promo), **data}, instance=promo)
    if not form.is_valid():
        return form_error_response(form)

    promo = form.save()
    logger.info("Promo %s updated by user %s", promo.code, request.requester.id)
    return JsonResponse(promo.to_dict())


@superadmin_required
def delete_promo(request, promo_id):
    promo = get_object_or_404(Promo, pk=promo_id)
    code = promo.code
    promo.delete()
    logger.info("Promo %s deleted by user %s", code, request.requester.id)
    return JsonResponse({'success': True})
