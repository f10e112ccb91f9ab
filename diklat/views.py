import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count
from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from accounts.auth import requester_from_request, superadmin_required
from core.http import PayloadError, read_payload, error_response, form_error_response
from .forms import DiklatForm, DiklatRegistrationForm, clean_dates, clean_form_fields
from .models import Diklat, DiklatDate, DiklatFormField, DiklatRegistration

logger = logging.getLogger(__name__)


def _with_relations(queryset):
    return queryset.prefetch_related('dates', 'form_fields').annotate(
        registration_count=Count('registrations'))


def _diklat_dict(diklat):
    data = diklat.to_dict()
    data['registration_count'] = getattr(diklat, 'registration_count', None)
    return data


def _save_schedule(diklat, dates, form_fields):
    if dates is not None:
        diklat.dates.all().delete()
        DiklatDate.objects.bulk_create([
            DiklatDate(diklat=diklat, start_date=start, end_date=end) for start, end in dates
        ])
    if form_fields is not None:
        diklat.form_fields.all().delete()
        for field in form_fields:
            field.diklat = diklat
        DiklatFormField.objects.bulk_create(form_fields)


@require_http_methods(['GET', 'POST'])
def diklat_collection(request):
    if request.method == 'POST':
        return create_diklat(request)
    diklats = _with_relations(Diklat.objects.all())
    if request.GET.get('active') == '1':
        diklats = diklats.filter(is_active=True)
    return JsonResponse([_diklat_dict(diklat) for diklat in diklats], safe=False)


@superadmin_required
def create_diklat(request):
    try:
        data = read_payload(request)
        dates = clean_dates(data.get('dates'))
        form_fields = clean_form_fields(data.get('form_fields'))
    except PayloadError as exc:
        return error_response(str(exc))
    except ValidationError as exc:
        return error_response("Invalid data", errors=exc.messages)

    data.setdefault('is_active', True)
    form = DiklatForm(data=data, files=request.FILES)
    if not form.is_valid():
        return form_error_response(form)

    with transaction.atomic():
        diklat = form.save()
        _save_schedule(diklat, dates, form_fields)
    logger.info("Diklat %s created with %d dates", diklat.id, len(dates))
    return JsonResponse(_diklat_dict(_with_relations(Diklat.objects.filter(pk=diklat.pk)).get()), status=201)


@require_http_methods(['GET', 'PUT', 'DELETE'])
def diklat_detail(request, diklat_id):
    if request.method == 'PUT':
        return update_diklat(request, diklat_id)
    if request.method == 'DELETE':
        return delete_diklat(request, diklat_id)
    diklat = get_object_or_404(_with_relations(Diklat.objects.all()), pk=diklat_id)
    return JsonResponse(_diklat_dict(diklat))


@superadmin_required
def update_diklat(request, diklat_id):
    diklat = get_object_or_404(Diklat, pk=diklat_id)
    try:
        data = read_payload(request)
        dates = clean_dates(data['dates']) if 'dates' in data else None
        form_fields = clean_form_fields(data['form_fields']) if 'form_fields' in data else None
    except PayloadError as exc:
        return error_response(str(exc))
    except ValidationError as exc:
        return error_response("Invalid data", errors=exc.messages)

    form = DiklatForm(data={**model_to_dict(diklat, fields=DiklatForm.Meta.fields), **data},
                      instance=diklat)
    if not form.is_valid():
        return form_error_response(form)

    with transaction.atomic():
        diklat = form.save()
        _save_schedule(diklat, dates, form_fields)
    return JsonResponse(_diklat_dict(_with_relations(Diklat.objects.filter(pk=diklat.pk)).get()))


@superadmin_required
def delete_diklat(request, diklat_id):
    diklat = get_object_or_404(Diklat, pk=diklat_id)
    diklat.delete()
    logger.info("Diklat %s deleted", diklat_id)
    return JsonResponse({'success': True})


@require_POST
def register(request, diklat_id):
    """Registration is open to visitors; a logged-in user is linked to the entry."""
    diklat = get_object_or_404(Diklat.objects.prefetch_related('form_fields'), pk=diklat_id)
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    form = DiklatRegistrationForm(data=data, diklat=diklat, form_data=data.get('form_data'))
    if not form.is_valid():
        return form_error_response(form)

    requester = requester_from_request(request)
    registration = DiklatRegistration.objects.create(
        diklat=diklat,
        user_id=requester.id if requester else None,
        name=form.cleaned_data['name'],
        email=form.cleaned_data['email'],
        phone=form.cleaned_data['phone'],
        form_data=form.cleaned_data['form_data'],
    )
    logger.info("Registration %s for diklat %s", registration.id, diklat.id)
    return JsonResponse(registration.to_dict(), status=201)


@require_GET
@superadmin_required
def registration_list(request):
    registrations = DiklatRegistration.objects.select_related('diklat')
    diklat_id = request.GET.get('diklat_id')
    if diklat_id:
        if not diklat_id.isdigit():
            return error_response("Invalid diklat_id")
        registrations = registrations.filter(diklat_id=diklat_id)
    return JsonResponse([registration.to_dict() for registration in registrations], safe=False)


@require_http_methods(['PUT'])
@superadmin_required
def registration_detail(request, registration_id):
    registration = get_object_or_404(DiklatRegistration.objects.select_related('diklat'), pk=registration_id)
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    status = data.get('status')
    if status not in dict(DiklatRegistration.STATUS_CHOICES):
        return error_response("Invalid status")
    registration.status = status
    registration.save(update_fields=['status'])
    return JsonResponse(registration.to_dict())
