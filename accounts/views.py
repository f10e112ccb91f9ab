import logging

from django.contrib.auth.models import User
from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from core.http import PayloadError, read_payload, error_response, form_error_response
from .auth import login_required_json, superadmin_required
from .forms import AddressForm, UserCreateForm
from .models import Address, user_to_dict

logger = logging.getLogger(__name__)


# --- Alamat ---

@require_http_methods(['GET', 'POST'])
@login_required_json
def address_collection(request):
    if request.method == 'GET':
        addresses = Address.objects.filter(user_id=request.requester.id)
        return JsonResponse([address.to_dict() for address in addresses], safe=False)

    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    form = AddressForm(data=data)
    if not form.is_valid():
        return form_error_response(form)

    address = form.save(commit=False)
    address.user_id = request.requester.id
    address.save()
    logger.info("Address %s added for user %s", address.id, request.requester.id)
    return JsonResponse(address.to_dict(), status=201)


@require_http_methods(['PUT', 'DELETE'])
@login_required_json
def address_detail(request, address_id):
    # Other users' addresses look missing
    address = get_object_or_404(Address, pk=address_id, user_id=request.requester.id)

    if request.method == 'DELETE':
        address.delete()
        return JsonResponse({'success': True})

    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    form = AddressForm(data={**model_to_dict(address, fields=AddressForm.Meta.fields), **data},
                       instance=address)
    if not form.is_valid():
        return form_error_response(form)
    address = form.save()
    return JsonResponse(address.to_dict())


# --- Pengguna ---

@require_http_methods(['GET', 'POST'])
@superadmin_required
def user_collection(request):
    if request.method == 'GET':
        users = User.objects.select_related('profile').order_by('-date_joined')
        return JsonResponse([user_to_dict(user) for user in users], safe=False)

    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    form = UserCreateForm(data=data)
    if not form.is_valid():
        return form_error_response(form)

    user = form.save()
    logger.info("User %s created with role %s by user %s", user.email, user.profile.role, request.requester.id)
    return JsonResponse(user_to_dict(user), status=201)
