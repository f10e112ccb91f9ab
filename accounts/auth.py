"""
Explicit requester identity for the JSON endpoints.

Views build a ``Requester`` from the authenticated Django user once and pass it
down; the rule engines never look at ``request.user`` themselves.
"""
from dataclasses import dataclass
from functools import wraps

from django.http import JsonResponse

from .models import Profile

SUPERADMIN = Profile.SUPERADMIN
ADMIN = Profile.ADMIN
USER = Profile.USER


@dataclass(frozen=True)
class Requester:
    id: int
    role: str

    @property
    def is_superadmin(self):
        return self.role == SUPERADMIN

    @property
    def is_staff(self):
        return self.role in (SUPERADMIN, ADMIN)


def get_role(user):
    role = Profile.objects.filter(user_id=user.pk).values_list('role', flat=True).first()
    if role:
        return role
    # Superusers created by createsuperuser have no profile yet
    return SUPERADMIN if user.is_superuser else USER


def requester_from_request(request):
    """Returns the Requester for an authenticated request, or None."""
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return None
    return Requester(id=user.pk, role=get_role(user))


def _unauthorized():
    return JsonResponse({'error': 'Unauthorized'}, status=401)


def _forbidden():
    return JsonResponse({'error': 'Forbidden'}, status=403)


def login_required_json(view_func):
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        requester = requester_from_request(request)
        if requester is None:
            return _unauthorized()
        request.requester = requester
        return view_func(request, *args, **kwargs)
    return wrapper


def superadmin_required(view_func):
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        requester = requester_from_request(request)
        if requester is None:
            return _unauthorized()
        if not requester.is_superadmin:
            return _forbidden()
        request.requester = requester
        return view_func(request, *args, **kwargs)
    return wrapper


def staff_required(view_func):
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        requester = requester_from_request(request)
        if requester is None:
            return _unauthorized()
        if not requester.is_staff:
            return _forbidden()
        request.requester = requester
        return view_func(request, *args, **kwargs)
    return wrapper
