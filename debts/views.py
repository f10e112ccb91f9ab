import logging

from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from accounts.auth import login_required_json
from core.http import PayloadError, read_payload, error_response
from .ledger import LedgerError
from .services import record_payment, open_debts_for

logger = logging.getLogger(__name__)


def _debtor(user):
    profile = getattr(user, 'profile', None)
    return {
        'name': user.get_full_name() or user.username,
        'email': user.email,
        'pesantren_name': profile.pesantren_name if profile else '',
    }


@require_GET
@login_required_json
def debt_list(request):
    debts = []
    for debt in open_debts_for(request.requester):
        data = debt.to_dict(payments=debt.payments.all())
        data['user'] = _debtor(debt.user)
        debts.append(data)
    return JsonResponse(debts, safe=False)


@require_POST
@login_required_json
def debt_payment(request):
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    try:
        payment, debt = record_payment(
            debt_id=data.get('debt_id'),
            amount=data.get('amount'),
            requester=request.requester,
            payment_proof=request.FILES.get('payment_proof'),
            notes=data.get('notes'),
        )
    except LedgerError as exc:
        if exc.status < 500:
            logger.info("Payment rejected for user %s: %s", request.requester.id, exc.code)
        return error_response(str(exc), status=exc.status, code=exc.code)

    data = payment.to_dict()
    data['remaining_debt'] = debt.remaining_debt
    return JsonResponse(data, status=201)
