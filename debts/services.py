import logging
import uuid
from decimal import Decimal

from django.db import DatabaseError, transaction
from django.db.models import Prefetch
from django.utils import timezone

from .ledger import apply_payment, to_amount, PersistenceFailure
from .models import Debt, DebtPayment

logger = logging.getLogger(__name__)


def _parse_debt_id(debt_id):
    try:
        return uuid.UUID(str(debt_id))
    except ValueError:
        return None


def _locked_debt(debt_id):
    pk = _parse_debt_id(debt_id)
    if pk is None:
        return None
    # Row lock serializes concurrent payments on the same debt
    return Debt.objects.select_for_update().filter(pk=pk).first()


def record_payment(debt_id, amount, requester, payment_proof=None, notes=None,
                   now=None, new_id=uuid.uuid4):
    """
    Applies a payment to a debt and appends it to the ledger.

    The payment row and the debt balance update are written in one
    transaction. Business rejections raise the ``LedgerError`` subclasses
    from ``debts.ledger``; database errors are re-raised as
    ``PersistenceFailure`` after the transaction has rolled back.

    Returns ``(payment, debt_state)``.
    """
    amount = to_amount(amount)
    now = now or timezone.now()

    try:
        with transaction.atomic():
            debt = _locked_debt(debt_id)
            outcome = apply_payment(
                debt.to_state() if debt is not None else None,
                amount,
                requester,
                now=now,
                new_id=new_id,
                payment_proof=getattr(payment_proof, 'name', None),
                notes=notes,
            )

            payment = DebtPayment.objects.create(
                id=outcome.payment.id,
                debt=debt,
                user_id=outcome.payment.user_id,
                amount=outcome.payment.amount,
                payment_proof=payment_proof,
                notes=notes or '',
                created_at=outcome.payment.created_at,
            )
            Debt.objects.filter(pk=debt.pk).update(
                paid_amount=outcome.debt.paid_amount,
                remaining_debt=outcome.debt.remaining_debt,
                updated_at=now,
            )
    except DatabaseError as exc:
        logger.exception("Failed to persist payment of %s on debt %s", amount, debt_id)
        raise PersistenceFailure() from exc

    logger.info("Payment %s of Rp %s recorded on debt %s (remaining Rp %s)",
                payment.id, amount, outcome.debt.id, outcome.debt.remaining_debt)
    return payment, outcome.debt


def open_debt(user, amount, order=None):
    """Creates the debt for the unpaid part of an order."""
    amount = Decimal(amount)
    debt = Debt.objects.create(
        user=user,
        order=order,
        total_debt=amount,
        paid_amount=Decimal('0'),
        remaining_debt=amount,
    )
    logger.info("Debt %s opened for user %s: Rp %s", debt.id, user.pk, amount)
    return debt


def open_debts_for(requester):
    """Outstanding debts visible to the requester, payments newest first."""
    debts = Debt.objects.filter(remaining_debt__gt=0)
    if not requester.is_superadmin:
        debts = debts.filter(user_id=requester.id)
    return debts.select_related('user', 'user__profile').prefetch_related(
        Prefetch('payments', queryset=DebtPayment.objects.order_by('-created_at'))
    )
