"""
Installment debt accounting.

``apply_payment`` validates a payment against a debt and computes the new
balances plus the ledger entry to append. It performs no I/O; persisting the
entry and the updated debt together is done by ``debts.services``.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from accounts.auth import SUPERADMIN

CENTS = Decimal('0.01')


class LedgerError(Exception):
    code = 'ledger_error'
    status = 400
    default_message = 'Payment rejected'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class InvalidAmount(LedgerError):
    code = 'invalid_amount'
    default_message = 'Invalid payment amount'


class DebtNotFound(LedgerError):
    code = 'not_found'
    status = 404
    default_message = 'Debt not found'


class Forbidden(LedgerError):
    code = 'forbidden'
    status = 403
    default_message = 'Forbidden'


class ExceedsRemaining(LedgerError):
    code = 'exceeds_remaining'
    default_message = 'Payment amount exceeds remaining debt'


class LedgerInconsistency(LedgerError):
    code = 'inconsistent_debt'
    status = 409
    default_message = 'Debt balances are inconsistent'


class PersistenceFailure(LedgerError):
    code = 'persistence_failure'
    status = 500
    default_message = 'Failed to process payment'


@dataclass(frozen=True)
class DebtState:
    id: str
    user_id: int
    total_debt: Decimal
    paid_amount: Decimal
    remaining_debt: Decimal


@dataclass(frozen=True)
class PaymentEntry:
    id: str
    debt_id: str
    user_id: int
    amount: Decimal
    created_at: datetime
    payment_proof: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class PaymentOutcome:
    debt: DebtState
    payment: PaymentEntry


def to_amount(value) -> Decimal:
    """
    Parses a payment amount. Only finite amounts above zero in whole cents are
    accepted, matching the two decimal places the balances are stored with.
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmount()
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidAmount()
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount()
    try:
        whole_cents = amount == amount.quantize(CENTS)
    except InvalidOperation:
        whole_cents = False
    if not whole_cents:
        raise InvalidAmount()
    return amount


def apply_payment(debt: Optional[DebtState], amount, requester, *,
                  now: datetime, new_id: Callable[[], object],
                  payment_proof: Optional[str] = None,
                  notes: Optional[str] = None) -> PaymentOutcome:
    amount = to_amount(amount)

    if debt is None:
        raise DebtNotFound()

    if requester.role != SUPERADMIN and requester.id != debt.user_id:
        raise Forbidden()

    if amount > debt.remaining_debt:
        raise ExceedsRemaining()

    new_paid_amount = debt.paid_amount + amount
    new_remaining_debt = debt.total_debt - new_paid_amount
    if new_remaining_debt != debt.remaining_debt - amount:
        raise LedgerInconsistency(
            f"Debt {debt.id}: total {debt.total_debt} - paid {debt.paid_amount} "
            f"!= remaining {debt.remaining_debt}"
        )

    payment = PaymentEntry(
        id=str(new_id()),
        debt_id=debt.id,
        user_id=debt.user_id,
        amount=amount,
        created_at=now,
        payment_proof=payment_proof,
        notes=notes,
    )
    updated = replace(debt, paid_amount=new_paid_amount, remaining_debt=new_remaining_debt)
    return PaymentOutcome(debt=updated, payment=payment)
