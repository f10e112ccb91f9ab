"""
Promo code evaluation.

``evaluate`` decides whether a promo code can be used against an order
subtotal and how much it takes off. Every business outcome comes back as an
``EvaluationResult``; only the lookup itself may raise (database errors), and
those are left for the caller to report as an infrastructure failure.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional

PERCENTAGE = 'PERCENTAGE'
FIXED = 'FIXED'

CENTS = Decimal('0.01')

MSG_CODE_REQUIRED = 'code required'
MSG_NOT_FOUND = 'not found'
MSG_INACTIVE = 'inactive'
MSG_USAGE_LIMIT = 'usage limit reached'
MSG_NOT_YET_VALID = 'not yet valid'
MSG_EXPIRED = 'expired'


@dataclass(frozen=True)
class PromoTerms:
    id: str
    code: str
    discount_type: str
    discount_value: Decimal
    max_usage: Optional[int] = None
    used_count: int = 0
    is_active: bool = True
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None


@dataclass(frozen=True)
class EvaluationResult:
    valid: bool
    message: Optional[str] = None
    discount: Optional[Decimal] = None
    promo: Optional[dict] = None

    def to_dict(self):
        data = {'valid': self.valid}
        if self.message is not None:
            data['message'] = self.message
        if self.discount is not None:
            data['discount'] = self.discount
        if self.promo is not None:
            data['promo'] = self.promo
        return data


def _invalid(message):
    return EvaluationResult(valid=False, message=message)


def rejection_reason(promo: PromoTerms, now: datetime) -> Optional[str]:
    """Returns why ``promo`` cannot be used at ``now``, or None when it can."""
    if not promo.is_active:
        return MSG_INACTIVE
    if promo.max_usage is not None and promo.used_count >= promo.max_usage:
        return MSG_USAGE_LIMIT
    if promo.valid_from is not None and now < promo.valid_from:
        return MSG_NOT_YET_VALID
    if promo.valid_until is not None and now > promo.valid_until:
        return MSG_EXPIRED
    return None


def compute_discount(promo: PromoTerms, subtotal: Decimal) -> Decimal:
    value = Decimal(promo.discount_value)
    if promo.discount_type == PERCENTAGE:
        discount = subtotal * value / 100
    else:
        discount = value
    discount = discount.quantize(CENTS, rounding=ROUND_HALF_UP)
    # Never more than the order itself, rounding included
    return min(discount, subtotal)


def evaluate(code: Optional[str], subtotal: Decimal,
             lookup_promo: Callable[[str], Optional[PromoTerms]],
             now: datetime) -> EvaluationResult:
    if code is None or not str(code).strip():
        return _invalid(MSG_CODE_REQUIRED)

    promo = lookup_promo(str(code).strip().upper())
    if promo is None:
        return _invalid(MSG_NOT_FOUND)

    reason = rejection_reason(promo, now)
    if reason is not None:
        return _invalid(reason)

    return EvaluationResult(
        valid=True,
        discount=compute_discount(promo, Decimal(subtotal)),
        promo={
            'id': promo.id,
            'code': promo.code,
            'discount_type': promo.discount_type,
            'discount_value': Decimal(promo.discount_value),
        },
    )
