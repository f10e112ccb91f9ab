import logging
import uuid
from collections import defaultdict
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from debts.services import open_debt
from products.cart import PRODUCT
from products.models import Product
from promos.evaluator import evaluate
from promos.models import find_promo_by_code
from promos.services import redeem_promo
from .models import Order, OrderItem

logger = logging.getLogger(__name__)


class OrderError(Exception):
    pass


def make_order_number(now, new_id=uuid.uuid4):
    suffix = uuid.UUID(str(new_id())).hex[:8].upper()
    return f"ORD-{now:%Y%m%d}-{suffix}"


def settle_payment(payment_method, total, paid_amount=None):
    """Returns (paid_amount, remaining_debt) for the chosen payment method."""
    if payment_method == Order.LUNAS:
        paid = total
    elif payment_method == Order.UTANG:
        paid = Decimal('0')
    elif payment_method == Order.SEBAGIAN:
        try:
            paid = Decimal(str(paid_amount))
        except InvalidOperation:
            raise OrderError("Jumlah bayar tidak valid")
        if not paid.is_finite() or paid <= 0:
            raise OrderError("Jumlah bayar harus lebih dari 0")
        if paid >= total:
            raise OrderError("Jumlah bayar sebagian harus kurang dari total")
    else:
        raise OrderError("Metode pembayaran tidak dikenal")
    return paid, total - paid


def _stock_demand(lines):
    demand = defaultdict(int)
    for line in lines:
        if line['type'] == PRODUCT:
            demand[line['object'].id] += line['quantity']
        else:
            for item in line['object'].items.all():
                demand[item.product_id] += item.quantity * line['quantity']
    return demand


def _reserve_stock(lines):
    for product_id, quantity in _stock_demand(lines).items():
        updated = Product.objects.filter(pk=product_id, stock__gte=quantity).update(
            stock=F('stock') - quantity,
        )
        if not updated:
            name = Product.objects.filter(pk=product_id).values_list('name', flat=True).first()
            raise OrderError(f"Stok tidak cukup untuk {name or product_id}")


def place_order(user, lines, shipping, payment_method, promo_code=None, paid_amount=None,
                payment_proof=None, now=None, new_id=uuid.uuid4):
    """
    Turns cart lines into an order.

    ``lines`` are the dicts yielded by ``Cart``; prices come from the catalog,
    never from the client. Everything below runs in one transaction: the
    order, its items, stock, the debt for any unpaid part and the promo
    redemption are written together or not at all.
    """
    lines = list(lines)
    if not lines:
        raise OrderError("Keranjang kosong")

    now = now or timezone.now()
    subtotal = sum((line['total_price'] for line in lines), Decimal('0'))

    with transaction.atomic():
        discount = Decimal('0')
        promo_id = None
        if promo_code:
            result = evaluate(promo_code, subtotal, find_promo_by_code, now)
            if not result.valid:
                raise OrderError(f"Kode promo: {result.message}")
            discount = result.discount
            promo_id = result.promo['id']

        total = subtotal - discount
        paid, remaining = settle_payment(payment_method, total, paid_amount)
        if payment_method == Order.LUNAS and not payment_proof:
            raise OrderError("Bukti pembayaran wajib diunggah")

        order = Order.objects.create(
            order_number=make_order_number(now, new_id),
            user=user,
            payment_method=payment_method,
            payment_proof=payment_proof,
            subtotal=subtotal,
            discount=discount,
            total=total,
            paid_amount=paid,
            remaining_debt=remaining,
            promo_id=promo_id,
            created_at=now,
            **shipping,
        )
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                product=line['object'] if line['type'] == PRODUCT else None,
                package=None if line['type'] == PRODUCT else line['object'],
                name=line['name'],
                price=line['price'],
                quantity=line['quantity'],
            )
            for line in lines
        ])
        _reserve_stock(lines)

        if remaining > 0:
            open_debt(user, remaining, order=order)

        if promo_id and not redeem_promo(promo_id):
            raise OrderError("Kode promo: usage limit reached")

    logger.info("Order %s placed by user %s: total Rp %s, paid Rp %s",
                order.order_number, user.pk, total, paid)
    return order


def mark_shipped_defaults(order, now=None):
    if order.status == Order.SHIPPED and order.shipped_at is None:
        order.shipped_at = now or timezone.now()
