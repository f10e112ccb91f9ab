from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse

from debts.models import Debt
from orders.models import Order
from orders.services import OrderError, make_order_number, settle_payment
from promos.models import Promo

pytestmark = pytest.mark.django_db

SHIPPING = {
    "shipping_name": "Ust. Ahmad",
    "shipping_address": "Jl. Raya Pesantren No. 123",
    "shipping_phone": "081234567890",
    "shipping_city": "Bandung",
    "shipping_province": "Jawa Barat",
    "shipping_postal": "40123",
}


def post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


def add_to_cart(client, kind, item_id, quantity=1):
    url = reverse("products:cart_add", args=[kind, item_id])
    response = post_json(client, url, {"quantity": quantity})
    assert response.status_code == 200
    return response


def place(client, **overrides):
    payload = {**SHIPPING, "payment_method": "UTANG", **overrides}
    return post_json(client, reverse("orders:collection"), payload)


# --- pure helpers ---

def test_order_number_uses_date_and_injected_id() -> None:
    now = datetime(2026, 10, 19, 9, 0, tzinfo=dt_timezone.utc)
    fixed = uuid.UUID("abcdef12-0000-0000-0000-000000000000")

    assert make_order_number(now, lambda: fixed) == "ORD-20261019-ABCDEF12"


def test_settle_payment_methods() -> None:
    total = Decimal("300000")

    assert settle_payment("LUNAS", total) == (total, Decimal("0"))
    assert settle_payment("UTANG", total) == (Decimal("0"), total)
    assert settle_payment("SEBAGIAN", total, "100000") == (Decimal("100000"), Decimal("200000"))


@pytest.mark.parametrize("paid", [None, "0", "-10", "300000", "500000", "abc"])
def test_partial_payment_must_be_between_zero_and_total(paid) -> None:
    with pytest.raises(OrderError):
        settle_payment("SEBAGIAN", Decimal("300000"), paid)


# --- cart ---

def test_cart_tracks_products_and_packages(client, catalog) -> None:
    add_to_cart(client, "product", catalog["fathul_qorib"].pk, 2)
    response = add_to_cart(client, "package", catalog["paket"].pk)

    assert response.json()["cart_count"] == 3
    cart = client.get(reverse("products:cart_detail")).json()
    assert Decimal(cart["total"]) == Decimal("300000")
    assert {item["key"] for item in cart["items"]} == {
        f"product:{catalog['fathul_qorib'].pk}",
        f"package:{catalog['paket'].pk}",
    }


def test_cart_update_to_zero_removes_line(client, catalog) -> None:
    add_to_cart(client, "product", catalog["safinah"].pk, 2)
    key = f"product:{catalog['safinah'].pk}"

    response = post_json(client, reverse("products:cart_update"), {"key": key, "quantity": 0})

    assert response.json()["items"] == []


def test_cart_rejects_unknown_kind_and_bad_quantity(client, catalog) -> None:
    bad_kind = post_json(client, reverse("products:cart_add", args=["kursus", 1]), {})
    bad_qty = post_json(client, reverse("products:cart_add", args=["product", catalog["safinah"].pk]),
                        {"quantity": 0})

    assert bad_kind.status_code == 404
    assert bad_qty.status_code == 400


def test_cart_uses_current_catalog_price(client, catalog) -> None:
    add_to_cart(client, "product", catalog["safinah"].pk)
    catalog["safinah"].price = Decimal("50000")
    catalog["safinah"].save()

    cart = client.get(reverse("products:cart_detail")).json()

    assert Decimal(cart["items"][0]["price"]) == Decimal("50000")


# --- placement ---

def test_order_on_credit_opens_debt_and_reserves_stock(santri_client, santri, catalog) -> None:
    add_to_cart(santri_client, "product", catalog["fathul_qorib"].pk, 2)
    add_to_cart(santri_client, "package", catalog["paket"].pk)

    response = place(santri_client)

    assert response.status_code == 201
    order = Order.objects.get()
    assert order.subtotal == Decimal("300000")
    assert order.total == Decimal("300000")
    assert order.paid_amount == Decimal("0")
    assert order.remaining_debt == Decimal("300000")
    assert order.items.count() == 2

    debt = Debt.objects.get()
    assert debt.user == santri
    assert debt.order == order
    assert debt.remaining_debt == Decimal("300000")

    catalog["fathul_qorib"].refresh_from_db()
    catalog["safinah"].refresh_from_db()
    assert catalog["fathul_qorib"].stock == 50 - 2 - 1
    assert catalog["safinah"].stock == 100 - 2

    assert santri_client.get(reverse("products:cart_detail")).json()["items"] == []


def test_partial_payment_with_promo(santri_client, catalog) -> None:
    promo = Promo.objects.create(code="SAVE10", discount_type="PERCENTAGE", discount_value=Decimal("10"),
                                 max_usage=5)
    add_to_cart(santri_client, "product", catalog["fathul_qorib"].pk, 2)

    response = place(santri_client, payment_method="SEBAGIAN", paid_amount="35000", promo_code="save10")

    assert response.status_code == 201
    order = Order.objects.get()
    assert order.discount == Decimal("15000")
    assert order.total == Decimal("135000")
    assert order.remaining_debt == Decimal("100000")
    assert order.promo == promo
    assert Debt.objects.get().total_debt == Decimal("100000")
    promo.refresh_from_db()
    assert promo.used_count == 1


def test_paid_in_full_needs_proof(santri_client, catalog) -> None:
    add_to_cart(santri_client, "product", catalog["safinah"].pk)

    without_proof = place(santri_client, payment_method="LUNAS")
    proof = SimpleUploadedFile("transfer.png", b"\x89PNG", content_type="image/png")
    with_proof = santri_client.post(reverse("orders:collection"),
                                    {**SHIPPING, "payment_method": "LUNAS", "payment_proof": proof})

    assert without_proof.status_code == 400
    assert with_proof.status_code == 201
    order = Order.objects.get()
    assert order.paid_amount == order.total == Decimal("45000")
    assert order.remaining_debt == Decimal("0")
    assert not Debt.objects.exists()


def test_invalid_promo_rejects_the_order(santri_client, catalog) -> None:
    Promo.objects.create(code="HABIS", discount_type="FIXED", discount_value=Decimal("5000"),
                         max_usage=1, used_count=1)
    add_to_cart(santri_client, "product", catalog["safinah"].pk)

    response = place(santri_client, promo_code="HABIS")

    assert response.status_code == 400
    assert "usage limit reached" in response.json()["error"]
    assert not Order.objects.exists()


def test_insufficient_stock_rolls_everything_back(santri_client, catalog) -> None:
    add_to_cart(santri_client, "product", catalog["safinah"].pk, 1)
    add_to_cart(santri_client, "product", catalog["jurumiyah"].pk, 5)

    response = place(santri_client)

    assert response.status_code == 400
    assert not Order.objects.exists()
    assert not Debt.objects.exists()
    catalog["safinah"].refresh_from_db()
    assert catalog["safinah"].stock == 100
    assert len(santri_client.get(reverse("products:cart_detail")).json()["items"]) == 2


def test_empty_cart_is_rejected(santri_client, catalog) -> None:
    response = place(santri_client)

    assert response.status_code == 400


def test_order_requires_login(client, catalog) -> None:
    add_to_cart(client, "product", catalog["safinah"].pk)

    assert place(client).status_code == 401


def test_order_visibility(santri_client, other_client, admin_client, catalog) -> None:
    add_to_cart(santri_client, "product", catalog["safinah"].pk)
    order_id = place(santri_client).json()["id"]
    url = reverse("orders:detail", args=[order_id])

    assert santri_client.get(url).status_code == 200
    assert other_client.get(url).status_code == 403
    assert admin_client.get(url).status_code == 200
    assert len(other_client.get(reverse("orders:collection")).json()) == 0
    assert len(admin_client.get(reverse("orders:collection")).json()) == 1


def test_superadmin_ships_order(santri_client, admin_client, catalog) -> None:
    add_to_cart(santri_client, "product", catalog["safinah"].pk)
    order_id = place(santri_client).json()["id"]
    url = reverse("orders:detail", args=[order_id])
    payload = {"status": "SHIPPED", "expedition_name": "JNE", "tracking_number": "JNE123"}

    denied = santri_client.put(url, data=json.dumps(payload), content_type="application/json")
    response = admin_client.put(url, data=json.dumps(payload), content_type="application/json")

    assert denied.status_code == 403
    assert response.status_code == 200
    order = Order.objects.get()
    assert order.status == Order.SHIPPED
    assert order.tracking_number == "JNE123"
    assert order.shipped_at is not None


def test_export_csv(santri_client, admin_client, catalog) -> None:
    add_to_cart(santri_client, "package", catalog["paket"].pk)
    place(santri_client)

    response = admin_client.get(reverse("orders:export"))

    assert response.status_code == 200
    assert response["Content-Type"] == "text/csv"
    lines = response.content.decode("utf-8-sig").strip().splitlines()
    assert lines[0].startswith("No. Order,Tanggal")
    assert "Paket Kitab Fiqih Dasar" in lines[1]
    assert len(lines) == 2


def test_admin_stats(santri_client, admin_client, catalog) -> None:
    add_to_cart(santri_client, "product", catalog["safinah"].pk, 2)
    place(santri_client)

    body = admin_client.get(reverse("admin_stats")).json()

    assert body["total_orders"] == 1
    assert body["pending_orders"] == 1
    assert Decimal(body["total_revenue"]) == Decimal("90000")
    assert body["total_products"] == 3
    assert body["low_stock_products"] == 1
    assert santri_client.get(reverse("admin_stats")).status_code == 403
