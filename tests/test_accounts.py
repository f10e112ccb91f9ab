from __future__ import annotations

import json

import pytest
from django.contrib.auth.models import User
from django.test import Client
from django.urls import reverse

from accounts.models import Address, Profile
from orders.models import Order

pytestmark = pytest.mark.django_db

ADDRESS = {
    "label": "Pondok",
    "recipient_name": "Ust. Ahmad",
    "phone": "081234567890",
    "address": "Jl. Raya Pesantren No. 123",
    "city": "Bandung",
    "province": "Jawa Barat",
}


def post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


def put_json(client, url, payload):
    return client.put(url, data=json.dumps(payload), content_type="application/json")


@pytest.fixture
def staff_client(make_user):
    client = Client()
    client.force_login(make_user("staf", role=Profile.ADMIN))
    return client


# --- role gates ---

def test_superadmin_endpoint_status_by_role(client, santri_client, staff_client, admin_client) -> None:
    url = reverse("accounts:users")

    assert client.get(url).status_code == 401
    assert santri_client.get(url).status_code == 403
    assert staff_client.get(url).status_code == 403
    assert admin_client.get(url).status_code == 200


def test_staff_endpoint_admits_admin_role(client, santri_client, staff_client) -> None:
    assert client.get(reverse("admin_stats")).status_code == 401
    assert santri_client.get(reverse("admin_stats")).status_code == 403
    assert staff_client.get(reverse("admin_stats")).status_code == 200


# --- addresses ---

def test_address_book_requires_login(client) -> None:
    assert client.get(reverse("accounts:addresses")).status_code == 401
    assert post_json(client, reverse("accounts:addresses"), ADDRESS).status_code == 401


def test_add_address(santri_client, santri) -> None:
    response = post_json(santri_client, reverse("accounts:addresses"), {**ADDRESS, "postal_code": "40123"})

    assert response.status_code == 201
    address = Address.objects.get()
    assert address.user == santri
    assert address.postal_code == "40123"
    assert address.pesantren_name == ""
    assert address.is_default is False


@pytest.mark.parametrize("missing", ["label", "recipient_name", "phone", "address", "city", "province"])
def test_address_needs_required_fields(santri_client, missing) -> None:
    payload = {key: value for key, value in ADDRESS.items() if key != missing}

    response = post_json(santri_client, reverse("accounts:addresses"), payload)

    assert response.status_code == 400
    assert missing in response.json()["errors"]
    assert not Address.objects.exists()


def test_only_one_default_address(santri_client, santri) -> None:
    first = post_json(santri_client, reverse("accounts:addresses"), {**ADDRESS, "is_default": True}).json()
    second = post_json(santri_client, reverse("accounts:addresses"),
                       {**ADDRESS, "label": "Rumah", "is_default": True}).json()

    assert Address.objects.get(is_default=True).pk == second["id"]

    put_json(santri_client, reverse("accounts:address_detail", args=[first["id"]]), {"is_default": True})

    assert Address.objects.get(is_default=True).pk == first["id"]
    listed = santri_client.get(reverse("accounts:addresses")).json()
    assert [item["id"] for item in listed] == [first["id"], second["id"]]


def test_defaults_are_per_user(santri, other_santri) -> None:
    Address.objects.create(user=santri, is_default=True, **ADDRESS)
    Address.objects.create(user=other_santri, is_default=True, **ADDRESS)

    assert Address.objects.filter(is_default=True).count() == 2


def test_address_book_is_owner_scoped(santri_client, other_client, santri) -> None:
    address = Address.objects.create(user=santri, **ADDRESS)
    url = reverse("accounts:address_detail", args=[address.pk])

    assert other_client.get(reverse("accounts:addresses")).json() == []
    assert put_json(other_client, url, {"city": "Garut"}).status_code == 404
    assert other_client.delete(url).status_code == 404
    address.refresh_from_db()
    assert address.city == "Bandung"


def test_update_and_delete_own_address(santri_client, santri) -> None:
    address = Address.objects.create(user=santri, **ADDRESS)
    url = reverse("accounts:address_detail", args=[address.pk])

    updated = put_json(santri_client, url, {"city": "Cimahi"})

    assert updated.status_code == 200
    address.refresh_from_db()
    assert address.city == "Cimahi"
    assert address.recipient_name == "Ust. Ahmad"

    assert santri_client.delete(url).json() == {"success": True}
    assert not Address.objects.exists()


# --- checkout with a saved address ---

def test_order_ships_to_saved_address(santri_client, santri, catalog) -> None:
    address = Address.objects.create(user=santri, postal_code="40123", **ADDRESS)
    post_json(santri_client, reverse("products:cart_add", args=["product", catalog["safinah"].pk]), {"quantity": 1})

    response = post_json(santri_client, reverse("orders:collection"),
                         {"address_id": address.pk, "payment_method": "UTANG", "shipping_phone": "0899"})

    assert response.status_code == 201
    order = Order.objects.get()
    assert order.shipping_name == "Ust. Ahmad"
    assert order.shipping_city == "Bandung"
    assert order.shipping_postal == "40123"
    assert order.shipping_phone == "0899"


@pytest.mark.parametrize("address_id", ["abc", 9999])
def test_order_with_unknown_address_is_404(santri_client, catalog, address_id) -> None:
    post_json(santri_client, reverse("products:cart_add", args=["product", catalog["safinah"].pk]), {"quantity": 1})

    response = post_json(santri_client, reverse("orders:collection"),
                         {"address_id": address_id, "payment_method": "UTANG"})

    assert response.status_code == 404
    assert not Order.objects.exists()


def test_order_cannot_use_someone_elses_address(other_client, santri, catalog) -> None:
    address = Address.objects.create(user=santri, **ADDRESS)
    post_json(other_client, reverse("products:cart_add", args=["product", catalog["safinah"].pk]), {"quantity": 1})

    response = post_json(other_client, reverse("orders:collection"),
                         {"address_id": address.pk, "payment_method": "UTANG"})

    assert response.status_code == 404


# --- users ---

USER_PAYLOAD = {
    "email": "Pengurus@Darussalam.id",
    "password": "bismillah-123",
    "name": "Kyai Hasan",
    "pesantren_name": "Pesantren Darussalam",
    "city": "Ciamis",
    "province": "Jawa Barat",
}


def test_superadmin_creates_user_with_profile(admin_client) -> None:
    response = post_json(admin_client, reverse("accounts:users"), USER_PAYLOAD)

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "pengurus@darussalam.id"
    assert body["role"] == Profile.USER
    user = User.objects.get(email="pengurus@darussalam.id")
    assert user.check_password("bismillah-123")
    assert user.get_full_name() == "Kyai Hasan"
    assert user.profile.pesantren_name == "Pesantren Darussalam"
    assert user.profile.postal_code == ""


def test_created_user_can_be_given_a_role(admin_client) -> None:
    post_json(admin_client, reverse("accounts:users"), {**USER_PAYLOAD, "role": Profile.ADMIN})

    assert Profile.objects.get(user__email="pengurus@darussalam.id").role == Profile.ADMIN


def test_duplicate_email_is_rejected(admin_client) -> None:
    post_json(admin_client, reverse("accounts:users"), USER_PAYLOAD)

    response = post_json(admin_client, reverse("accounts:users"),
                         {**USER_PAYLOAD, "email": "pengurus@darussalam.ID"})

    assert response.status_code == 400
    assert "email" in response.json()["errors"]
    assert User.objects.filter(email__iexact="pengurus@darussalam.id").count() == 1


@pytest.mark.parametrize(
    "override",
    [{"email": "bukan-email"}, {"password": "pendek"}, {"name": ""}, {"role": "RAJA"}],
)
def test_invalid_user_payload(admin_client, override) -> None:
    response = post_json(admin_client, reverse("accounts:users"), {**USER_PAYLOAD, **override})

    assert response.status_code == 400
    assert not Profile.objects.filter(user__email="pengurus@darussalam.id").exists()


def test_user_list_is_newest_first(admin_client, santri) -> None:
    post_json(admin_client, reverse("accounts:users"), USER_PAYLOAD)

    body = admin_client.get(reverse("accounts:users")).json()

    assert body[0]["email"] == "pengurus@darussalam.id"
    assert {item["email"] for item in body} == {"pengurus@darussalam.id", "alhikmah@example.com",
                                                "superadmin@example.com"}
    assert "password" not in body[0]
