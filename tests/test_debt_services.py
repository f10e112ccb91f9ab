from __future__ import annotations

import json
import uuid
from decimal import Decimal
from unittest import mock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.db.models import QuerySet
from django.urls import reverse

from accounts.auth import requester_from_request, Requester, SUPERADMIN, USER
from debts.ledger import DebtNotFound, ExceedsRemaining, Forbidden, InvalidAmount, PersistenceFailure
from debts.models import Debt, DebtPayment
from debts.services import open_debt, record_payment

pytestmark = pytest.mark.django_db


@pytest.fixture
def debt(santri):
    return Debt.objects.create(
        user=santri,
        total_debt=Decimal("1000000"),
        paid_amount=Decimal("200000"),
        remaining_debt=Decimal("800000"),
    )


def owner_of(debt):
    return Requester(id=debt.user_id, role=USER)


def test_settling_payment_persists_both_rows(debt) -> None:
    payment, state = record_payment(debt.pk, "800000", owner_of(debt), notes="Pelunasan")

    debt.refresh_from_db()
    assert debt.paid_amount == Decimal("1000000")
    assert debt.remaining_debt == Decimal("0")
    assert state.remaining_debt == Decimal("0")
    assert payment.debt_id == debt.pk
    assert payment.user_id == debt.user_id
    assert payment.notes == "Pelunasan"
    assert DebtPayment.objects.filter(debt=debt).count() == 1


def test_overpayment_writes_nothing(debt) -> None:
    with pytest.raises(ExceedsRemaining):
        record_payment(debt.pk, "900000", owner_of(debt))

    debt.refresh_from_db()
    assert debt.paid_amount == Decimal("200000")
    assert debt.remaining_debt == Decimal("800000")
    assert not DebtPayment.objects.exists()


def test_payment_id_comes_from_injected_generator(debt) -> None:
    fixed = uuid.UUID("12345678-1234-5678-1234-567812345678")

    record_payment(debt.pk, "1000", owner_of(debt), new_id=lambda: fixed)

    assert DebtPayment.objects.get().pk == fixed


def test_unknown_or_malformed_debt_id(santri) -> None:
    requester = Requester(id=santri.pk, role=USER)

    with pytest.raises(DebtNotFound):
        record_payment(uuid.uuid4(), "1000", requester)
    with pytest.raises(DebtNotFound):
        record_payment("bukan-uuid", "1000", requester)


def test_failed_debt_update_rolls_back_the_payment(debt) -> None:
    with mock.patch.object(QuerySet, "update", side_effect=DatabaseError("disk full")):
        with pytest.raises(PersistenceFailure):
            record_payment(debt.pk, "100000", owner_of(debt))

    debt.refresh_from_db()
    assert debt.remaining_debt == Decimal("800000")
    assert not DebtPayment.objects.exists()


def test_payments_are_append_only(debt) -> None:
    payment, _ = record_payment(debt.pk, "1000", owner_of(debt))

    payment.notes = "diubah"
    with pytest.raises(ValueError):
        payment.save()


def test_open_debt(santri) -> None:
    created = open_debt(santri, Decimal("250000"))

    assert created.total_debt == Decimal("250000")
    assert created.remaining_debt == Decimal("250000")
    assert created.paid_amount == Decimal("0")


# --- HTTP ---

def post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


def test_payment_requires_login(client, debt) -> None:
    response = post_json(client, reverse("debts:payment"), {"debt_id": str(debt.pk), "amount": 1000})

    assert response.status_code == 401


def test_owner_pays_over_http(santri_client, debt) -> None:
    response = post_json(santri_client, reverse("debts:payment"),
                         {"debt_id": str(debt.pk), "amount": 800000, "notes": "Lunas"})

    assert response.status_code == 201
    body = response.json()
    assert Decimal(body["amount"]) == Decimal("800000")
    assert Decimal(body["remaining_debt"]) == Decimal("0")


def test_payment_with_proof_upload(santri_client, debt) -> None:
    proof = SimpleUploadedFile("bukti.jpg", b"\xff\xd8\xff", content_type="image/jpeg")

    response = santri_client.post(reverse("debts:payment"),
                                  {"debt_id": str(debt.pk), "amount": "50000", "payment_proof": proof})

    assert response.status_code == 201
    payment = DebtPayment.objects.get()
    assert payment.payment_proof.name.startswith("debt_payments/bukti")


@pytest.mark.parametrize(
    "amount, status, code",
    [
        (0, 400, "invalid_amount"),
        ("abc", 400, "invalid_amount"),
        (900000, 400, "exceeds_remaining"),
    ],
)
def test_rejections_map_to_status(santri_client, debt, amount, status, code) -> None:
    response = post_json(santri_client, reverse("debts:payment"), {"debt_id": str(debt.pk), "amount": amount})

    assert response.status_code == status
    assert response.json()["code"] == code


def test_other_user_is_forbidden(other_client, debt) -> None:
    response = post_json(other_client, reverse("debts:payment"), {"debt_id": str(debt.pk), "amount": 1000})

    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"


def test_missing_debt_is_404(santri_client) -> None:
    response = post_json(santri_client, reverse("debts:payment"), {"debt_id": str(uuid.uuid4()), "amount": 1000})

    assert response.status_code == 404


def test_superadmin_pays_any_debt(admin_client, debt) -> None:
    response = post_json(admin_client, reverse("debts:payment"), {"debt_id": str(debt.pk), "amount": 100000})

    assert response.status_code == 201
    assert DebtPayment.objects.get().user_id == debt.user_id


def test_list_shows_own_open_debts_with_payments(santri_client, admin_client, other_santri, debt) -> None:
    Debt.objects.create(user=other_santri, total_debt=Decimal("50000"), paid_amount=Decimal("0"),
                        remaining_debt=Decimal("50000"))
    Debt.objects.create(user=debt.user, total_debt=Decimal("10000"), paid_amount=Decimal("10000"),
                        remaining_debt=Decimal("0"))
    record_payment(debt.pk, "1000", owner_of(debt))
    record_payment(debt.pk, "2000", owner_of(debt))

    own = santri_client.get(reverse("debts:list")).json()
    everything = admin_client.get(reverse("debts:list")).json()

    assert [item["id"] for item in own] == [str(debt.pk)]
    assert [Decimal(p["amount"]) for p in own[0]["payments"]] == [Decimal("2000"), Decimal("1000")]
    assert own[0]["user"]["pesantren_name"] == "Pesantren Al-Hikmah"
    assert len(everything) == 2


def test_superuser_without_profile_counts_as_superadmin(rf, django_user_model) -> None:
    root = django_user_model.objects.create_superuser("root", "root@example.com", "rahasia-123")
    request = rf.get("/")
    request.user = root

    assert requester_from_request(request) == Requester(id=root.pk, role=SUPERADMIN)


def test_forbidden_is_raised_before_exceeds_remaining(other_santri, debt) -> None:
    with pytest.raises(Forbidden):
        record_payment(debt.pk, "900000", Requester(id=other_santri.pk, role=USER))


def test_sub_cent_payment_is_rejected_before_any_write(debt) -> None:
    with pytest.raises(InvalidAmount):
        record_payment(debt.pk, "0.005", owner_of(debt))

    debt.refresh_from_db()
    assert debt.paid_amount == Decimal("200000")
    assert debt.remaining_debt == Decimal("800000")
    assert not DebtPayment.objects.exists()


def test_stored_payment_matches_returned_balances(debt) -> None:
    payment, state = record_payment(debt.pk, "1234.56", owner_of(debt))

    stored = DebtPayment.objects.get(pk=payment.pk)
    debt.refresh_from_db()
    assert stored.amount == Decimal("1234.56")
    assert debt.paid_amount == state.paid_amount == Decimal("201234.56")
    assert debt.remaining_debt == state.remaining_debt == Decimal("798765.44")
    assert debt.paid_amount + debt.remaining_debt == debt.total_debt


def test_sub_cent_payment_over_http(santri_client, debt) -> None:
    response = post_json(santri_client, reverse("debts:payment"), {"debt_id": str(debt.pk), "amount": "0.005"})

    assert response.status_code == 400
    assert response.json()["code"] == "invalid_amount"
