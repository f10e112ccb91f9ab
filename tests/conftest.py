"""Shared fixtures: users with roles, logged-in clients and a small catalog."""
from decimal import Decimal

import pytest
from django.contrib.auth.models import User
from django.test import Client

from accounts.models import Profile
from products.models import Category, Product, Package, PackageItem


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "media")
    return settings.MEDIA_ROOT


@pytest.fixture
def make_user(db):
    def _make(username, role=Profile.USER, **profile):
        user = User.objects.create_user(
            username=username,
            email=f"{username}@example.com",
            password="rahasia-123",
        )
        Profile.objects.create(user=user, role=role, **profile)
        return user
    return _make


@pytest.fixture
def superadmin(make_user):
    return make_user("superadmin", role=Profile.SUPERADMIN)


@pytest.fixture
def santri(make_user):
    return make_user("alhikmah", pesantren_name="Pesantren Al-Hikmah")


@pytest.fixture
def other_santri(make_user):
    return make_user("annur", pesantren_name="Pesantren An-Nur")


def _client_for(user):
    client = Client()
    client.force_login(user)
    return client


@pytest.fixture
def admin_client(superadmin):
    return _client_for(superadmin)


@pytest.fixture
def santri_client(santri):
    return _client_for(santri)


@pytest.fixture
def other_client(other_santri):
    return _client_for(other_santri)


@pytest.fixture
def catalog(db):
    fiqih = Category.objects.create(name="Fiqih")
    nahwu = Category.objects.create(name="Nahwu")
    fathul_qorib = Product.objects.create(
        category=fiqih, name="Kitab Fathul Qorib", price=Decimal("75000"), stock=50, min_stock=10,
        is_bestseller=True,
    )
    safinah = Product.objects.create(
        category=fiqih, name="Kitab Safinatun Najah", price=Decimal("45000"), stock=100, min_stock=20,
    )
    jurumiyah = Product.objects.create(
        category=nahwu, name="Kitab Jurumiyah", price=Decimal("35000"), stock=3, min_stock=15,
    )
    paket = Package.objects.create(name="Paket Kitab Fiqih Dasar", price=Decimal("150000"))
    PackageItem.objects.create(package=paket, product=fathul_qorib, quantity=1)
    PackageItem.objects.create(package=paket, product=safinah, quantity=2)
    return {
        "fathul_qorib": fathul_qorib,
        "safinah": safinah,
        "jurumiyah": jurumiyah,
        "paket": paket,
    }
