# products/cart.py
from decimal import Decimal

from django.conf import settings

from .models import Product, Package

PRODUCT = 'product'
PACKAGE = 'package'


def line_key(kind, obj_id):
    return f"{kind}:{obj_id}"


class Cart:
    """Session cart holding products and packages side by side."""

    def __init__(self, request):
        self.session = request.session
        cart = self.session.get(settings.CART_SESSION_ID)
        if not cart:
            cart = self.session[settings.CART_SESSION_ID] = {}
        self.cart = cart

    def add(self, item, quantity=1, override_quantity=False):
        kind = PACKAGE if isinstance(item, Package) else PRODUCT
        key = line_key(kind, item.id)
        if key not in self.cart:
            self.cart[key] = {
                'type': kind,
                'id': item.id,
                'name': item.name,
                'quantity': 0,
                'price': str(item.price),
            }

        if override_quantity:
            self.cart[key]['quantity'] = quantity
        else:
            self.cart[key]['quantity'] += quantity

        if self.cart[key]['quantity'] <= 0:
            del self.cart[key]
        self.save()

    def update(self, key, quantity):
        if key not in self.cart:
            return False
        if quantity <= 0:
            del self.cart[key]
        else:
            self.cart[key]['quantity'] = quantity
        self.save()
        return True

    def remove(self, key):
        if key in self.cart:
            del self.cart[key]
            self.save()

    def save(self):
        self.session.modified = True

    def __len__(self):
        return sum(line['quantity'] for line in self.cart.values())

    def get_total_price(self):
        return sum((Decimal(line['price']) * line['quantity'] for line in self.cart.values()), Decimal('0'))

    def __iter__(self):
        """
        Yields the lines with the catalog object attached and current prices.
        Lines whose product or package is gone or inactive are dropped.
        """
        product_ids = [line['id'] for line in self.cart.values() if line['type'] == PRODUCT]
        package_ids = [line['id'] for line in self.cart.values() if line['type'] == PACKAGE]
        objects = {}
        for product in Product.objects.filter(id__in=product_ids, is_active=True):
            objects[line_key(PRODUCT, product.id)] = product
        for package in Package.objects.filter(id__in=package_ids, is_active=True).prefetch_related('items'):
            objects[line_key(PACKAGE, package.id)] = package

        for key, line in self.cart.items():
            obj = objects.get(key)
            if obj is None:
                continue
            yield {
                'key': key,
                'type': line['type'],
                'object': obj,
                'name': obj.name,
                'quantity': line['quantity'],
                'price': obj.price,
                'total_price': obj.price * line['quantity'],
            }

    def to_dict(self):
        lines = [
            {k: v for k, v in line.items() if k != 'object'}
            for line in self
        ]
        return {
            'items': lines,
            'count': sum(line['quantity'] for line in lines),
            'total': sum((line['total_price'] for line in lines), Decimal('0')),
        }

    def clear(self):
        del self.session[settings.CART_SESSION_ID]
        self.save()
