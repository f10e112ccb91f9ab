import logging

from django.db import transaction
from django.db.models import Q
from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from accounts.auth import superadmin_required
from core.http import PayloadError, read_payload, error_response, form_error_response
from .cart import Cart, PRODUCT, PACKAGE
from .forms import ProductForm, PackageForm
from .models import Product, Package, PackageItem

logger = logging.getLogger(__name__)


# --- Produk ---

@require_http_methods(['GET', 'POST'])
def product_collection(request):
    if request.method == 'POST':
        return create_product(request)

    products = Product.objects.filter(is_active=True).select_related('category')
    category = request.GET.get('category')
    if category:
        products = products.filter(category__slug=category)
    query = request.GET.get('q', '').strip()
    if query:
        products = products.filter(Q(name__icontains=query) | Q(description__icontains=query))
    return JsonResponse([product.to_dict() for product in products], safe=False)


@superadmin_required
def create_product(request):
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    data.setdefault('is_active', True)
    form = ProductForm(data=data, files=request.FILES)
    if not form.is_valid():
        return form_error_response(form)
    product = form.save()
    logger.info("Product %s created", product.id)
    return JsonResponse(product.to_dict(), status=201)


@require_http_methods(['GET', 'PUT', 'DELETE'])
def product_detail(request, product_id):
    if request.method == 'PUT':
        return update_product(request, product_id)
    if request.method == 'DELETE':
        return delete_product(request, product_id)
    product = get_object_or_404(Product, pk=product_id)
    return JsonResponse(product.to_dict())


@superadmin_required
def update_product(request, product_id):
    product = get_object_or_404(Product, pk=product_id)
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    form = ProductForm(data={**model_to_dict(product, fields=ProductForm.Meta.fields), **data},
                       instance=product)
    if not form.is_valid():
        return form_error_response(form)
    product = form.save()
    return JsonResponse(product.to_dict())


@superadmin_required
def delete_product(request, product_id):
    product = get_object_or_404(Product, pk=product_id)
    product.delete()
    logger.info("Product %s deleted", product_id)
    return JsonResponse({'success': True})


# --- Paket ---

def _clean_package_items(raw_items):
    """Returns [(product, quantity)], skipping lines without a positive quantity."""
    if raw_items is None:
        return []
    if not isinstance(raw_items, list):
        raise PayloadError('items must be a list')

    items = []
    for raw in raw_items:
        if not isinstance(raw, dict) or not raw.get('product_id'):
            continue
        try:
            quantity = int(raw.get('quantity', 0))
        except (TypeError, ValueError):
            continue
        if quantity <= 0:
            continue
        product = Product.objects.filter(pk=raw['product_id']).first()
        if product is None:
            raise PayloadError(f"Product {raw['product_id']} not found")
        items.append((product, quantity))
    return items


def _replace_package_items(package, items):
    package.items.all().delete()
    PackageItem.objects.bulk_create([
        PackageItem(package=package, product=product, quantity=quantity)
        for product, quantity in items
    ])


@require_http_methods(['GET', 'POST'])
def package_collection(request):
    if request.method == 'POST':
        return create_package(request)
    packages = Package.objects.prefetch_related('items__product')
    return JsonResponse([package.to_dict() for package in packages], safe=False)


@superadmin_required
def create_package(request):
    try:
        data = read_payload(request)
        items = _clean_package_items(data.get('items'))
    except PayloadError as exc:
        return error_response(str(exc))

    if not data.get('name') or not data.get('price'):
        return error_response("Name and price are required")

    data.setdefault('is_active', True)
    form = PackageForm(data=data, files=request.FILES)
    if not form.is_valid():
        return form_error_response(form)

    with transaction.atomic():
        package = form.save()
        _replace_package_items(package, items)
    logger.info("Package %s created with %d items", package.id, len(items))
    return JsonResponse(package.to_dict(), status=201)


@require_http_methods(['GET', 'PUT', 'DELETE'])
def package_detail(request, package_id):
    if request.method == 'PUT':
        return update_package(request, package_id)
    if request.method == 'DELETE':
        return delete_package(request, package_id)
    package = get_object_or_404(Package.objects.prefetch_related('items__product'), pk=package_id)
    return JsonResponse(package.to_dict())


@superadmin_required
def update_package(request, package_id):
    package = get_object_or_404(Package, pk=package_id)
    try:
        data = read_payload(request)
        items = _clean_package_items(data.get('items')) if 'items' in data else None
    except PayloadError as exc:
        return error_response(str(exc))

    form = PackageForm(data={**model_to_dict(package, fields=PackageForm.Meta.fields), **data},
                       instance=package)
    if not form.is_valid():
        return form_error_response(form)

    with transaction.atomic():
        package = form.save()
        if items is not None:
            _replace_package_items(package, items)
    return JsonResponse(package.to_dict())


@superadmin_required
def delete_package(request, package_id):
    package = get_object_or_404(Package, pk=package_id)
    package.delete()
    logger.info("Package %s deleted", package_id)
    return JsonResponse({'success': True})


# --- Keranjang ---

@require_GET
def cart_detail(request):
    return JsonResponse(Cart(request).to_dict())


@require_POST
def cart_add(request, kind, item_id):
    if kind == PRODUCT:
        item = get_object_or_404(Product, id=item_id, is_active=True)
    elif kind == PACKAGE:
        item = get_object_or_404(Package, id=item_id, is_active=True)
    else:
        return error_response("Unknown item type", status=404)

    try:
        data = read_payload(request)
        quantity = int(data.get('quantity', 1))
    except (PayloadError, TypeError, ValueError):
        return error_response("Invalid quantity")
    if quantity <= 0:
        return error_response("Invalid quantity")

    cart = Cart(request)
    cart.add(item, quantity=quantity)
    return JsonResponse({
        'cart_count': len(cart),
        'message': f'{item.name} ditambahkan ke keranjang!'
    })


@require_POST
def cart_update(request):
    try:
        data = read_payload(request)
        quantity = int(data.get('quantity'))
    except (PayloadError, TypeError, ValueError):
        return error_response("Invalid quantity")

    cart = Cart(request)
    if not cart.update(data.get('key'), quantity):
        return error_response("Item not in cart", status=404)
    return JsonResponse(cart.to_dict())


@require_POST
def cart_remove(request):
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    cart = Cart(request)
    cart.remove(data.get('key'))
    return JsonResponse(cart.to_dict())
