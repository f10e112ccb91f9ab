import csv
import logging

from django.conf import settings
from django.db.models import F, Q, Sum
from django.forms.models import model_to_dict
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.views.decorators.http import require_GET, require_http_methods

from accounts.auth import login_required_json, superadmin_required, staff_required
from accounts.models import Address
from core.http import PayloadError, read_payload, error_response, form_error_response
from diklat.models import DiklatDate
from partners.models import Partner
from products.cart import Cart
from products.models import Product
from .forms import OrderCreateForm, OrderUpdateForm
from .models import Order
from .services import OrderError, place_order, mark_shipped_defaults

logger = logging.getLogger(__name__)


@require_http_methods(['GET', 'POST'])
@login_required_json
def order_collection(request):
    if request.method == 'POST':
        return create_order(request)

    orders = Order.objects.select_related('promo').prefetch_related('items')
    if not request.requester.is_superadmin:
        orders = orders.filter(user_id=request.requester.id)
    status = request.GET.get('status')
    if status:
        orders = orders.filter(status=status)
    return JsonResponse([order.to_dict() for order in orders], safe=False)


def create_order(request):
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    address_id = data.pop('address_id', None)
    if address_id not in (None, ''):
        # Saved address fills shipping fields the payload leaves out
        if not str(address_id).isdigit():
            return error_response("Address not found", status=404)
        address = get_object_or_404(Address, pk=int(address_id), user_id=request.requester.id)
        data = {**address.as_shipping(), **data}

    form = OrderCreateForm(data=data)
    if not form.is_valid():
        return form_error_response(form)

    cart = Cart(request)
    try:
        order = place_order(
            user=request.user,
            lines=cart,
            shipping=form.shipping(),
            payment_method=form.cleaned_data['payment_method'],
            promo_code=form.cleaned_data.get('promo_code'),
            paid_amount=form.cleaned_data.get('paid_amount'),
            payment_proof=request.FILES.get('payment_proof'),
        )
    except OrderError as exc:
        logger.info("Order rejected for user %s: %s", request.requester.id, exc)
        return error_response(str(exc))

    cart.clear()
    return JsonResponse(order.to_dict(), status=201)


@require_http_methods(['GET', 'PUT'])
@login_required_json
def order_detail(request, order_id):
    order = get_object_or_404(Order.objects.select_related('promo'), pk=order_id)
    if request.method == 'PUT':
        return update_order(request, order)

    if not request.requester.is_superadmin and order.user_id != request.requester.id:
        return error_response("Forbidden", status=403)
    return JsonResponse(order.to_dict())


@superadmin_required
def update_order(request, order):
    try:
        data = read_payload(request)
    except PayloadError as exc:
        return error_response(str(exc))

    form = OrderUpdateForm(data={**model_to_dict(order, fields=OrderUpdateForm.Meta.fields), **data},
                           instance=order)
    if not form.is_valid():
        return form_error_response(form)

    order = form.save(commit=False)
    mark_shipped_defaults(order)
    order.save()
    logger.info("Order %s set to %s", order.order_number, order.status)
    return JsonResponse(order.to_dict())


@require_GET
@superadmin_required
def export_orders(request):
    orders = Order.objects.select_related('user', 'user__profile', 'promo').prefetch_related('items')

    start_date = parse_date(request.GET.get('start_date') or '')
    end_date = parse_date(request.GET.get('end_date') or '')
    if start_date and end_date:
        orders = orders.filter(created_at__date__gte=start_date, created_at__date__lte=end_date)

    response = HttpResponse(content_type='text/csv')
    # BOM so Excel detects UTF-8
    response.write('\ufeff'.encode('utf8'))
    response['Content-Disposition'] = f'attachment; filename=pesanan-{timezone.localdate():%Y%m%d}.csv'
    writer = csv.writer(response)
    writer.writerow(['No. Order', 'Tanggal', 'Pemesan', 'Pesantren', 'Item', 'Jumlah', 'Harga',
                     'Subtotal', 'Diskon', 'Kode Promo', 'Total', 'Dibayar', 'Sisa Utang',
                     'Metode Bayar', 'Status'])

    for order in orders:
        profile = getattr(order.user, 'profile', None)
        head = [
            order.order_number,
            timezone.localtime(order.created_at).strftime('%d/%m/%Y %H:%M'),
            order.user.get_full_name() or order.user.username,
            profile.pesantren_name if profile else '',
        ]
        tail = [
            order.subtotal, order.discount, order.promo.code if order.promo_id else '',
            order.total, order.paid_amount, order.remaining_debt,
            order.get_payment_method_display(), order.get_status_display(),
        ]
        items = order.items.all()
        if not items:
            writer.writerow(head + ['', '', ''] + tail)
        for item in items:
            writer.writerow(head + [item.name, item.quantity, item.price] + tail)

    return response


@require_GET
@staff_required
def admin_stats(request):
    now = timezone.now()
    first_day = timezone.localtime(now).replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    not_cancelled = Order.objects.exclude(status=Order.CANCELLED)
    total_revenue = not_cancelled.aggregate(total=Sum('total'))['total'] or 0
    monthly_revenue = not_cancelled.filter(created_at__gte=first_day).aggregate(total=Sum('total'))['total'] or 0

    low_stock = Product.objects.filter(
        Q(stock__lte=settings.LOW_STOCK_THRESHOLD) | Q(stock__lte=F('min_stock'))
    ).count()
    upcoming_diklat = (DiklatDate.objects.filter(start_date__gte=now, diklat__is_active=True)
                       .values('diklat').distinct().count())

    return JsonResponse({
        'total_orders': Order.objects.count(),
        'pending_orders': Order.objects.filter(status=Order.PENDING_PAYMENT).count(),
        'total_revenue': total_revenue,
        'monthly_revenue': monthly_revenue,
        'total_products': Product.objects.count(),
        'low_stock_products': low_stock,
        'total_partners': Partner.objects.filter(is_active=True).count(),
        'upcoming_diklat': upcoming_diklat,
    })
