# core/urls.py
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from orders import views as order_views

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('products.urls', namespace='products')),
    path('api/promos/', include('promos.urls', namespace='promos')),
    path('api/orders/', include('orders.urls', namespace='orders')),
    path('api/debts/', include('debts.urls', namespace='debts')),
    path('api/diklat/', include('diklat.urls', namespace='diklat')),
    path('api/partners/', include('partners.urls', namespace='partners')),
    path('api/agenda/', include('agenda.urls', namespace='agenda')),
    path('api/', include('accounts.urls', namespace='accounts')),
    path('api/admin/stats/', order_views.admin_stats, name='admin_stats'),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
