from django.urls import path
from . import views

app_name = 'orders'

urlpatterns = [
    path('', views.order_collection, name='collection'),
    path('export/', views.export_orders, name='export'),
    path('<uuid:order_id>/', views.order_detail, name='detail'),
]
