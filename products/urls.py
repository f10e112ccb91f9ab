from django.urls import path
from . import views

app_name = 'products'

urlpatterns = [
    path('products/', views.product_collection, name='product_collection'),
    path('products/<int:product_id>/', views.product_detail, name='product_detail'),
    path('packages/', views.package_collection, name='package_collection'),
    path('packages/<int:package_id>/', views.package_detail, name='package_detail'),
    path('cart/', views.cart_detail, name='cart_detail'),
    path('cart/add/<str:kind>/<int:item_id>/', views.cart_add, name='cart_add'),
    path('cart/update/', views.cart_update, name='cart_update'),
    path('cart/remove/', views.cart_remove, name='cart_remove'),
]
