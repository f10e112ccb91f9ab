from django.urls import path
from . import views

app_name = 'promos'

urlpatterns = [
    path('', views.promo_collection, name='collection'),
    path('validate/', views.validate_promo, name='validate'),
    path('<uuid:promo_id>/', views.promo_detail, name='detail'),
]
