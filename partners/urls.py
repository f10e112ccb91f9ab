from django.urls import path
from . import views

app_name = 'partners'

urlpatterns = [
    path('', views.partner_collection, name='collection'),
    path('<int:partner_id>/', views.partner_detail, name='detail'),
]
