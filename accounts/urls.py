from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    path('addresses/', views.address_collection, name='addresses'),
    path('addresses/<int:address_id>/', views.address_detail, name='address_detail'),
    path('users/', views.user_collection, name='users'),
]
