from django.urls import path
from . import views

app_name = 'diklat'

urlpatterns = [
    path('', views.diklat_collection, name='collection'),
    path('registrations/', views.registration_list, name='registrations'),
    path('registrations/<int:registration_id>/', views.registration_detail, name='registration_detail'),
    path('<int:diklat_id>/', views.diklat_detail, name='detail'),
    path('<int:diklat_id>/register/', views.register, name='register'),
]
