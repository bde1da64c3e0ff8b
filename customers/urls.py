# customers/urls.py
from django.urls import path
from . import views

app_name = "customers"

urlpatterns = [
    path('clients', views.client_collection, name='clients'),
    path('clients/<int:client_id>', views.client_detail, name='client_detail'),
    path('quotes', views.quote_collection, name='quotes'),
    path('quotes/<int:quote_id>', views.quote_detail, name='quote_detail'),
]
