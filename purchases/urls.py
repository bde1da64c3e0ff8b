# purchases/urls.py
from django.urls import path
from . import views

app_name = "purchases"

urlpatterns = [
    path('payment/create', views.create_payment, name='create_payment'),
    path('payment/webhook', views.payment_webhook, name='payment_webhook'),
    path('purchases', views.purchase_list, name='purchases'),
    path('purchases/backup', views.purchase_backup, name='purchase_backup'),
    path('purchases/<int:purchase_id>', views.purchase_detail, name='purchase_detail'),
]
