# backoffice/urls.py
from django.contrib import admin
from django.urls import include, path
from . import views

urlpatterns = [
    path('', views.root, name='root'),
    path('health', views.health, name='health'),
    path('auth/token', views.obtain_token, name='obtain_token'),
    path('admin/', admin.site.urls),
    path('', include('catalog.urls')),
    path('', include('customers.urls')),
    path('', include('purchases.urls')),
]
