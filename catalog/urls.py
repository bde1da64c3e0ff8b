# catalog/urls.py
from django.urls import path
from . import views

app_name = "catalog"

urlpatterns = [
    path('products', views.product_collection, name='products'),
    path('products/<int:product_id>', views.product_detail, name='product_detail'),
    path('categories', views.category_collection, name='categories'),
    path('categories/<int:category_id>', views.category_detail, name='category_detail'),
]
