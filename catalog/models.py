# catalog/models.py
from django.db import models

from .colors import parse_colors


class Category(models.Model):
    name        = models.CharField(max_length=120)
    description = models.TextField(null=True, blank=True)
    created_at  = models.DateTimeField(auto_now_add=True)
    updated_at  = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'Categories'
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class Product(models.Model):
    STATUS_AVAILABLE = 'available'
    STATUS_OUT_OF_STOCK = 'out-of-stock'
    STATUS_COMING_SOON = 'coming-soon'
    STATUS_CHOICES = [
        (STATUS_AVAILABLE, 'Available'),
        (STATUS_OUT_OF_STOCK, 'Out of stock'),
        (STATUS_COMING_SOON, 'Coming soon'),
    ]

    name           = models.CharField(max_length=200)
    description    = models.TextField()
    price          = models.DecimalField(max_digits=10, decimal_places=2)
    original_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    images         = models.JSONField(default=list)
    category       = models.ForeignKey(Category, on_delete=models.PROTECT,
                                       related_name='products')
    status         = models.CharField(max_length=20, choices=STATUS_CHOICES,
                                      default=STATUS_AVAILABLE)
    # JSON array text, or a single plain label on older rows
    colors         = models.TextField(null=True, blank=True)
    is_showcase    = models.BooleanField(default=False, db_index=True)
    showcase_image = models.CharField(max_length=500, null=True, blank=True)
    created_at     = models.DateTimeField(auto_now_add=True)
    updated_at     = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.status})"

    @property
    def color_list(self):
        return parse_colors(self.colors)

    @property
    def is_available(self):
        return self.status == self.STATUS_AVAILABLE
