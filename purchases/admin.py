# purchases/admin.py
from django.contrib import admin
from .models import OrderDetail, Purchase

class OrderDetailInline(admin.TabularInline):
    model = OrderDetail
    extra = 0
    readonly_fields = ("product_name", "quantity", "unit_price", "total_price", "selected_color")

@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ("id", "buyer_email", "amount", "currency", "status", "order_status",
                    "external_reference", "created_at")
    list_filter = ("status", "order_status", "payment_provider")
    search_fields = ("buyer_email", "buyer_name", "external_reference", "wompi_transaction_id")
    readonly_fields = ("amount", "external_reference", "preference_id", "wompi_transaction_id")
    inlines = [OrderDetailInline]

@admin.register(OrderDetail)
class OrderDetailAdmin(admin.ModelAdmin):
    list_display = ("purchase", "product_name", "quantity", "unit_price", "total_price")
    search_fields = ("product_name", "purchase__buyer_email")
    list_select_related = ('purchase',)
