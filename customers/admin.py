# customers/admin.py
from django.contrib import admin
from .models import Client, Quote

@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "country", "company_name", "created_at")
    search_fields = ("name", "email", "company_name")
    list_filter = ("country",)

@admin.register(Quote)
class QuoteAdmin(admin.ModelAdmin):
    list_display = ("id", "client", "get_service_count", "total_amount", "created_at")
    search_fields = ("client__name", "client__email")
    list_select_related = ('client',)

    @admin.display(description='Services')
    def get_service_count(self, obj):
        return len(obj.services or [])
