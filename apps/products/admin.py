from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'shop', 'price', 'stock_quantity', 'low_stock_threshold', 'is_active', 'updated_at']
    list_filter = ['is_active', 'shop']
    search_fields = ['name', 'description']
    readonly_fields = ['created_at', 'updated_at']
