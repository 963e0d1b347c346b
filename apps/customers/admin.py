from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['id', 'full_name', 'mobile_number', 'shop', 'tier', 'available_points', 'total_points', 'total_spent', 'is_active']
    list_filter = ['tier', 'is_active', 'shop']
    search_fields = ['first_name', 'last_name', 'mobile_number', 'email']
    # Balances and tier are owned by the points ledger
    readonly_fields = ['total_points', 'available_points', 'tier', 'total_spent', 'created_at', 'updated_at']
