from django.contrib import admin
from .models import LoyaltyConfig, PointTransaction


@admin.register(LoyaltyConfig)
class LoyaltyConfigAdmin(admin.ModelAdmin):
    list_display = ['shop', 'is_enabled', 'points_per_unit', 'redemption_value', 'points_expiry_days', 'updated_at']
    list_filter = ['is_enabled']
    search_fields = ['shop__name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(PointTransaction)
class PointTransactionAdmin(admin.ModelAdmin):
    list_display = ['customer', 'shop', 'entry_type', 'points', 'balance_after', 'sale', 'is_expired', 'created_at']
    list_filter = ['entry_type', 'is_expired', 'created_at']
    search_fields = ['customer__mobile_number', 'customer__first_name', 'description']
    readonly_fields = ['created_at']

    def has_add_permission(self, request):
        return False  # Entries are created by the points ledger

    def has_change_permission(self, request, obj=None):
        return False  # Ledger entries are immutable

    def has_delete_permission(self, request, obj=None):
        return False
