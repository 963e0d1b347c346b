from django.contrib import admin
from .models import Sale, SaleItem


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    readonly_fields = ['product', 'quantity', 'price_at_sale', 'subtotal', 'created_at']
    can_delete = False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['id', 'shop', 'customer', 'total_amount', 'points_earned', 'points_redeemed', 'status', 'transaction_date']
    list_filter = ['status', 'shop', 'transaction_date']
    search_fields = ['customer__mobile_number', 'notes']
    inlines = [SaleItemInline]
    readonly_fields = [
        'subtotal_amount', 'discount_amount', 'total_amount', 'points_earned', 'points_redeemed',
        'transaction_date', 'created_at', 'updated_at',
    ]

    def has_add_permission(self, request):
        return False  # Sales are recorded by the sale coordinator
