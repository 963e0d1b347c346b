from django.urls import path
from . import views

app_name = 'sales'

urlpatterns = [
    path('shops/<int:shop_id>/sales/', views.SaleListCreateView.as_view(), name='sale-list'),
    path('shops/<int:shop_id>/sales/<int:sale_id>/', views.SaleDetailView.as_view(), name='sale-detail'),
    path('shops/<int:shop_id>/stats/', views.dashboard_stats, name='dashboard-stats'),
    path('shops/<int:shop_id>/stats/sales/', views.sales_analytics, name='sales-analytics'),
    path('shops/<int:shop_id>/stats/inventory/', views.inventory_stats, name='inventory-stats'),
]
