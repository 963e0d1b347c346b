from django.urls import path
from . import views

app_name = 'loyalty'

urlpatterns = [
    path('shops/<int:shop_id>/loyalty/config/', views.LoyaltyConfigView.as_view(), name='loyalty-config'),
    path('shops/<int:shop_id>/loyalty/preview-points/', views.preview_points, name='preview-points'),
    path('shops/<int:shop_id>/loyalty/recompute-tiers/', views.recompute_tiers, name='recompute-tiers'),
    path('shops/<int:shop_id>/customers/<int:customer_id>/loyalty/', views.CustomerLoyaltyView.as_view(), name='customer-loyalty'),
    path('shops/<int:shop_id>/customers/<int:customer_id>/points/', views.adjust_customer_points, name='adjust-points'),
]
