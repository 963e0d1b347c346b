from django.urls import path
from . import views

app_name = 'customers'

urlpatterns = [
    path('shops/<int:shop_id>/customers/', views.CustomerListCreateView.as_view(), name='customer-list'),
    path('shops/<int:shop_id>/customers/mobile/<str:mobile>/', views.CustomerByMobileView.as_view(), name='customer-by-mobile'),
    path('shops/<int:shop_id>/customers/<int:customer_id>/', views.CustomerDetailView.as_view(), name='customer-detail'),
]
