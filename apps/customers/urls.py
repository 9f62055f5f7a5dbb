from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'customers'

router = DefaultRouter()
router.register(r'', views.CustomerViewSet, basename='customer')

urlpatterns = [
    # GET /api/customers/                - List customers (staff)
    # GET /api/customers/stats/          - Orders and spend per customer (staff)
    # GET /api/customers/{id}/           - Customer with invoices (staff)
    # GET /api/customers/{id}/invoices/  - Customer invoices (staff)
    path('', include(router.urls)),
]
