from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'invoices'

router = DefaultRouter()
router.register(r'', views.InvoiceViewSet, basename='invoice')

urlpatterns = [
    # Invoice ViewSet routes
    # GET    /api/invoices/                  - List invoices
    # POST   /api/invoices/                  - Create invoice
    # GET    /api/invoices/{id}/             - Get invoice with items
    # PUT    /api/invoices/{id}/             - Edit invoice
    # PATCH  /api/invoices/{id}/             - Edit invoice
    # DELETE /api/invoices/{id}/             - Soft delete

    # Custom invoice actions
    # GET    /api/invoices/next-number/      - Preview next invoice number
    # GET    /api/invoices/payment-summary/  - Cash / card totals
    # GET    /api/invoices/stats/            - Today / week / month sales (staff)
    # POST   /api/invoices/calculate/        - Line item GST breakup

    path('', include(router.urls)),
]
