from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'payments'

router = DefaultRouter()
router.register(r'payments', views.PaymentViewSet, basename='payment')
router.register(r'payment-methods', views.PaymentMethodViewSet, basename='payment-method')

urlpatterns = [
    # Payment ViewSet routes
    # GET    /api/payments/                          - List payments
    # POST   /api/payments/                          - Record sale/standalone payment
    # GET    /api/payments/{id}/                     - Get payment

    # Reports
    # GET    /api/payments/credit/recent/            - Paginated credit payments
    # GET    /api/payments/status/                   - Summary per status
    # GET    /api/payments/conciliation/{date}/      - Totals per method for a day
    # GET    /api/payments/by-method/{id}/           - Payments of one method
    # GET    /api/payments/by-date-range/            - ?start_date=&end_date=

    # Payment methods
    # GET    /api/payment-methods/                   - List (?active=true)
    # POST   /api/payment-methods/                   - Create (admin)
    # GET    /api/payment-methods/{id}/              - Get
    # PATCH  /api/payment-methods/{id}/              - Update (admin)
    path('', include(router.urls)),
]
