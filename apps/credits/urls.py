from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'credits'

router = DefaultRouter()
router.register(r'', views.CreditViewSet, basename='credit')

urlpatterns = [
    # Credit ViewSet routes
    # GET    /api/credits/                    - List credits (?status=, ?overdue=true)
    # POST   /api/credits/                    - Create credit
    # GET    /api/credits/{id}/               - Get credit
    # PUT    /api/credits/{id}/               - Update credit (admin)
    # PATCH  /api/credits/{id}/               - Partial update (admin)
    # DELETE /api/credits/{id}/               - Delete credit (admin)

    # Ledger actions
    # GET    /api/credits/{id}/payments/      - Payment history
    # POST   /api/credits/{id}/payments/      - Single payment
    # POST   /api/credits/payments/bulk/      - Bulk payment
    # GET    /api/credits/overdue/            - Overdue credits
    # GET    /api/credits/dashboard/          - Counts per status
    # GET    /api/credits/credits-dashboard/  - Lightweight list
    path('', include(router.urls)),
]
