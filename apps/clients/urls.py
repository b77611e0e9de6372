from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'clients'

router = DefaultRouter()
router.register(r'', views.ClientViewSet, basename='client')

urlpatterns = [
    # GET    /api/clients/        - List clients
    # POST   /api/clients/        - Create client
    # GET    /api/clients/{id}/   - Get client
    # PUT    /api/clients/{id}/   - Update client (admin)
    # DELETE /api/clients/{id}/   - Delete client (admin)
    path('', include(router.urls)),
]
