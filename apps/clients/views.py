from django.db.models import ProtectedError, Q
from rest_framework import viewsets, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.accounts.permissions import IsLedgerAdminOrReadOnly
from .models import Client
from .serializers import ClientSerializer


class ClientPagination(PageNumberPagination):
    """Custom pagination for clients."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ClientViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Client CRUD operations.

    list: Get all clients (optional ?search= on names and document)
    create: Register a client
    retrieve: Get a specific client
    update: Update a client
    destroy: Delete a client (admin only)
    """

    queryset = Client.objects.all()
    serializer_class = ClientSerializer
    permission_classes = [IsLedgerAdminOrReadOnly]
    pagination_class = ClientPagination

    def get_permissions(self):
        """Sellers may register clients; edits and deletes are admin only."""
        if self.action == 'create':
            return [IsAuthenticated()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = super().get_queryset()
        search = self.request.query_params.get('search', '').strip()
        if search:
            queryset = queryset.filter(
                Q(first_name__icontains=search) |
                Q(last_name__icontains=search) |
                Q(company_name__icontains=search) |
                Q(document_number__icontains=search)
            )
        return queryset

    def destroy(self, request, *args, **kwargs):
        """Delete a client that has no credits attached."""
        client = self.get_object()
        try:
            client.delete()
        except ProtectedError:
            return Response(
                {'error': f'Client {client.pk} has credits and cannot be deleted'},
                status=status.HTTP_409_CONFLICT
            )
        return Response(status=status.HTTP_204_NO_CONTENT)
