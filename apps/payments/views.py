import datetime

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsLedgerAdminOrReadOnly
from .serializers import (
    PaymentSerializer,
    PaymentCreateSerializer,
    PaymentMethodSerializer,
    PaymentMethodUpdateSerializer,
    DateRangeSerializer,
    RecentPaymentsQuerySerializer,
    ConciliationRowSerializer,
    PaymentStatusSummarySerializer,
    RecentCreditPaymentsPageSerializer,
)
from .services import (
    list_payments,
    get_payment,
    payments_by_method,
    payments_by_date_range,
    conciliation_report,
    payment_status_summary,
    recent_credit_payments,
    create_standalone_payment,
    create_payment_method,
    list_payment_methods,
    get_payment_method,
    update_payment_method,
    # Exceptions
    PaymentsServiceError,
    PaymentNotFoundError,
    PaymentMethodNotFoundError,
)


class PaymentPagination(PageNumberPagination):
    """Custom pagination for payments."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class PaymentViewSet(viewsets.ViewSet):
    """
    ViewSet for payments and payment reports.

    Credit payments are created through /api/credits/; this endpoint only
    records sale and standalone payments.

    list: Get all payments, newest first (paginated)
    create: Record a sale or standalone payment
    retrieve: Get a specific payment
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    @extend_schema(responses={200: PaymentSerializer(many=True)}, tags=['payments'])
    def list(self, request):
        paginator = PaymentPagination()
        page = paginator.paginate_queryset(list_payments(), request, view=self)
        serializer = PaymentSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    @extend_schema(
        request=PaymentCreateSerializer,
        responses={201: PaymentSerializer},
        tags=['payments'],
    )
    def create(self, request):
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = create_standalone_payment(user=request.user, **serializer.validated_data)
        except PaymentsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: PaymentSerializer}, tags=['payments'])
    def retrieve(self, request, pk=None):
        try:
            payment = get_payment(int(pk))
        except PaymentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(PaymentSerializer(payment).data)

    @extend_schema(
        parameters=[RecentPaymentsQuerySerializer],
        responses={200: RecentCreditPaymentsPageSerializer},
        tags=['payments'],
    )
    @action(detail=False, methods=['get'], url_path='credit/recent')
    def recent_credit(self, request):
        """
        Latest credit payments with client name.

        GET /api/payments/credit/recent/?page=1&page_size=10
        """
        query = RecentPaymentsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = recent_credit_payments(**query.validated_data)
        return Response(RecentCreditPaymentsPageSerializer(result).data)

    @extend_schema(responses={200: PaymentStatusSummarySerializer(many=True)}, tags=['payments'])
    @action(detail=False, methods=['get'], url_path='status')
    def status_summary(self, request):
        """Count and total per payment status."""
        return Response(PaymentStatusSummarySerializer(payment_status_summary(), many=True).data)

    @extend_schema(responses={200: ConciliationRowSerializer(many=True)}, tags=['payments'])
    @action(detail=False, methods=['get'], url_path=r'conciliation/(?P<day>\d{4}-\d{2}-\d{2})')
    def conciliation(self, request, day=None):
        """
        Totals per payment method for one day.

        GET /api/payments/conciliation/2024-05-31/
        """
        try:
            report_day = datetime.date.fromisoformat(day)
        except ValueError:
            return Response({'error': f'Invalid date: {day}'}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ConciliationRowSerializer(conciliation_report(report_day), many=True).data)

    @extend_schema(responses={200: PaymentSerializer(many=True)}, tags=['payments'])
    @action(detail=False, methods=['get'], url_path=r'by-method/(?P<method_id>\d+)')
    def by_method(self, request, method_id=None):
        return Response(PaymentSerializer(payments_by_method(int(method_id)), many=True).data)

    @extend_schema(
        parameters=[DateRangeSerializer],
        responses={200: PaymentSerializer(many=True)},
        tags=['payments'],
    )
    @action(detail=False, methods=['get'], url_path='by-date-range')
    def by_date_range(self, request):
        """GET /api/payments/by-date-range/?start_date=2024-05-01&end_date=2024-05-31"""
        query = DateRangeSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        payments = payments_by_date_range(
            query.validated_data['start_date'],
            query.validated_data['end_date'],
        )
        return Response(PaymentSerializer(payments, many=True).data)


class PaymentMethodViewSet(viewsets.ViewSet):
    """
    ViewSet for payment methods.

    Any authenticated user can read; only admins can create or edit.
    """

    permission_classes = [IsLedgerAdminOrReadOnly]
    lookup_value_regex = r'\d+'

    @extend_schema(responses={200: PaymentMethodSerializer(many=True)}, tags=['payment-methods'])
    def list(self, request):
        active_only = request.query_params.get('active', '').lower() in ('1', 'true')
        methods = list_payment_methods(active_only=active_only)
        return Response(PaymentMethodSerializer(methods, many=True).data)

    @extend_schema(
        request=PaymentMethodSerializer,
        responses={201: PaymentMethodSerializer},
        tags=['payment-methods'],
    )
    def create(self, request):
        serializer = PaymentMethodSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            method = create_payment_method(**serializer.validated_data)
        except PaymentsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PaymentMethodSerializer(method).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: PaymentMethodSerializer}, tags=['payment-methods'])
    def retrieve(self, request, pk=None):
        try:
            method = get_payment_method(int(pk))
        except PaymentMethodNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(PaymentMethodSerializer(method).data)

    @extend_schema(
        request=PaymentMethodUpdateSerializer,
        responses={200: PaymentMethodSerializer},
        tags=['payment-methods'],
    )
    def update(self, request, pk=None):
        serializer = PaymentMethodUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            method = update_payment_method(
                payment_method_id=int(pk),
                data=serializer.validated_data,
            )
        except PaymentMethodNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PaymentsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PaymentMethodSerializer(method).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)
