from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsLedgerAdmin
from apps.payments.serializers import PaymentSerializer
from apps.payments.services import (
    payments_for_credit,
    PaymentsServiceError,
)
from .serializers import (
    CreditSerializer,
    CreditDashboardSerializer,
    CreditCreateSerializer,
    CreditUpdateSerializer,
    CreditFilterSerializer,
    PayCreditInputSerializer,
    BulkPaymentInputSerializer,
    BulkPaymentResultSerializer,
    DashboardCountsSerializer,
)
from .services import (
    create_credit,
    list_credits,
    get_credit,
    update_credit,
    delete_credit,
    pay_credit,
    pay_credits_bulk,
    overdue_credits,
    dashboard_counts,
    credits_for_dashboard,
    # Exceptions
    CreditValidationError,
    CreditNotFoundError,
    ExceedsBalanceError,
    LedgerStorageError,
)


def ledger_error_response(error):
    """Translate a ledger or payment domain error into an HTTP response."""
    if isinstance(error, ExceedsBalanceError):
        return Response(
            {
                'error': str(error),
                'credit_id': error.credit_id,
                'balance': f'{error.balance:.2f}',
            },
            status=status.HTTP_400_BAD_REQUEST
        )
    if isinstance(error, CreditNotFoundError):
        return Response({'error': str(error)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(error, LedgerStorageError):
        return Response({'error': str(error)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response({'error': str(error)}, status=status.HTTP_400_BAD_REQUEST)


class CreditViewSet(viewsets.ViewSet):
    """
    ViewSet for the credit ledger.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get credits (?status=pending|paid|overdue, ?overdue=true)
    create: Register a credit
    retrieve: Get a credit with its derived status
    update / partial_update: Administrative correction (admin only)
    destroy: Delete a credit (admin only)
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        """Rewrites and deletes are admin only."""
        if self.action in ['update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), IsLedgerAdmin()]
        return [IsAuthenticated()]

    @extend_schema(
        parameters=[CreditFilterSerializer],
        responses={200: CreditSerializer(many=True)},
        tags=['credits'],
    )
    def list(self, request):
        filter_serializer = CreditFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        credits = list_credits(
            status=params.get('status'),
            overdue=params.get('overdue', False),
        )
        return Response(CreditSerializer(credits, many=True).data)

    @extend_schema(
        request=CreditCreateSerializer,
        responses={201: CreditSerializer},
        tags=['credits'],
    )
    def create(self, request):
        serializer = CreditCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            credit = create_credit(**serializer.validated_data)
        except CreditValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CreditSerializer(credit).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: CreditSerializer}, tags=['credits'])
    def retrieve(self, request, pk=None):
        try:
            credit = get_credit(int(pk))
        except CreditNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(CreditSerializer(credit).data)

    @extend_schema(
        request=CreditUpdateSerializer,
        responses={200: CreditSerializer},
        tags=['credits'],
    )
    def update(self, request, pk=None):
        serializer = CreditUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            credit = update_credit(credit_id=int(pk), data=serializer.validated_data)
        except (CreditNotFoundError, CreditValidationError) as e:
            return ledger_error_response(e)

        return Response(CreditSerializer(credit).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(responses={204: None}, tags=['credits'])
    def destroy(self, request, pk=None):
        try:
            delete_credit(credit_id=int(pk))
        except CreditNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        methods=['GET'],
        responses={200: PaymentSerializer(many=True)},
        description="Payment history of a credit, oldest first.",
        tags=['credits'],
    )
    @extend_schema(
        methods=['POST'],
        request=PayCreditInputSerializer,
        responses={200: CreditSerializer},
        description="Apply one payment to the credit.",
        tags=['credits'],
    )
    @action(detail=True, methods=['get', 'post'])
    def payments(self, request, pk=None):
        """
        GET  /api/credits/{id}/payments/ - payment history
        POST /api/credits/{id}/payments/ - single payment
        Body: {"amount": 50, "payment_method_id": 1, "reference": "optional"}
        """
        credit_id = int(pk)

        if request.method == 'GET':
            try:
                get_credit(credit_id)
            except CreditNotFoundError as e:
                return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
            return Response(PaymentSerializer(payments_for_credit(credit_id), many=True).data)

        serializer = PayCreditInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        reference = data.get('reference') or data.get('notes')
        user = data['user'] if 'user' in data else request.user

        try:
            credit = pay_credit(
                credit_id=credit_id,
                amount=data['amount'],
                reference=reference,
                payment_method_id=data.get('payment_method_id'),
                user=user,
            )
        except PaymentsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except (CreditValidationError, CreditNotFoundError,
                ExceedsBalanceError, LedgerStorageError) as e:
            return ledger_error_response(e)

        return Response(CreditSerializer(credit).data)

    @extend_schema(
        request=BulkPaymentInputSerializer,
        responses={200: BulkPaymentResultSerializer},
        description="Apply payments to several credits as one all-or-nothing unit.",
        tags=['credits'],
    )
    @action(detail=False, methods=['post'], url_path='payments/bulk')
    def bulk_payments(self, request):
        """
        POST /api/credits/payments/bulk/
        Body: {"items": [{"credit_id": 1, "amount": 20}], "payment_method_id": 1}
        """
        serializer = BulkPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = data['user'] if 'user' in data else request.user

        try:
            result = pay_credits_bulk(
                items=data['items'],
                payment_method_id=data.get('payment_method_id'),
                user=user,
                notes=data.get('notes'),
            )
        except PaymentsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except (CreditValidationError, CreditNotFoundError,
                ExceedsBalanceError, LedgerStorageError) as e:
            return ledger_error_response(e)

        return Response(BulkPaymentResultSerializer(result).data)

    @extend_schema(responses={200: CreditSerializer(many=True)}, tags=['credits'])
    @action(detail=False, methods=['get'])
    def overdue(self, request):
        """Credits past due with a remaining balance."""
        return Response(CreditSerializer(overdue_credits(), many=True).data)

    @extend_schema(responses={200: DashboardCountsSerializer}, tags=['credits'])
    @action(detail=False, methods=['get'])
    def dashboard(self, request):
        """Number of credits per derived status."""
        return Response(DashboardCountsSerializer(dashboard_counts()).data)

    @extend_schema(responses={200: CreditDashboardSerializer(many=True)}, tags=['credits'])
    @action(detail=False, methods=['get'], url_path='credits-dashboard')
    def credits_dashboard(self, request):
        """Lightweight credit list, newest first."""
        return Response(CreditDashboardSerializer(credits_for_dashboard(), many=True).data)
