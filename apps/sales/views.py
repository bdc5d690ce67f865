from rest_framework import status, viewsets, mixins
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.audit.models import AuditAction
from apps.audit.services import audited
from apps.common.filters import apply_date_range, apply_search
from apps.common.views import AllRecordsMixin, UUID_LOOKUP_REGEX
from .models import Sale
from .serializers import (
    SaleSerializer,
    SaleCreateSerializer,
    SaleUpdateSerializer,
    SaleFilterSerializer,
    DailySalesQuerySerializer,
    DailySalesSerializer,
)
from .services import (
    create_sale,
    get_sale,
    get_daily_sales,
    update_sale,
    remove_sale,
)


class SaleViewSet(AllRecordsMixin,
                  mixins.ListModelMixin,
                  mixins.RetrieveModelMixin,
                  viewsets.GenericViewSet):
    """
    ViewSet for sales.

    list: Paginated sales (search, status, payment_method, client, from/to)
    all: Unpaginated, same filters
    create: Settle a sale (stock + prepaid)
    retrieve / partial_update (incl. cancellation) / destroy (soft delete, reverses)
    daily: One local day of sales with a summary
    """

    queryset = Sale.objects.alive().prefetch_related('items')
    serializer_class = SaleSerializer
    lookup_value_regex = UUID_LOOKUP_REGEX
    http_method_names = ['get', 'post', 'patch', 'delete']

    def get_queryset(self):
        queryset = super().get_queryset()

        filter_serializer = SaleFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = apply_search(
            queryset, params.get('search'), ['sale_number', 'customer_name', 'customer_email']
        )
        queryset = apply_date_range(queryset, params)
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('payment_method'):
            queryset = queryset.filter(payment_method=params['payment_method'])
        if params.get('client'):
            queryset = queryset.filter(client_id=params['client'])
        return queryset

    def get_object(self):
        return get_sale(sale_id=self.kwargs['pk'])

    @extend_schema(request=SaleCreateSerializer, responses={201: SaleSerializer})
    @audited('Sale', AuditAction.CREATE)
    def create(self, request):
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sale = create_sale(actor=request.user, **serializer.validated_data)
        return Response(SaleSerializer(get_sale(sale_id=sale.id)).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=SaleUpdateSerializer, responses={200: SaleSerializer})
    @audited('Sale', AuditAction.UPDATE)
    def partial_update(self, request, pk=None):
        serializer = SaleUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        update_sale(sale_id=pk, actor=request.user, **serializer.validated_data)
        return Response(SaleSerializer(get_sale(sale_id=pk)).data)

    @audited('Sale', AuditAction.DELETE)
    def destroy(self, request, pk=None):
        remove_sale(sale_id=pk, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        parameters=[
            OpenApiParameter('date', str, description='YYYY-MM-DD, defaults to today'),
            OpenApiParameter('timezone', str, description='IANA name, defaults to the business zone'),
        ],
        responses={200: DailySalesSerializer},
    )
    @action(detail=False, methods=['get'])
    def daily(self, request):
        """
        Sales of one local day.

        GET /api/sales/daily/?date=2025-09-01&timezone=America/Argentina/Buenos_Aires
        """
        query = DailySalesQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        report = get_daily_sales(
            date=query.validated_data.get('date') or None,
            timezone=query.validated_data.get('timezone') or None,
        )
        return Response(DailySalesSerializer(report).data)
