from rest_framework import status, viewsets, mixins
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.audit.models import AuditAction
from apps.audit.services import audited
from apps.common.exceptions import InvalidInputError
from apps.common.filters import apply_date_range, apply_search
from apps.common.views import AllRecordsMixin, UUID_LOOKUP_REGEX
from .models import Product, ProductCategory
from .serializers import (
    ProductSerializer,
    ProductUpdateSerializer,
    StockAdjustmentSerializer,
    ProductFilterSerializer,
)
from .services import (
    ADD,
    SUBTRACT,
    adjust_stock,
    create_product,
    get_product,
    update_product,
    delete_product,
)


class ProductViewSet(AllRecordsMixin,
                     mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     viewsets.GenericViewSet):
    """
    ViewSet for the product catalogue and its stock.

    list: Paginated products (search, category, status, from/to)
    all: Unpaginated, same filters
    by_category: Products of one category
    create / retrieve / partial_update / destroy (soft delete)
    add_stock / subtract_stock: Stock ledger movements
    """

    queryset = Product.objects.alive()
    serializer_class = ProductSerializer
    lookup_value_regex = UUID_LOOKUP_REGEX
    http_method_names = ['get', 'post', 'patch', 'delete']

    def get_queryset(self):
        queryset = super().get_queryset()

        filter_serializer = ProductFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = apply_search(queryset, params.get('search'), ['name', 'barcode', 'description'])
        queryset = apply_date_range(queryset, params)
        if params.get('category'):
            queryset = queryset.filter(category=params['category'])
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        return queryset

    def get_object(self):
        return get_product(product_id=self.kwargs['pk'])

    @audited('Product', AuditAction.CREATE)
    def create(self, request):
        serializer = ProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = create_product(**serializer.validated_data)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ProductUpdateSerializer, responses={200: ProductSerializer})
    @audited('Product', AuditAction.UPDATE)
    def partial_update(self, request, pk=None):
        serializer = ProductUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        product = update_product(product_id=pk, **serializer.validated_data)
        return Response(ProductSerializer(product).data)

    @audited('Product', AuditAction.DELETE)
    def destroy(self, request, pk=None):
        delete_product(product_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'], url_path=r'category/(?P<category>[\w-]+)')
    def by_category(self, request, category=None):
        """
        Products in one category.

        GET /api/products/category/{category}/
        """
        if category not in ProductCategory.values:
            raise InvalidInputError(f"Unknown category: {category}")
        queryset = self.get_queryset().filter(category=category)
        return Response(ProductSerializer(queryset, many=True).data)

    @extend_schema(request=StockAdjustmentSerializer, responses={200: ProductSerializer})
    @action(detail=True, methods=['patch'], url_path='stock/add')
    @audited('Product', AuditAction.UPDATE_STOCK)
    def add_stock(self, request, pk=None):
        """
        Add units to stock.

        PATCH /api/products/{id}/stock/add/
        Body: {"quantity": 5}
        """
        return self._adjust(request, pk, ADD)

    @extend_schema(request=StockAdjustmentSerializer, responses={200: ProductSerializer})
    @action(detail=True, methods=['patch'], url_path='stock/subtract')
    @audited('Product', AuditAction.UPDATE_STOCK)
    def subtract_stock(self, request, pk=None):
        """
        Remove units from stock.

        PATCH /api/products/{id}/stock/subtract/
        Body: {"quantity": 5}
        """
        return self._adjust(request, pk, SUBTRACT)

    def _adjust(self, request, pk, direction):
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = adjust_stock(
            product_id=pk,
            quantity=serializer.validated_data['quantity'],
            direction=direction,
        )
        return Response(ProductSerializer(product).data)
