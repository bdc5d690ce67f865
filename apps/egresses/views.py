from rest_framework import status, viewsets, mixins
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.audit.models import AuditAction
from apps.audit.services import audited
from apps.common.filters import apply_date_range, apply_search, DateRangeFilterSerializer
from apps.common.views import AllRecordsMixin, UUID_LOOKUP_REGEX
from .models import Egress
from .serializers import (
    EgressSerializer,
    EgressUpdateSerializer,
    EgressFilterSerializer,
    EgressStatisticsSerializer,
)
from .services import (
    create_egress,
    get_egress,
    update_egress,
    delete_egress,
    complete_egress,
    cancel_egress,
    get_statistics,
)


class EgressViewSet(AllRecordsMixin,
                    mixins.ListModelMixin,
                    mixins.RetrieveModelMixin,
                    viewsets.GenericViewSet):
    """
    ViewSet for cash egresses.

    list / all: search, status, type, currency, from/to
    create / retrieve / partial_update / destroy (PENDING only)
    complete / cancel: Terminal transitions
    statistics: Completed totals per currency
    """

    queryset = Egress.objects.alive()
    serializer_class = EgressSerializer
    lookup_value_regex = UUID_LOOKUP_REGEX
    http_method_names = ['get', 'post', 'patch', 'delete']

    def get_queryset(self):
        queryset = super().get_queryset()

        filter_serializer = EgressFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = apply_search(queryset, params.get('search'), ['concept', 'notes', 'authorized_by'])
        queryset = apply_date_range(queryset, params)
        for field in ('status', 'type', 'currency'):
            if params.get(field):
                queryset = queryset.filter(**{field: params[field]})
        return queryset

    def get_object(self):
        return get_egress(egress_id=self.kwargs['pk'])

    @audited('Egress', AuditAction.CREATE)
    def create(self, request):
        serializer = EgressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        egress = create_egress(actor=request.user, **serializer.validated_data)
        return Response(EgressSerializer(egress).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=EgressUpdateSerializer, responses={200: EgressSerializer})
    @audited('Egress', AuditAction.UPDATE)
    def partial_update(self, request, pk=None):
        serializer = EgressUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        egress = update_egress(egress_id=pk, actor=request.user, **serializer.validated_data)
        return Response(EgressSerializer(egress).data)

    @audited('Egress', AuditAction.DELETE)
    def destroy(self, request, pk=None):
        delete_egress(egress_id=pk, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: EgressSerializer})
    @action(detail=True, methods=['patch'])
    @audited('Egress', AuditAction.UPDATE)
    def complete(self, request, pk=None):
        """
        PATCH /api/egresses/{id}/complete/
        """
        egress = complete_egress(egress_id=pk, actor=request.user)
        return Response(EgressSerializer(egress).data)

    @extend_schema(request=None, responses={200: EgressSerializer})
    @action(detail=True, methods=['patch'])
    @audited('Egress', AuditAction.UPDATE)
    def cancel(self, request, pk=None):
        """
        PATCH /api/egresses/{id}/cancel/
        """
        egress = cancel_egress(egress_id=pk, actor=request.user)
        return Response(EgressSerializer(egress).data)

    @extend_schema(responses={200: EgressStatisticsSerializer})
    @action(detail=False, methods=['get'])
    def statistics(self, request):
        """
        Completed totals per currency and counts per status.

        GET /api/egresses/statistics/?from=2025-09-01&to=2025-09-30
        """
        query = DateRangeFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        stats = get_statistics(
            date_from=query.validated_data.get('from'),
            date_to=query.validated_data.get('to'),
        )
        return Response(EgressStatisticsSerializer(stats).data)
