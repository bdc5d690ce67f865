from django.db.models import Prefetch
from rest_framework import status, viewsets, mixins
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.audit.models import AuditAction
from apps.audit.services import audited, client_ip, record_audit
from apps.common.filters import apply_date_range, apply_search, DateRangeFilterSerializer
from apps.common.views import AllRecordsMixin, UUID_LOOKUP_REGEX
from .models import Client, Prepaid, PrepaidStatus
from .serializers import (
    ClientSerializer,
    ClientWriteSerializer,
    PrepaidSerializer,
    PrepaidInputSerializer,
    PrepaidFilterSerializer,
    PrepaidStatusQuerySerializer,
    ClientPrepaidTotalSerializer,
)
from .services import (
    create_client,
    get_client,
    update_client,
    delete_client,
    create_prepaid,
    get_prepaid,
    client_prepaids,
    total_pending_for_client,
)


class ClientViewSet(AllRecordsMixin,
                    mixins.ListModelMixin,
                    mixins.RetrieveModelMixin,
                    viewsets.GenericViewSet):
    """
    ViewSet for clients.

    list: Paginated clients (search by name/email/phone/cuit, from/to)
    all: Unpaginated, same filters
    create / retrieve / partial_update / destroy (soft delete, cascades to prepaids)
    prepaids / pending_prepaids: The client's credit records
    """

    queryset = Client.objects.alive()
    serializer_class = ClientSerializer
    lookup_value_regex = UUID_LOOKUP_REGEX
    http_method_names = ['get', 'post', 'patch', 'delete']

    def get_queryset(self):
        queryset = super().get_queryset().prefetch_related(
            Prefetch(
                'prepaids',
                queryset=Prepaid.objects.alive().order_by('created_at'),
                to_attr='alive_prepaids',
            )
        )

        filter_serializer = DateRangeFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = apply_search(queryset, params.get('search'), ['full_name', 'email', 'phone', 'cuit'])
        return apply_date_range(queryset, params)

    def get_object(self):
        return get_client(client_id=self.kwargs['pk'])

    @extend_schema(request=ClientWriteSerializer, responses={201: ClientSerializer})
    @audited('Client', AuditAction.CREATE)
    def create(self, request):
        serializer = ClientWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        client = create_client(**serializer.validated_data)
        return Response(ClientSerializer(client).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ClientWriteSerializer, responses={200: ClientSerializer})
    @audited('Client', AuditAction.UPDATE)
    def partial_update(self, request, pk=None):
        serializer = ClientWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        client = update_client(client_id=pk, **serializer.validated_data)
        return Response(ClientSerializer(client).data)

    @audited('Client', AuditAction.DELETE)
    def destroy(self, request, pk=None):
        delete_client(client_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: PrepaidSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def prepaids(self, request, pk=None):
        """
        All non-deleted prepaids of the client.

        GET /api/clients/{id}/prepaids/
        """
        queryset = client_prepaids(client_id=pk)
        return Response(PrepaidSerializer(queryset, many=True).data)

    @extend_schema(responses={200: PrepaidSerializer(many=True)})
    @action(detail=True, methods=['get'], url_path='prepaids/pending')
    def pending_prepaids(self, request, pk=None):
        """
        Spendable prepaids of the client.

        GET /api/clients/{id}/prepaids/pending/
        """
        queryset = client_prepaids(client_id=pk, status=PrepaidStatus.PENDING)
        return Response(PrepaidSerializer(queryset, many=True).data)


CLIENT_ID_PATTERN = r'client/(?P<client_id>[0-9a-fA-F-]{36})'


class PrepaidViewSet(AllRecordsMixin,
                     mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     viewsets.GenericViewSet):
    """
    ViewSet for prepaid credit records.

    Prepaids are created per client and change state only through sales,
    so there is no update or delete here.
    """

    queryset = Prepaid.objects.alive().select_related('client')
    serializer_class = PrepaidSerializer
    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_queryset(self):
        queryset = super().get_queryset().order_by('-created_at')

        filter_serializer = PrepaidFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = apply_search(queryset, params.get('search'), ['client__full_name', 'client__email'])
        queryset = apply_date_range(queryset, params)
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        return queryset

    def get_object(self):
        return get_prepaid(prepaid_id=self.kwargs['pk'])

    @extend_schema(
        parameters=[OpenApiParameter('status', str, required=True, enum=PrepaidStatus.values)],
        responses={200: PrepaidSerializer(many=True)},
    )
    @action(detail=False, methods=['get'], url_path='status')
    def by_status(self, request):
        """
        Prepaids in one status. ``status`` is required.

        GET /api/prepaids/status/?status=PENDING
        """
        query = PrepaidStatusQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        queryset = Prepaid.objects.alive().filter(status=query.validated_data['status']).order_by('-created_at')
        return Response(PrepaidSerializer(queryset, many=True).data)

    @extend_schema(
        methods=['POST'],
        request=PrepaidInputSerializer,
        responses={201: PrepaidSerializer},
    )
    @extend_schema(methods=['GET'], responses={200: PrepaidSerializer(many=True)})
    @action(detail=False, methods=['get', 'post'], url_path=CLIENT_ID_PATTERN)
    def for_client(self, request, client_id=None):
        """
        List (GET) or add (POST) prepaids of one client.

        /api/prepaids/client/{client_id}/
        """
        if request.method == 'GET':
            queryset = client_prepaids(client_id=client_id)
            return Response(PrepaidSerializer(queryset, many=True).data)

        serializer = PrepaidInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        prepaid = create_prepaid(client_id=client_id, **serializer.validated_data)

        data = PrepaidSerializer(prepaid).data
        record_audit(
            entity='Prepaid',
            action=AuditAction.CREATE,
            entity_id=prepaid.id,
            actor=request.user,
            new_values=data,
            ip_address=client_ip(request),
        )
        return Response(data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: PrepaidSerializer(many=True)})
    @action(detail=False, methods=['get'], url_path=CLIENT_ID_PATTERN + '/pending')
    def pending_for_client(self, request, client_id=None):
        """
        GET /api/prepaids/client/{client_id}/pending/
        """
        queryset = client_prepaids(client_id=client_id, status=PrepaidStatus.PENDING)
        return Response(PrepaidSerializer(queryset, many=True).data)

    @extend_schema(responses={200: ClientPrepaidTotalSerializer})
    @action(detail=False, methods=['get'], url_path=CLIENT_ID_PATTERN + '/total')
    def total_for_client(self, request, client_id=None):
        """
        Pending balance of one client.

        GET /api/prepaids/client/{client_id}/total/
        """
        get_client(client_id=client_id)
        total = total_pending_for_client(client_id=client_id)
        return Response(ClientPrepaidTotalSerializer({'client_id': client_id, 'total_pending': total}).data)
