from rest_framework import status, viewsets, mixins
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.audit.models import AuditAction
from apps.audit.services import audited
from apps.common.filters import apply_date_range, apply_search
from apps.common.views import AllRecordsMixin, UUID_LOOKUP_REGEX
from .models import Employee
from .serializers import EmployeeSerializer, EmployeeUpdateSerializer, EmployeeFilterSerializer
from .services import create_employee, get_employee, update_employee, delete_employee


class EmployeeViewSet(AllRecordsMixin,
                      mixins.ListModelMixin,
                      mixins.RetrieveModelMixin,
                      viewsets.GenericViewSet):
    """
    ViewSet for employee records.

    list: Paginated employees (search, role, from/to)
    all: Unpaginated, same filters
    create / retrieve / partial_update / destroy (soft delete)
    """

    queryset = Employee.objects.alive()
    serializer_class = EmployeeSerializer
    lookup_value_regex = UUID_LOOKUP_REGEX
    http_method_names = ['get', 'post', 'patch', 'delete']

    def get_queryset(self):
        queryset = super().get_queryset()

        filter_serializer = EmployeeFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = apply_search(queryset, params.get('search'), ['name', 'email', 'phone'])
        queryset = apply_date_range(queryset, params)
        if params.get('role'):
            queryset = queryset.filter(role=params['role'])
        return queryset

    def get_object(self):
        return get_employee(employee_id=self.kwargs['pk'])

    @audited('Employee', AuditAction.CREATE)
    def create(self, request):
        serializer = EmployeeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        employee = create_employee(**serializer.validated_data)
        return Response(EmployeeSerializer(employee).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=EmployeeUpdateSerializer, responses={200: EmployeeSerializer})
    @audited('Employee', AuditAction.UPDATE)
    def partial_update(self, request, pk=None):
        serializer = EmployeeUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        employee = update_employee(employee_id=pk, **serializer.validated_data)
        return Response(EmployeeSerializer(employee).data)

    @audited('Employee', AuditAction.DELETE)
    def destroy(self, request, pk=None):
        delete_employee(employee_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
