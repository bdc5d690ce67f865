from rest_framework import serializers

from apps.common.filters import DateRangeFilterSerializer
from .models import Employee, EmployeeRole


class EmployeeSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(max_length=255)

    class Meta:
        model = Employee
        fields = [
            'id',
            'name',
            'email',
            'role',
            'phone',
            'address',
            'start_date',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        validators = []


class EmployeeUpdateSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(max_length=255, required=False)

    class Meta:
        model = Employee
        fields = ['name', 'email', 'role', 'phone', 'address', 'start_date']
        extra_kwargs = {field: {'required': False} for field in fields}
        validators = []


class EmployeeFilterSerializer(DateRangeFilterSerializer):
    """
    Validate query parameters for employee listing.

    Query Parameters:
        search (str): Match against name, email or phone
        role (str): Filter by role
        from / to: created_at range
    """

    role = serializers.ChoiceField(choices=EmployeeRole.choices, required=False)
