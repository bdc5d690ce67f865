from rest_framework import status, serializers, viewsets, mixins
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema

from apps.audit.models import AuditAction
from apps.audit.services import audited, client_ip, record_audit
from apps.common.filters import apply_search
from apps.common.views import AllRecordsMixin, UUID_LOOKUP_REGEX
from .models import User, UserRole
from .permissions import IsAdminRole
from .serializers import (
    UserSerializer,
    UserRegistrationSerializer,
    AdminUserCreateSerializer,
    UserUpdateSerializer,
    UserLoginSerializer,
    UserFilterSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    get_user,
    update_user,
    delete_user,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


def _auth_payload(user, message):
    refresh = RefreshToken.for_user(user)
    return {
        'message': message,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Register a new user account (role 'user') and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data
    user = register_user(
        email=data['email'],
        password=data['password'],
        name=data.get('name', ''),
        role=UserRole.USER,
    )

    payload = _auth_payload(user, 'Registration successful')
    record_audit(
        entity='User',
        action=AuditAction.CREATE,
        entity_id=user.id,
        actor=user,
        new_values=payload['user'],
        ip_address=client_ip(request),
    )
    return Response(payload, status=status.HTTP_201_CREATED)


@extend_schema(
    request=AdminUserCreateSerializer,
    responses={
        201: AuthResponseSerializer,
        403: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Register a user with an explicit role. Admin only.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAdminRole])
def admin_register(request):
    """Register a user on behalf of an admin."""
    serializer = AdminUserCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = register_user(**serializer.validated_data)

    payload = _auth_payload(user, 'Registration successful')
    record_audit(
        entity='User',
        action=AuditAction.CREATE,
        entity_id=user.id,
        actor=request.user,
        new_values=payload['user'],
        ip_address=client_ip(request),
    )
    return Response(payload, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
    )

    return Response(_auth_payload(user, 'Login successful'))


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


class UserViewSet(AllRecordsMixin,
                  mixins.ListModelMixin,
                  mixins.RetrieveModelMixin,
                  viewsets.GenericViewSet):
    """
    User administration. Admin role required for every action.

    list: Paginated users (search by email/name, filter by role)
    all: Same filters, unpaginated
    create: Create a user with any role
    retrieve / partial_update / destroy: By id (destroy is a soft delete)
    """

    queryset = User.objects.filter(deleted_at__isnull=True)
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    lookup_value_regex = UUID_LOOKUP_REGEX
    http_method_names = ['get', 'post', 'patch', 'delete']

    def get_queryset(self):
        queryset = super().get_queryset()

        filter_serializer = UserFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = apply_search(queryset, params.get('search'), ['email', 'name'])
        if params.get('role'):
            queryset = queryset.filter(role=params['role'])
        return queryset

    def get_object(self):
        return get_user(user_id=self.kwargs['pk'])

    @extend_schema(request=AdminUserCreateSerializer, responses={201: UserSerializer})
    @audited('User', AuditAction.CREATE)
    def create(self, request):
        serializer = AdminUserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = register_user(**serializer.validated_data)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=UserUpdateSerializer, responses={200: UserSerializer})
    @audited('User', AuditAction.UPDATE)
    def partial_update(self, request, pk=None):
        serializer = UserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = update_user(user_id=pk, **serializer.validated_data)
        return Response(UserSerializer(user).data)

    @audited('User', AuditAction.DELETE)
    def destroy(self, request, pk=None):
        delete_user(user_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
