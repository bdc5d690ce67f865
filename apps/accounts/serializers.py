from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, UserRole


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'role',
            'avatar',
            'is_active',
            'created_at',
            'updated_at',
            'last_login',
        ]
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    """Public sign-up payload."""

    email = serializers.EmailField(max_length=255)
    name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'}
    )

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class AdminUserCreateSerializer(serializers.Serializer):
    """Admin-only creation, may pick the role."""

    email = serializers.EmailField(max_length=255)
    name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(choices=UserRole.choices, default=UserRole.USER)
    avatar = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class UserUpdateSerializer(serializers.Serializer):
    email = serializers.EmailField(max_length=255, required=False)
    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    password = serializers.CharField(
        write_only=True,
        required=False,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
    avatar = serializers.CharField(max_length=500, required=False, allow_blank=True)


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class UserFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for user listing.

    Query Parameters:
        search (str): Match against email or name
        role (str): admin or user
    """

    search = serializers.CharField(required=False, allow_blank=True, max_length=100)
    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
