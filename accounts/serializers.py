import logging

from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction, IntegrityError
from phonenumber_field.serializerfields import PhoneNumberField

from accounts.exceptions import ConflictError
from restaurants.models import Restaurant
from roles import RoleType
from roles.utils import admin_exists, create_role_records

User = get_user_model()
logger = logging.getLogger(__name__)

STAFF_ROLES = (RoleType.MANAGER, RoleType.DRIVER)


class IdentitySerializer(serializers.ModelSerializer):
    """Serializer for identity details (used in responses)."""

    id = serializers.UUIDField(read_only=True)

    class Meta:
        model = User
        fields = (
            'id', 'email', 'name', 'phone', 'is_active',
            'last_login', 'created_at', 'updated_at',
        )
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    """
    Serializer for signup. Validates the input shape, then `create` writes the
    Identity, its Credential and the role records of `role` in one transaction.
    """

    name = serializers.CharField(max_length=256)
    email = serializers.EmailField()
    phone = PhoneNumberField()
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(
        choices=RoleType.CHOICES,
        default=RoleType.CUSTOMER,
    )
    restaurant_id = serializers.UUIDField(required=False, allow_null=True, default=None)

    def validate_email(self, value):
        return value.lower().strip()

    def validate_name(self, value):
        name = ' '.join(value.split())
        if not name:
            raise serializers.ValidationError("Name must not be blank.")
        return name

    def validate_restaurant_id(self, value):
        if value is None:
            return value
        if not Restaurant.active.filter(id=value).exists():
            raise serializers.ValidationError("Restaurant does not exist or is inactive.")
        return value

    def validate(self, data):
        if data['password'] != data['password_confirm']:
            raise serializers.ValidationError({
                "password_confirm": "Password fields didn't match."
            })
        if data.get('restaurant_id') and data['role'] not in STAFF_ROLES:
            raise serializers.ValidationError({
                "restaurant_id": "Only managers and drivers belong to a restaurant."
            })
        return data

    @transaction.atomic
    def create(self, validated_data):
        email = validated_data['email']
        role = validated_data['role']

        # Checked inside the transaction; the unique constraints below still
        # catch a concurrent registration that commits after these checks.
        if User.objects.filter(email__iexact=email).exists():
            raise ConflictError("A user with this email already exists.", code='duplicate_email')
        if role == RoleType.ADMIN and admin_exists():
            raise ConflictError("An admin account already exists.", code='admin_exists')

        try:
            with transaction.atomic():
                identity = User.objects.create_identity(
                    email=email,
                    name=validated_data['name'],
                    phone=validated_data['phone'],
                    password=validated_data['password'],
                )
        except IntegrityError as e:
            logger.error(f"Identity insert rejected for {email}: {str(e)}")
            raise ConflictError("A user with this email already exists.", code='duplicate_email')

        restaurant = None
        if validated_data.get('restaurant_id'):
            # locked so it cannot be deactivated under the new staff record
            restaurant = Restaurant.active.select_for_update().filter(
                id=validated_data['restaurant_id']
            ).first()
            if restaurant is None:
                raise serializers.ValidationError({
                    "restaurant_id": "Restaurant does not exist or is inactive."
                })

        try:
            with transaction.atomic():
                create_role_records(identity, role, restaurant=restaurant)
        except IntegrityError as e:
            if role != RoleType.ADMIN:
                raise
            logger.error(f"Admin insert rejected for {email}: {str(e)}")
            raise ConflictError("An admin account already exists.", code='admin_exists')

        return identity


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class PasswordChangeSerializer(serializers.Serializer):
    """Replaces the Credential of the identity passed in context['identity']."""

    old_password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    new_password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    new_password_confirm = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate_old_password(self, value):
        if not self.context['identity'].check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value

    def validate(self, data):
        if data['new_password'] != data['new_password_confirm']:
            raise serializers.ValidationError({
                "new_password_confirm": "Password fields didn't match."
            })
        return data

    def save(self):
        identity = self.context['identity']
        identity.set_password(self.validated_data['new_password'])
        return identity
