import logging

from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from rest_framework.exceptions import AuthenticationFailed

from accounts.serializers import UserRegistrationSerializer
from roles.utils import admin_exists, resolve_active_role

logger = logging.getLogger(__name__)

__all__ = ['register', 'login', 'admin_exists']


def register(data):
    """
    Register a new identity with the records of the requested role.

    Raises serializers.ValidationError for bad input and ConflictError for a
    duplicate email or a second admin; nothing is written in either case.
    Returns the new identity id.
    """
    serializer = UserRegistrationSerializer(data=data)
    serializer.is_valid(raise_exception=True)
    identity = serializer.save()
    logger.info(f"Registered identity {identity.id} as {serializer.validated_data['role']}")
    return identity.id


def login(email, password, request=None):
    """
    Authenticate by email and password and resolve the active role.

    Unknown email, wrong password and inactive account all raise the same
    AuthenticationFailed. An identity without usable role records raises
    RoleIntegrityError.
    """
    identity = authenticate(request, email=email, password=password)
    if identity is None:
        raise AuthenticationFailed('Invalid email or password', code='invalid_credentials')

    active_role = resolve_active_role(identity)
    update_last_login(None, identity)
    return {
        'identity_id': identity.id,
        'active_role': active_role,
    }
