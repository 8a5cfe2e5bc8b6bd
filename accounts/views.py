import logging

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from rest_framework import serializers, status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.exceptions import ConflictError
from accounts.serializers import IdentitySerializer, UserLoginSerializer, PasswordChangeSerializer
from accounts.utils import register, login, admin_exists
from core.utils import rest_api_formatter
from roles import DASHBOARD_PATHS, RoleType
from roles.exceptions import RoleIntegrityError
from roles.utils import get_role_types, pick_active_role, resolve_active_role

User = get_user_model()
logger = logging.getLogger(__name__)


def _error_fields(detail):
    if isinstance(detail, dict):
        return list(detail.keys())
    return []


def _tokens_for(identity, role_type):
    refresh = RefreshToken.for_user(identity)
    refresh['role'] = role_type
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


def _role_integrity_response(e):
    return rest_api_formatter(
        data=None,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        success=False,
        message='Account role records are inconsistent',
        error_code='ROLE_INTEGRITY_ERROR',
        error_message=str(e.detail)
    )


def _database_error_response():
    return rest_api_formatter(
        data=None,
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        success=False,
        message='Service temporarily unavailable',
        error_code='DATABASE_ERROR',
        error_message='Please try again later'
    )


def _internal_error_response():
    return rest_api_formatter(
        data=None,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        success=False,
        message='An unexpected error occurred',
        error_code='INTERNAL_ERROR',
        error_message='Please try again later'
    )


class RegisterView(APIView):
    """API view for registration of customers, managers, drivers and the admin."""

    permission_classes = [AllowAny]

    def post(self, request):
        logger.info(
            f"Registration attempt for email: {request.data.get('email', 'N/A')}, "
            f"role: {request.data.get('role', RoleType.CUSTOMER)}"
        )

        try:
            identity = User.objects.get(pk=register(request.data))
            active_role = resolve_active_role(identity)

            logger.info(f"Identity registered successfully: {identity.email} (ID: {identity.id})")
            return rest_api_formatter(
                status_code=status.HTTP_201_CREATED,
                success=True,
                message='User registered successfully',
                data={
                    'user': IdentitySerializer(identity).data,
                    'active_role': active_role,
                    'dashboard': DASHBOARD_PATHS[active_role['type']],
                    'tokens': _tokens_for(identity, active_role['type']),
                },
            )

        except serializers.ValidationError as e:
            logger.warning(f"Registration validation failed: {e.detail}")
            return rest_api_formatter(
                data=e.detail,
                status_code=status.HTTP_400_BAD_REQUEST,
                success=False,
                message='Validation failed',
                error_code='VALIDATION_ERROR',
                error_message='Invalid input data',
                error_fields=_error_fields(e.detail)
            )

        except ConflictError as e:
            logger.error(f"Registration conflict: {e.detail}")
            return rest_api_formatter(
                data=None,
                status_code=status.HTTP_409_CONFLICT,
                success=False,
                message=str(e.detail),
                error_code=e.get_codes().upper(),
                error_message=str(e.detail)
            )

        except DatabaseError as e:
            logger.critical(f"Database error during registration: {str(e)}")
            return _database_error_response()

        except Exception as e:
            logger.exception(f"Unexpected error during registration: {str(e)}")
            return _internal_error_response()


class LoginView(APIView):
    """API view for login; resolves the active role for dashboard routing."""

    permission_classes = [AllowAny]

    def post(self, request):
        email = request.data.get('email', 'N/A')
        logger.info(f"Login attempt for email: {email}")

        try:
            serializer = UserLoginSerializer(data=request.data)
            if not serializer.is_valid():
                logger.warning(f"Login validation failed: {serializer.errors}")
                return rest_api_formatter(
                    data=None,
                    status_code=status.HTTP_400_BAD_REQUEST,
                    success=False,
                    message='Validation failed',
                    error_code='VALIDATION_ERROR',
                    error_message='Invalid input data',
                    error_fields=list(serializer.errors.keys())
                )

            email = serializer.validated_data['email']
            result = login(email, serializer.validated_data['password'], request=request)
            identity = User.objects.get(pk=result['identity_id'])
            active_role = result['active_role']

            logger.info(f"User logged in successfully: {email} (ID: {identity.id}, role: {active_role['type']})")
            return rest_api_formatter(
                data={
                    'user': IdentitySerializer(identity).data,
                    'active_role': active_role,
                    'dashboard': DASHBOARD_PATHS[active_role['type']],
                    'tokens': _tokens_for(identity, active_role['type']),
                },
                status_code=status.HTTP_200_OK,
                success=True,
                message='Login successful'
            )

        except AuthenticationFailed:
            logger.warning(f"Invalid credentials for email: {email}")
            return rest_api_formatter(
                data=None,
                status_code=status.HTTP_401_UNAUTHORIZED,
                success=False,
                message='Invalid email or password',
                error_code='INVALID_CREDENTIALS',
                error_message='Invalid email or password'
            )

        except RoleIntegrityError as e:
            logger.error(f"Role integrity error on login for {email}: {e.detail}")
            return _role_integrity_response(e)

        except DatabaseError as e:
            logger.critical(f"Database error during login: {str(e)}")
            return _database_error_response()

        except Exception as e:
            logger.exception(f"Unexpected error during login: {str(e)}")
            return _internal_error_response()


class LogoutView(APIView):
    """API view for user logout."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        user_id = request.user.id
        logger.info(f"Logout attempt for user ID: {user_id}")

        refresh_token = request.data.get("refresh")
        if not refresh_token:
            logger.warning(f"Logout failed - no refresh token provided for user ID: {user_id}")
            return rest_api_formatter(
                data=None,
                status_code=status.HTTP_400_BAD_REQUEST,
                success=False,
                message="Refresh token is required",
                error_code='MISSING_TOKEN',
                error_message='Refresh token must be provided'
            )

        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as e:
            logger.warning(f"Logout failed - invalid token for user ID: {user_id}, error: {str(e)}")
            return rest_api_formatter(
                data=None,
                status_code=status.HTTP_400_BAD_REQUEST,
                success=False,
                message="Invalid or expired token",
                error_code='INVALID_TOKEN',
                error_message='The provided token is invalid or has expired'
            )

        logger.info(f"User logged out successfully: {user_id}")
        return rest_api_formatter(
            data=None,
            status_code=status.HTTP_200_OK,
            success=True,
            message="Logout successful"
        )


class AdminExistsView(APIView):
    """Tells the signup form whether the admin role is still available."""

    permission_classes = [AllowAny]

    def get(self, request):
        return rest_api_formatter(
            data={'admin_exists': admin_exists()},
            status_code=status.HTTP_200_OK,
            success=True,
        )


class UserProfileView(APIView):
    """API view for the current identity, its role types and active role."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        identity = request.user
        try:
            role_types = get_role_types(identity)
            active_role = resolve_active_role(identity)
        except RoleIntegrityError as e:
            logger.error(f"Role integrity error for identity {identity.id}: {e.detail}")
            return _role_integrity_response(e)

        return rest_api_formatter(
            status_code=status.HTTP_200_OK,
            success=True,
            message='Profile retrieved successfully',
            data={
                'user': IdentitySerializer(identity).data,
                'roles': [role for role in RoleType.PRIORITY if role in role_types],
                'active_role': active_role,
                'dashboard': DASHBOARD_PATHS[pick_active_role(role_types)],
            }
        )


class PasswordChangeView(APIView):
    """Replaces the current identity's credential."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        identity = request.user
        serializer = PasswordChangeSerializer(data=request.data, context={'identity': identity})
        if not serializer.is_valid():
            logger.warning(f"Password change validation failed for user ID {identity.id}: {list(serializer.errors)}")
            return rest_api_formatter(
                data=serializer.errors,
                status_code=status.HTTP_400_BAD_REQUEST,
                success=False,
                message='Validation failed',
                error_code='VALIDATION_ERROR',
                error_message='Invalid input data',
                error_fields=list(serializer.errors.keys())
            )

        serializer.save()
        logger.info(f"Password changed for user ID: {identity.id}")
        return rest_api_formatter(
            data=None,
            status_code=status.HTTP_200_OK,
            success=True,
            message='Password changed successfully'
        )
