from django.contrib.auth.backends import BaseBackend
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password

User = get_user_model()


class EmailBackend(BaseBackend):
    """Authenticate an Identity by email against its Credential."""

    def authenticate(
            self, request,
            username=None,
            email=None,
            password=None,
            **kwargs
    ):

        # Django admin sends 'username', so we need to handle both
        email = email or username

        if not email or not password:
            return None

        try:
            identity = User.objects.select_related('credential').get(email__iexact=email.strip())
        except User.DoesNotExist:
            # same hashing cost as the wrong-password path
            make_password(password)
            return None

        if identity.check_password(password) and self.user_can_authenticate(identity):
            return identity
        return None

    def user_can_authenticate(self, identity):
        return identity.is_active

    def get_user(self, user_id):
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            return None
