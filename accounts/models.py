from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.contrib.auth.hashers import check_password, is_password_usable, make_password
from django.db import models
from django.utils.crypto import salted_hmac

from core.models import AbstractUUID, AbstractMonitor, PossiblePhoneNumberField


class IdentityManager(BaseUserManager):
    """Manager for email-based identities."""

    use_in_migrations = True

    def create_identity(self, email, name, password, phone='', **extra_fields):
        """
        Create an Identity together with its Credential.

        Role records are not created here, see accounts.utils.register.
        Must run inside the caller's transaction.
        """
        if not email:
            raise ValueError('The Email field must be set')
        if not name:
            raise ValueError('The Name field must be set')
        if not password:
            raise ValueError('The Password field must be set')

        identity = self.model(
            email=self.normalize_email(email),
            name=name,
            phone=phone,
            **extra_fields
        )
        identity.save(using=self._db)
        Credential.objects.using(self._db).create(
            identity=identity,
            password_hash=make_password(password),
        )
        return identity

    def create_user(self, email, name, password=None, phone=''):
        from accounts.utils import register
        from roles import RoleType

        identity_id = register({
            'email': email,
            'name': name,
            'phone': str(phone),
            'password': password,
            'password_confirm': password,
            'role': RoleType.CUSTOMER,
        })
        return self.get(pk=identity_id)

    def create_superuser(self, email, name, password=None, phone=''):
        """Used by `createsuperuser`; registers the one platform admin."""
        from accounts.utils import register
        from roles import RoleType

        identity_id = register({
            'email': email,
            'name': name,
            'phone': str(phone),
            'password': password,
            'password_confirm': password,
            'role': RoleType.ADMIN,
        })
        return self.get(pk=identity_id)

    def get_by_natural_key(self, email):
        return self.get(email__iexact=email)


class Identity(AbstractBaseUser, AbstractUUID, AbstractMonitor):
    """
    Base user entity shared by every role.

    Inherits from:
    - AbstractUUID: UUID primary key
    - AbstractMonitor: created_at, updated_at timestamps

    The password hash does not live on this table; it is kept in the
    one-to-one Credential row and the password methods of AbstractBaseUser
    are redirected there.
    """
    password = None

    name = models.CharField(max_length=256)
    email = models.EmailField(unique=True, db_index=True)
    phone = PossiblePhoneNumberField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    objects = IdentityManager()

    EMAIL_FIELD = 'email'
    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name', 'phone']

    class Meta:
        db_table = 'identities'
        ordering = ['-created_at']
        verbose_name = 'Identity'
        verbose_name_plural = 'Identities'

    def __str__(self):
        return f"{self.name} ({self.email})"

    def save(self, *args, **kwargs):
        self.email = self.email.lower().strip()
        self.name = ' '.join(self.name.strip().split())
        super().save(*args, **kwargs)

    # Password handling, backed by Credential

    def set_password(self, raw_password):
        Credential.objects.update_or_create(
            identity=self,
            defaults={'password_hash': make_password(raw_password)},
        )

    def check_password(self, raw_password):
        try:
            credential = self.credential
        except Credential.DoesNotExist:
            return False
        return credential.verify(raw_password)

    def set_unusable_password(self):
        self.set_password(None)

    def has_usable_password(self):
        try:
            return is_password_usable(self.credential.password_hash)
        except Credential.DoesNotExist:
            return False

    def _get_session_auth_hash(self, secret=None):
        try:
            password_hash = self.credential.password_hash
        except Credential.DoesNotExist:
            password_hash = ''
        return salted_hmac(
            'accounts.Identity.get_session_auth_hash',
            password_hash,
            secret=secret,
            algorithm='sha256',
        ).hexdigest()

    # Django admin access is reserved for the platform admin

    @property
    def is_staff(self):
        from roles.models import Admin
        return Admin.objects.filter(identity=self).exists()

    @property
    def is_superuser(self):
        return self.is_staff

    def has_perm(self, perm, obj=None):
        return self.is_active and self.is_staff

    def has_perms(self, perm_list, obj=None):
        return all(self.has_perm(perm, obj) for perm in perm_list)

    def has_module_perms(self, app_label):
        return self.is_active and self.is_staff


class Credential(AbstractUUID, AbstractMonitor):
    """
    Salted one-way password hash of an Identity.
    Replaced (updated in place) on password change.
    """
    identity = models.OneToOneField(
        Identity, on_delete=models.CASCADE, related_name='credential'
    )
    password_hash = models.CharField(max_length=256)

    class Meta:
        db_table = 'credentials'

    def __str__(self):
        return f"Credential of {self.identity_id}"

    def verify(self, raw_password):
        """Verify a password, upgrading the stored hash if the hasher changed."""
        def setter(raw):
            self.password_hash = make_password(raw)
            self.save(update_fields=['password_hash', 'updated_at'])

        return check_password(raw_password, self.password_hash, setter)
