import factory
from factory.django import DjangoModelFactory

from accounts.models import Identity

DEFAULT_PASSWORD = 'TestPass123!'


class IdentityFactory(DjangoModelFactory):
    """Factory for Identity model. Creates the Credential through set_password."""

    class Meta:
        model = Identity
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f'user{n}@example.com')
    name = factory.Faker('name')
    phone = '+12025551234'
    is_active = True
    password = factory.PostGenerationMethodCall('set_password', DEFAULT_PASSWORD)
