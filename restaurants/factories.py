import factory
from factory.django import DjangoModelFactory

from core.models import Address
from restaurants.models import Restaurant


class AddressFactory(DjangoModelFactory):
    """Factory for Address model."""

    class Meta:
        model = Address

    address_line_1 = factory.Faker('street_address')
    address_line_2 = factory.Faker('secondary_address')
    city = factory.Faker('city')
    country_area = factory.Faker('state')
    country = 'US'
    postal_code = factory.Faker('zipcode')
    is_active = True


class RestaurantFactory(DjangoModelFactory):
    """Factory for Restaurant model."""

    class Meta:
        model = Restaurant

    name = factory.Sequence(lambda n: f'Restaurant {n}')
    phone = '+12025551234'
    address = factory.SubFactory(AddressFactory)
    is_active = True
