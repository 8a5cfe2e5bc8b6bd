import factory
from factory.django import DjangoModelFactory

from accounts.factories import IdentityFactory
from roles import StaffRole
from roles.models import Admin, Customer, DeliveryAgent, Manager, Staff


class CustomerFactory(DjangoModelFactory):
    """Factory for Customer model."""

    class Meta:
        model = Customer

    identity = factory.SubFactory(IdentityFactory)


class StaffFactory(DjangoModelFactory):
    """Factory for the Staff base record. Creates no dependent row."""

    class Meta:
        model = Staff

    identity = factory.SubFactory(IdentityFactory)
    role = StaffRole.MANAGER
    restaurant = None


class ManagerFactory(DjangoModelFactory):
    """Factory for Manager model, with its Staff base record."""

    class Meta:
        model = Manager

    staff = factory.SubFactory(StaffFactory, role=StaffRole.MANAGER)


class DeliveryAgentFactory(DjangoModelFactory):
    """Factory for DeliveryAgent model, with its Staff base record."""

    class Meta:
        model = DeliveryAgent

    staff = factory.SubFactory(StaffFactory, role=StaffRole.DELIVERY)
    is_available = True


class AdminFactory(DjangoModelFactory):
    """Factory for Admin model. Only one can exist per database."""

    class Meta:
        model = Admin

    identity = factory.SubFactory(IdentityFactory)
