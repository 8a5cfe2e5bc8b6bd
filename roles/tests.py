from itertools import combinations

from django.contrib import admin
from django.db import IntegrityError, transaction
from django.test import RequestFactory, SimpleTestCase, TestCase

from accounts.factories import IdentityFactory
from restaurants.factories import RestaurantFactory
from roles import RoleType, StaffRole
from roles.admin import StaffAdmin
from roles.exceptions import RoleIntegrityError
from roles.factories import (
    AdminFactory, CustomerFactory, DeliveryAgentFactory, ManagerFactory, StaffFactory
)
from roles.models import Admin, Staff
from roles.utils import (
    create_role_records, get_role_types, pick_active_role, resolve_active_role
)


def all_subsets(items):
    for size in range(len(items) + 1):
        for subset in combinations(items, size):
            yield set(subset)


class PickActiveRoleTest(SimpleTestCase):
    """Priority function over every combination of role types."""

    def test_highest_priority_wins_for_every_subset(self):
        for role_types in all_subsets(RoleType.PRIORITY):
            with self.subTest(role_types=sorted(role_types)):
                expected = next((r for r in RoleType.PRIORITY if r in role_types), None)
                self.assertEqual(pick_active_role(role_types), expected)

    def test_manager_beats_customer(self):
        self.assertEqual(pick_active_role({RoleType.CUSTOMER, RoleType.MANAGER}), RoleType.MANAGER)

    def test_admin_beats_everything(self):
        self.assertEqual(pick_active_role(set(RoleType.PRIORITY)), RoleType.ADMIN)

    def test_empty(self):
        self.assertIsNone(pick_active_role(set()))


class ResolveActiveRoleTest(TestCase):
    """Tests for resolving the active role from stored role records."""

    def attach_roles(self, identity, role_types):
        if RoleType.ADMIN in role_types:
            AdminFactory(identity=identity)
        if RoleType.MANAGER in role_types:
            ManagerFactory(staff__identity=identity)
        if RoleType.DRIVER in role_types:
            DeliveryAgentFactory(staff__identity=identity)
        if RoleType.CUSTOMER in role_types:
            CustomerFactory(identity=identity)

    def test_resolved_type_is_highest_priority_present(self):
        # an identity has a single Staff base record, so manager and driver never coexist
        subsets = [
            role_types for role_types in all_subsets(RoleType.PRIORITY)
            if role_types and not {RoleType.MANAGER, RoleType.DRIVER} <= role_types
        ]
        for role_types in subsets:
            with self.subTest(role_types=sorted(role_types)):
                Admin.objects.all().delete()
                identity = IdentityFactory()
                self.attach_roles(identity, role_types)

                self.assertEqual(get_role_types(identity), role_types)
                self.assertEqual(resolve_active_role(identity)['type'], pick_active_role(role_types))

    def test_admin_payload(self):
        admin = AdminFactory()

        self.assertEqual(resolve_active_role(admin.identity), {
            'type': 'admin',
            'admin_id': str(admin.id),
        })

    def test_manager_payload(self):
        restaurant = RestaurantFactory()
        manager = ManagerFactory(staff__restaurant=restaurant)
        CustomerFactory(identity=manager.staff.identity)

        self.assertEqual(resolve_active_role(manager.staff.identity), {
            'type': 'manager',
            'manager_id': str(manager.id),
            'staff_id': str(manager.staff.id),
            'restaurant_id': str(restaurant.id),
        })

    def test_driver_payload(self):
        agent = DeliveryAgentFactory()

        self.assertEqual(resolve_active_role(agent.staff.identity), {
            'type': 'driver',
            'agent_id': str(agent.id),
            'staff_id': str(agent.staff.id),
            'restaurant_id': None,
        })

    def test_customer_payload(self):
        customer = CustomerFactory()

        self.assertEqual(resolve_active_role(customer.identity), {
            'type': 'customer',
            'customer_id': str(customer.id),
        })

    def test_no_role_records(self):
        with self.assertRaises(RoleIntegrityError):
            resolve_active_role(IdentityFactory())

    def test_orphaned_staff_record(self):
        staff = StaffFactory(role=StaffRole.MANAGER)
        CustomerFactory(identity=staff.identity)

        with self.assertRaises(RoleIntegrityError):
            resolve_active_role(staff.identity)

    def test_staff_role_mismatch(self):
        agent = DeliveryAgentFactory(staff__role=StaffRole.MANAGER)

        with self.assertRaises(RoleIntegrityError):
            resolve_active_role(agent.staff.identity)

    def test_orphaned_staff_record_hidden_behind_admin(self):
        """An orphaned Staff record is reported even when a higher role exists."""
        admin = AdminFactory()
        StaffFactory(identity=admin.identity, role=StaffRole.DELIVERY)

        with self.assertRaises(RoleIntegrityError):
            resolve_active_role(admin.identity)


class AdminSingletonTest(TestCase):
    """The database itself allows one Admin row."""

    def test_second_admin_row_rejected(self):
        AdminFactory()

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                AdminFactory()

        self.assertEqual(Admin.objects.count(), 1)


class CreateRoleRecordsTest(TestCase):

    def test_manager_records(self):
        identity = IdentityFactory()
        restaurant = RestaurantFactory()

        create_role_records(identity, RoleType.MANAGER, restaurant=restaurant)

        self.assertEqual(identity.staff.role, StaffRole.MANAGER)
        self.assertEqual(identity.staff.restaurant, restaurant)
        self.assertIsNotNone(identity.staff.manager)
        self.assertIsNotNone(identity.customer)

    def test_unknown_role(self):
        with self.assertRaises(ValueError):
            create_role_records(IdentityFactory(), 'owner')


class StaffAdminTest(TestCase):

    def test_staff_cannot_be_added_from_admin_site(self):
        request = RequestFactory().get('/admin/roles/staff/add/')
        request.user = AdminFactory().identity

        model_admin = StaffAdmin(Staff, admin.site)

        self.assertFalse(model_admin.has_add_permission(request))
        self.assertTrue(model_admin.has_change_permission(request))
