import threading
import uuid
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.db import DatabaseError, connection
from django.test import TestCase, TransactionTestCase
from django.urls import reverse
from rest_framework import serializers, status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.test import APITestCase, APIClient

from accounts.exceptions import ConflictError
from accounts.factories import IdentityFactory, DEFAULT_PASSWORD
from accounts.models import Identity, Credential
from accounts.serializers import UserRegistrationSerializer
from accounts.utils import register, login, admin_exists
from restaurants.factories import RestaurantFactory
from restaurants.models import Restaurant
from roles import StaffRole
from roles.exceptions import RoleIntegrityError
from roles.factories import CustomerFactory
from roles.models import Admin, Customer, DeliveryAgent, Manager, Staff


def registration_data(**overrides):
    data = {
        'name': 'Test Customer',
        'email': 'customer@test.com',
        'phone': '+12025551234',
        'password': 'TestPass123!',
        'password_confirm': 'TestPass123!',
        'role': 'customer',
    }
    data.update(overrides)
    return data


class RegistrationTest(TestCase):
    """Tests for the registration assembler."""

    def assert_counts(self, identities, credentials, customers=0, staff=0, managers=0, agents=0, admins=0):
        self.assertEqual(Identity.objects.count(), identities)
        self.assertEqual(Credential.objects.count(), credentials)
        self.assertEqual(Customer.objects.count(), customers)
        self.assertEqual(Staff.objects.count(), staff)
        self.assertEqual(Manager.objects.count(), managers)
        self.assertEqual(DeliveryAgent.objects.count(), agents)
        self.assertEqual(Admin.objects.count(), admins)

    def test_register_customer(self):
        """Customer signup creates exactly Identity, Credential and Customer."""
        identity_id = register(registration_data())

        self.assert_counts(identities=1, credentials=1, customers=1)
        identity = Identity.objects.get(pk=identity_id)
        self.assertEqual(identity.customer.identity_id, identity_id)

        result = login('customer@test.com', 'TestPass123!')
        self.assertEqual(result['identity_id'], identity_id)
        self.assertEqual(result['active_role']['type'], 'customer')
        self.assertEqual(result['active_role']['customer_id'], str(identity.customer.id))

    def test_register_manager(self):
        """Manager signup creates Staff(MANAGER), Manager and Customer records."""
        identity_id = register(registration_data(
            name='Test Manager',
            email='manager@test.com',
            role='manager',
        ))

        self.assert_counts(identities=1, credentials=1, customers=1, staff=1, managers=1)
        staff = Staff.objects.get(identity_id=identity_id)
        self.assertEqual(staff.role, StaffRole.MANAGER)
        self.assertIsNone(staff.restaurant)

        result = login('manager@test.com', 'TestPass123!')
        self.assertEqual(result['active_role'], {
            'type': 'manager',
            'manager_id': str(staff.manager.id),
            'staff_id': str(staff.id),
            'restaurant_id': None,
        })

    def test_register_driver_with_restaurant(self):
        """Driver signup creates Staff(DELIVERY), DeliveryAgent and Customer records."""
        restaurant = RestaurantFactory()
        identity_id = register(registration_data(
            email='driver@test.com',
            role='driver',
            restaurant_id=str(restaurant.id),
        ))

        self.assert_counts(identities=1, credentials=1, customers=1, staff=1, agents=1)
        staff = Staff.objects.get(identity_id=identity_id)
        self.assertEqual(staff.role, StaffRole.DELIVERY)
        self.assertEqual(staff.restaurant, restaurant)

        active_role = login('driver@test.com', 'TestPass123!')['active_role']
        self.assertEqual(active_role['type'], 'driver')
        self.assertEqual(active_role['agent_id'], str(staff.delivery_agent.id))
        self.assertEqual(active_role['restaurant_id'], str(restaurant.id))

    def test_register_admin(self):
        """Admin signup creates Identity, Credential and Admin only."""
        self.assertFalse(admin_exists())
        register(registration_data(email='admin@test.com', role='admin'))

        self.assert_counts(identities=1, credentials=1, admins=1)
        self.assertTrue(admin_exists())
        self.assertEqual(login('admin@test.com', 'TestPass123!')['active_role']['type'], 'admin')

    def test_second_admin_rejected(self):
        register(registration_data(email='admin@test.com', role='admin'))

        with self.assertRaises(ConflictError) as cm:
            register(registration_data(email='admin2@test.com', role='admin'))

        self.assertEqual(cm.exception.get_codes(), 'admin_exists')
        self.assert_counts(identities=1, credentials=1, admins=1)

    def test_second_admin_rejected_when_existence_check_is_passed(self):
        """
        Simulates two concurrent admin signups that both passed the existence
        check: the singleton constraint still rejects the second one.
        """
        register(registration_data(email='admin@test.com', role='admin'))

        with patch('accounts.serializers.admin_exists', return_value=False):
            with self.assertRaises(ConflictError) as cm:
                register(registration_data(email='admin2@test.com', role='admin'))

        self.assertEqual(cm.exception.get_codes(), 'admin_exists')
        self.assert_counts(identities=1, credentials=1, admins=1)
        self.assertFalse(Identity.objects.filter(email='admin2@test.com').exists())

    def test_duplicate_email_rejected(self):
        register(registration_data())

        with self.assertRaises(ConflictError) as cm:
            register(registration_data(email='  CUSTOMER@test.com ', role='manager'))

        self.assertEqual(cm.exception.get_codes(), 'duplicate_email')
        self.assert_counts(identities=1, credentials=1, customers=1)

    def test_mismatched_confirm_rejected(self):
        with self.assertRaises(serializers.ValidationError) as cm:
            register(registration_data(password_confirm='TestPass123?'))

        self.assertIn('password_confirm', cm.exception.detail)
        self.assert_counts(identities=0, credentials=0)

    def test_weak_password_rejected(self):
        for password in ['Tp12!ab', 'testpass123!', 'TESTPASS123!', 'TestPass!!!!', 'TestPass1234']:
            with self.subTest(password=password):
                with self.assertRaises(serializers.ValidationError) as cm:
                    register(registration_data(password=password, password_confirm=password))
                self.assertIn('password', cm.exception.detail)

        self.assert_counts(identities=0, credentials=0)

    def test_unknown_role_rejected(self):
        with self.assertRaises(serializers.ValidationError) as cm:
            register(registration_data(role='superuser'))

        self.assertIn('role', cm.exception.detail)
        self.assert_counts(identities=0, credentials=0)

    def test_restaurant_for_customer_rejected(self):
        restaurant = RestaurantFactory()
        with self.assertRaises(serializers.ValidationError) as cm:
            register(registration_data(restaurant_id=str(restaurant.id)))

        self.assertIn('restaurant_id', cm.exception.detail)

    def test_inactive_restaurant_rejected(self):
        restaurant = RestaurantFactory(is_active=False)
        with self.assertRaises(serializers.ValidationError) as cm:
            register(registration_data(role='manager', restaurant_id=str(restaurant.id)))

        self.assertIn('restaurant_id', cm.exception.detail)

    def test_restaurant_deactivated_after_validation_rejected(self):
        restaurant = RestaurantFactory()
        serializer = UserRegistrationSerializer(data=registration_data(
            email='manager@test.com', role='manager', restaurant_id=str(restaurant.id),
        ))
        self.assertTrue(serializer.is_valid())

        Restaurant.objects.filter(pk=restaurant.pk).update(is_active=False)

        with self.assertRaises(serializers.ValidationError) as cm:
            serializer.save()

        self.assertIn('restaurant_id', cm.exception.detail)
        self.assert_counts(identities=0, credentials=0)

    def test_failure_mid_registration_leaves_no_rows(self):
        """A failing Staff insert rolls back the Identity and Credential already written."""
        with patch.object(Staff.objects, 'create', side_effect=DatabaseError('staff insert failed')):
            with self.assertRaises(DatabaseError):
                register(registration_data(email='manager@test.com', role='manager'))

        self.assert_counts(identities=0, credentials=0)

    def test_failure_after_staff_insert_leaves_no_rows(self):
        with patch.object(DeliveryAgent.objects, 'create', side_effect=DatabaseError('agent insert failed')):
            with self.assertRaises(DatabaseError):
                register(registration_data(email='driver@test.com', role='driver'))

        self.assert_counts(identities=0, credentials=0)

    def test_password_is_hashed(self):
        identity_id = register(registration_data())
        credential = Credential.objects.get(identity_id=identity_id)

        self.assertNotEqual(credential.password_hash, 'TestPass123!')
        self.assertTrue(credential.verify('TestPass123!'))

    def test_create_user_registers_customer(self):
        identity = Identity.objects.create_user(
            email='Plain@Test.com', name='Plain  User', password='TestPass123!', phone='+12025551234'
        )

        self.assertEqual(identity.email, 'plain@test.com')
        self.assertEqual(identity.name, 'Plain User')
        self.assertFalse(identity.is_staff)
        self.assert_counts(identities=1, credentials=1, customers=1)

    def test_create_superuser_registers_admin(self):
        identity = Identity.objects.create_superuser(
            email='root@test.com', name='Root', password='TestPass123!', phone='+12025551234'
        )

        self.assertTrue(identity.is_staff)
        self.assertTrue(identity.has_perm('roles.view_staff'))
        with self.assertRaises(ConflictError):
            Identity.objects.create_superuser(
                email='root2@test.com', name='Root', password='TestPass123!', phone='+12025551234'
            )

class ConcurrentAdminRegistrationTest(TransactionTestCase):
    """Two admin signups racing each other on separate connections."""

    def test_concurrent_admin_signups(self):
        barrier = threading.Barrier(2)
        results = {}

        def signup(email):
            try:
                barrier.wait()
                results[email] = register(registration_data(email=email, role='admin'))
            except Exception as e:
                results[email] = e
            finally:
                connection.close()

        threads = [
            threading.Thread(target=signup, args=(f'admin{n}@test.com',))
            for n in range(2)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        conflicts = [r for r in results.values() if isinstance(r, ConflictError)]
        created = [r for r in results.values() if isinstance(r, uuid.UUID)]
        self.assertEqual(len(created), 1, results)
        self.assertEqual(len(conflicts), 1, results)
        self.assertEqual(conflicts[0].get_codes(), 'admin_exists')
        self.assertEqual(Admin.objects.count(), 1)
        self.assertEqual(Identity.objects.count(), 1)


class MigrationsTest(TestCase):

    def test_migrations_match_models(self):
        try:
            call_command('makemigrations', check=True, dry_run=True, stdout=StringIO())
        except SystemExit:
            self.fail('Models have changes not reflected in a migration')



class LoginTest(TestCase):
    """Tests for login and its failure modes."""

    def setUp(self):
        self.identity = IdentityFactory(email='user@example.com')
        CustomerFactory(identity=self.identity)

    def test_login_success_updates_last_login(self):
        self.assertIsNone(self.identity.last_login)

        result = login('USER@example.com', DEFAULT_PASSWORD)

        self.assertEqual(result['identity_id'], self.identity.id)
        self.identity.refresh_from_db()
        self.assertIsNotNone(self.identity.last_login)

    def test_wrong_password_and_unknown_email_look_the_same(self):
        with self.assertRaises(AuthenticationFailed) as wrong_password:
            login('user@example.com', 'WrongPass123!')
        with self.assertRaises(AuthenticationFailed) as unknown_email:
            login('nobody@example.com', DEFAULT_PASSWORD)

        self.assertEqual(wrong_password.exception.detail, unknown_email.exception.detail)
        self.assertEqual(wrong_password.exception.get_codes(), unknown_email.exception.get_codes())

    def test_inactive_identity_cannot_login(self):
        self.identity.is_active = False
        self.identity.save()

        with self.assertRaises(AuthenticationFailed):
            login('user@example.com', DEFAULT_PASSWORD)

    def test_identity_without_roles_is_integrity_error(self):
        IdentityFactory(email='orphan@example.com')

        with self.assertRaises(RoleIntegrityError):
            login('orphan@example.com', DEFAULT_PASSWORD)

    def test_set_password_replaces_credential(self):
        self.identity.set_password('NewPass456?')

        self.assertEqual(Credential.objects.filter(identity=self.identity).count(), 1)
        with self.assertRaises(AuthenticationFailed):
            login('user@example.com', DEFAULT_PASSWORD)
        self.assertEqual(login('user@example.com', 'NewPass456?')['identity_id'], self.identity.id)


class AuthAPITest(APITestCase):
    """Test cases for the auth API endpoints."""

    def setUp(self):
        self.client = APIClient()

    def register_via_api(self, **overrides):
        return self.client.post(reverse('register'), registration_data(**overrides), format='json')

    def login_via_api(self, email, password='TestPass123!'):
        return self.client.post(reverse('login'), {'email': email, 'password': password}, format='json')

    def authenticate(self, email, password='TestPass123!'):
        response = self.login_via_api(email, password)
        tokens = response.data['data']['tokens']
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        return tokens

    def test_register_success(self):
        response = self.register_via_api(name='Test Manager', email='manager@test.com', role='manager')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        data = response.data['data']
        self.assertEqual(data['user']['email'], 'manager@test.com')
        self.assertEqual(data['user']['phone'], '+12025551234')
        self.assertEqual(data['active_role']['type'], 'manager')
        self.assertEqual(data['dashboard'], '/manager/')
        self.assertIn('access', data['tokens'])
        self.assertNotIn('password', data['user'])

    def test_register_weak_password(self):
        response = self.register_via_api(password='weak', password_confirm='weak')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error']['code'], 'VALIDATION_ERROR')
        self.assertIn('password', response.data['error']['fields'])

    def test_register_duplicate_email(self):
        self.register_via_api()
        response = self.register_via_api()

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error']['code'], 'DUPLICATE_EMAIL')

    def test_register_second_admin(self):
        self.register_via_api(email='admin@test.com', role='admin')
        response = self.register_via_api(email='admin2@test.com', role='admin')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error']['code'], 'ADMIN_EXISTS')

    def test_register_database_error(self):
        with patch.object(Staff.objects, 'create', side_effect=DatabaseError('staff insert failed')):
            response = self.register_via_api(role='driver')

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data['error']['code'], 'DATABASE_ERROR')
        self.assertEqual(Identity.objects.count(), 0)

    def test_admin_exists(self):
        url = reverse('admin-exists')
        self.assertFalse(self.client.get(url).data['data']['admin_exists'])

        self.register_via_api(email='admin@test.com', role='admin')

        self.assertTrue(self.client.get(url).data['data']['admin_exists'])

    def test_login_success(self):
        self.register_via_api(email='driver@test.com', role='driver')
        response = self.login_via_api('driver@test.com')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Login successful')
        self.assertEqual(response.data['data']['active_role']['type'], 'driver')
        self.assertEqual(response.data['data']['dashboard'], '/driver/')

    def test_login_invalid_credentials(self):
        self.register_via_api()
        response = self.login_via_api('customer@test.com', 'WrongPass123!')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error']['code'], 'INVALID_CREDENTIALS')

    def test_login_without_roles(self):
        IdentityFactory(email='orphan@example.com')
        response = self.login_via_api('orphan@example.com', DEFAULT_PASSWORD)

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error']['code'], 'ROLE_INTEGRITY_ERROR')

    def test_login_missing_fields(self):
        response = self.client.post(reverse('login'), {'email': 'customer@test.com'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data['error']['fields'])

    def test_profile(self):
        self.register_via_api(email='manager@test.com', role='manager')
        self.authenticate('manager@test.com')

        response = self.client.get(reverse('profile'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['roles'], ['manager', 'customer'])
        self.assertEqual(response.data['data']['active_role']['type'], 'manager')

    def test_profile_unauthenticated(self):
        response = self.client.get(reverse('profile'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_password_change(self):
        self.register_via_api()
        self.authenticate('customer@test.com')

        response = self.client.post(reverse('password-change'), {
            'old_password': 'TestPass123!',
            'new_password': 'NewPass456?',
            'new_password_confirm': 'NewPass456?',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.client.credentials()
        self.assertEqual(self.login_via_api('customer@test.com').status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(self.login_via_api('customer@test.com', 'NewPass456?').status_code, status.HTTP_200_OK)

    def test_password_change_wrong_old_password(self):
        self.register_via_api()
        self.authenticate('customer@test.com')

        response = self.client.post(reverse('password-change'), {
            'old_password': 'WrongPass123!',
            'new_password': 'NewPass456?',
            'new_password_confirm': 'NewPass456?',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('old_password', response.data['error']['fields'])

    def test_logout(self):
        self.register_via_api()
        tokens = self.authenticate('customer@test.com')

        response = self.client.post(reverse('logout'), {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post(reverse('token-refresh'), {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_without_token(self):
        self.register_via_api()
        self.authenticate('customer@test.com')

        response = self.client.post(reverse('logout'), {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'MISSING_TOKEN')
