from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from apps.cards.models import Card
from apps.cards.services import CardRegistry
from apps.elevator.models import CommandLedgerEntry

from .models import User


class UserManagerTest(TestCase):

    def test_create_user_uses_email_as_login(self):
        user = User.objects.create_user(email='Ana@Example.COM', password='secreto123', name='Ana')

        self.assertEqual(user.email, 'Ana@example.com')
        self.assertTrue(user.check_password('secreto123'))
        self.assertFalse(user.is_staff)

    def test_create_superuser(self):
        user = User.objects.create_superuser(email='root@example.com', password='secreto123', name='Root')

        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_superuser)

    def test_email_is_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='secreto123', name='Nadie')


class ProfileEndpointsTest(TestCase):
    """
    Tests for /api/users/
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email='ana@example.com',
            password='secreto123',
            name='Ana',
            apartment_identifier='apt-201',
            floor=2,
            unit_number='201',
        )
        self.client.force_authenticate(user=self.user)

    def test_get_profile(self):
        response = self.client.get('/api/users/profile/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['email'], 'ana@example.com')
        self.assertEqual(response.data['user']['apartmentId'], 'apt-201')
        self.assertNotIn('password', response.data['user'])

    def test_partial_update(self):
        response = self.client.patch('/api/users/profile/', {'name': 'Ana María'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['name'], 'Ana María')
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, 'Ana María')
        self.assertEqual(self.user.email, 'ana@example.com')

    def test_password_change(self):
        response = self.client.put('/api/users/profile/', {'password': 'nueva-clave'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('nueva-clave'))

    def test_short_password_is_rejected(self):
        response = self.client.patch('/api/users/profile/', {'password': '123'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('password', response.data['details'])

    def test_email_in_use_is_a_conflict(self):
        User.objects.create_user(email='luis@example.com', password='secreto123', name='Luis')

        response = self.client.patch('/api/users/profile/', {'email': 'luis@example.com'}, format='json')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data['error'], 'Conflict')

    def test_empty_update_is_rejected(self):
        response = self.client.patch('/api/users/profile/', {}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'ValidationError')

    def test_delete_account_keeps_cards_and_ledger(self):
        CardRegistry.provision_default_cards('apt-201')
        CommandLedgerEntry.objects.create(
            unit_number='201', card_type='A', action='ACTIVATE', success=True, created_at=timezone.now(),
        )

        response = self.client.delete('/api/users/profile/')

        self.assertEqual(response.status_code, 200)
        self.assertFalse(User.objects.filter(email='ana@example.com').exists())
        self.assertEqual(Card.objects.filter(apartment_identifier='apt-201').count(), 3)
        self.assertEqual(CommandLedgerEntry.objects.count(), 1)

    def test_user_stats(self):
        CardRegistry.provision_default_cards('apt-201')
        now = timezone.now()
        CommandLedgerEntry.objects.create(unit_number='201', card_type='A', action='ACTIVATE', success=True, created_at=now)
        CommandLedgerEntry.objects.create(unit_number='201', card_type='B', action='ACTIVATE', success=False, created_at=now)
        CommandLedgerEntry.objects.create(unit_number='305', card_type='A', action='ACTIVATE', success=True, created_at=now)

        response = self.client.get('/api/users/stats/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['cards'], {'totalCards': 3, 'activeCards': 1})
        self.assertEqual(response.data['commands']['totalCount'], 2)
        self.assertEqual(response.data['commands']['successCount'], 1)
