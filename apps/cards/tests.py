from django.db import IntegrityError, transaction
from django.test import TestCase
from rest_framework.test import APIClient

from apps.core.exceptions import CardAlreadyExists, CardNotFound
from apps.users.models import User

from .models import Card
from .services import CardRegistry


class CardRegistryTest(TestCase):

    def test_provision_default_cards(self):
        cards = CardRegistry.provision_default_cards('apt-201')

        self.assertEqual(
            [(card.card_type, card.name, card.is_active) for card in cards],
            [
                ('A', 'Tarjeta Principal', True),
                ('B', 'Tarjeta Secundaria', False),
                ('C', 'Tarjeta de Invitados', False),
            ],
        )

    def test_provision_skips_existing_card_types(self):
        CardRegistry.create_card('apt-201', 'B', 'Tarjeta de Ana', is_active=True)

        created = CardRegistry.provision_default_cards('apt-201')

        self.assertEqual([card.card_type for card in created], ['A', 'C'])
        card_b = Card.objects.get(apartment_identifier='apt-201', card_type='B')
        self.assertEqual(card_b.name, 'Tarjeta de Ana')
        self.assertTrue(card_b.is_active)

    def test_create_duplicate_card_is_a_conflict(self):
        CardRegistry.create_card('apt-201', 'A', 'Principal')

        with self.assertRaises(CardAlreadyExists):
            CardRegistry.create_card('apt-201', 'A', 'Otra')

        self.assertEqual(Card.objects.count(), 1)

    def test_database_rejects_duplicate_card_type(self):
        Card.objects.create(apartment_identifier='apt-201', card_type='A', name='Principal')

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Card.objects.create(apartment_identifier='apt-201', card_type='A', name='Duplicada')

    def test_find_card(self):
        card = CardRegistry.create_card('apt-201', 'C', 'Invitados')

        self.assertEqual(CardRegistry.find_card('apt-201', 'C'), card)
        self.assertIsNone(CardRegistry.find_card('apt-201', 'A'))

    def test_set_active(self):
        card = CardRegistry.create_card('apt-201', 'B', 'Secundaria')

        updated = CardRegistry.set_active(card.id, True)

        self.assertTrue(updated.is_active)
        with self.assertRaises(CardNotFound):
            CardRegistry.set_active(99999, True)

    def test_rekey_moves_cards(self):
        CardRegistry.provision_default_cards('apt-201')

        moved = CardRegistry.rekey('apt-201', 'apt-202')

        self.assertEqual(moved, 3)
        self.assertEqual(Card.objects.filter(apartment_identifier='apt-202').count(), 3)


class CardEndpointsTest(TestCase):
    """
    Tests for /api/cards/
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email='admin@example.com', password='secreto123', name='Admin')
        self.client.force_authenticate(user=self.user)
        CardRegistry.provision_default_cards('apt-201')
        CardRegistry.provision_default_cards('apt-305')

    def test_list_and_filter(self):
        response = self.client.get('/api/cards/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 6)

        response = self.client.get('/api/cards/', {'apartmentId': 'apt-305', 'isActive': 'true'})
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['cardType'], 'A')
        self.assertEqual(response.data[0]['cardTypeLabel'], 'Principal')

    def test_cards_by_apartment(self):
        response = self.client.get('/api/cards/apartment/apt-201/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['total'], 3)
        self.assertEqual([card['cardType'] for card in response.data['cards']], ['A', 'B', 'C'])

    def test_create_card_starts_inactive(self):
        response = self.client.post('/api/cards/', {
            'apartmentId': 'apt-410', 'cardType': 'B', 'name': 'Tarjeta Extra',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertFalse(response.data['isActive'])
        self.assertEqual(response.data['apartmentId'], 'apt-410')

    def test_create_duplicate_card_returns_409(self):
        response = self.client.post('/api/cards/', {
            'apartmentId': 'apt-201', 'cardType': 'A', 'name': 'Otra',
        }, format='json')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data['error'], 'Conflict')

    def test_create_card_rejects_malformed_apartment_id(self):
        for apartment_id in ['410', 'apt-', 'depto-410']:
            response = self.client.post('/api/cards/', {
                'apartmentId': apartment_id, 'cardType': 'B', 'name': 'Tarjeta Extra',
            }, format='json')

            self.assertEqual(response.status_code, 400, apartment_id)
            self.assertIn('apartmentId', response.data['details'])
        self.assertEqual(Card.objects.count(), 6)

    def test_activate_and_deactivate(self):
        card = Card.objects.get(apartment_identifier='apt-201', card_type='B')

        response = self.client.post(f'/api/cards/{card.id}/activate/')
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data['isActive'])

        response = self.client.post(f'/api/cards/{card.id}/deactivate/')
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data['isActive'])

        response = self.client.post('/api/cards/99999/activate/')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['error'], 'NotFound')

    def test_partial_update(self):
        card = Card.objects.get(apartment_identifier='apt-201', card_type='C')

        response = self.client.patch(f'/api/cards/{card.id}/', {'name': 'Visitas', 'isActive': True}, format='json')

        self.assertEqual(response.status_code, 200)
        card.refresh_from_db()
        self.assertEqual(card.name, 'Visitas')
        self.assertTrue(card.is_active)

    def test_empty_update_is_rejected(self):
        card = Card.objects.get(apartment_identifier='apt-201', card_type='C')

        response = self.client.put(f'/api/cards/{card.id}/', {}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'ValidationError')

    def test_delete_card(self):
        card = Card.objects.get(apartment_identifier='apt-201', card_type='C')

        response = self.client.delete(f'/api/cards/{card.id}/')

        self.assertEqual(response.status_code, 204)
        self.assertFalse(Card.objects.filter(id=card.id).exists())
