from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from apps.cards.models import Card
from apps.cards.services import CardRegistry
from apps.core.exceptions import ApartmentAlreadyExists, ApartmentNotFound
from apps.elevator.models import CommandLedgerEntry
from apps.users.models import User

from .identifiers import build_apartment_id, parse_apartment_id, unit_number_from_apartment_id
from .models import Apartment
from .services import ApartmentLifecycleService


class ApartmentIdentifierTest(TestCase):

    def test_build_and_read_back(self):
        self.assertEqual(build_apartment_id('201'), 'apt-201')
        self.assertEqual(unit_number_from_apartment_id('apt-201'), '201')
        self.assertIsNone(unit_number_from_apartment_id('201'))

    def test_parse_takes_floor_from_first_digit(self):
        parsed = parse_apartment_id('apt-1203')

        self.assertEqual(parsed.floor, 1)
        self.assertEqual(parsed.unit_number, '1203')

    def test_parse_rejects_malformed_identifiers(self):
        for value in ['201', 'apt-', 'apt-2', 'apt-20a', 'APT-201', '']:
            self.assertIsNone(parse_apartment_id(value), value)


class ApartmentLifecycleServiceTest(TestCase):

    def test_create_provisions_default_cards(self):
        apartment = ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')

        self.assertEqual(apartment.apartment_identifier, 'apt-201')
        cards = Card.objects.filter(apartment_identifier='apt-201').order_by('card_type')
        self.assertEqual(
            [(card.card_type, card.name, card.is_active) for card in cards],
            [
                ('A', 'Tarjeta Principal', True),
                ('B', 'Tarjeta Secundaria', False),
                ('C', 'Tarjeta de Invitados', False),
            ],
        )

    def test_duplicate_apartment_is_a_conflict_without_new_rows(self):
        ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')

        with self.assertRaises(ApartmentAlreadyExists):
            ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')

        self.assertEqual(Apartment.objects.count(), 1)
        self.assertEqual(Card.objects.count(), 3)

    def test_create_keeps_cards_provisioned_at_registration(self):
        CardRegistry.provision_default_cards('apt-201')
        Card.objects.filter(apartment_identifier='apt-201', card_type='B').update(is_active=True)

        ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')

        self.assertEqual(Card.objects.filter(apartment_identifier='apt-201').count(), 3)
        self.assertTrue(Card.objects.get(apartment_identifier='apt-201', card_type='B').is_active)

    def test_delete_cascades_to_cards_and_ledger(self):
        apartment = ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')
        ApartmentLifecycleService.create_apartment(floor=3, unit_number='305')
        for unit_number in ['201', '201', '305']:
            CommandLedgerEntry.objects.create(
                unit_number=unit_number, card_type='A', action='ACTIVATE',
                success=True, created_at=timezone.now(),
            )

        ApartmentLifecycleService.delete_apartment(apartment.id)

        self.assertFalse(Apartment.objects.filter(unit_number='201').exists())
        self.assertFalse(Card.objects.filter(apartment_identifier='apt-201').exists())
        self.assertFalse(CommandLedgerEntry.objects.filter(unit_number='201').exists())
        self.assertEqual(Card.objects.filter(apartment_identifier='apt-305').count(), 3)
        self.assertEqual(CommandLedgerEntry.objects.filter(unit_number='305').count(), 1)

    def test_delete_missing_apartment(self):
        with self.assertRaises(ApartmentNotFound):
            ApartmentLifecycleService.delete_apartment(99999)

    def test_update_unit_number_rekeys_cards(self):
        apartment = ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')
        CommandLedgerEntry.objects.create(
            unit_number='201', card_type='A', action='ACTIVATE', success=True, created_at=timezone.now(),
        )

        ApartmentLifecycleService.update_apartment(apartment, unit_number='202')

        self.assertEqual(Card.objects.filter(apartment_identifier='apt-202').count(), 3)
        self.assertFalse(Card.objects.filter(apartment_identifier='apt-201').exists())
        self.assertEqual(CommandLedgerEntry.objects.get().unit_number, '201')

    def test_update_unit_number_moves_residents(self):
        apartment = ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')
        resident = User.objects.create_user(
            email='ana@example.com', password='secreto123', name='Ana',
            apartment_identifier='apt-201', floor=2, unit_number='201',
        )

        ApartmentLifecycleService.update_apartment(apartment, floor=3, unit_number='302')

        resident.refresh_from_db()
        self.assertEqual(resident.apartment_identifier, 'apt-302')
        self.assertEqual(resident.unit_number, '302')
        self.assertEqual(resident.floor, 3)

        client = APIClient()
        client.force_authenticate(user=resident)
        response = client.get('/api/users/stats/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['apartmentId'], 'apt-302')
        self.assertEqual(response.data['cards'], {'totalCards': 3, 'activeCards': 1})

    def test_update_to_existing_unit_number_is_a_conflict(self):
        apartment = ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')
        ApartmentLifecycleService.create_apartment(floor=2, unit_number='202')

        with self.assertRaises(ApartmentAlreadyExists):
            ApartmentLifecycleService.update_apartment(apartment, unit_number='202')

        apartment.refresh_from_db()
        self.assertEqual(apartment.unit_number, '201')


class ApartmentEndpointsTest(TestCase):
    """
    Tests for /api/apartments/
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email='admin@example.com', password='secreto123', name='Admin')
        self.client.force_authenticate(user=self.user)

    def test_create_apartment(self):
        response = self.client.post('/api/apartments/', {'floor': 2, 'unitNumber': '201'}, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['apartmentId'], 'apt-201')
        self.assertEqual(len(response.data['cards']), 3)
        self.assertEqual(response.data['stats'], {'totalCards': 3, 'activeCards': 1})

    def test_create_duplicate_returns_409(self):
        self.client.post('/api/apartments/', {'floor': 2, 'unitNumber': '201'}, format='json')

        response = self.client.post('/api/apartments/', {'floor': 2, 'unitNumber': '201'}, format='json')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data['error'], 'Conflict')
        self.assertEqual(Apartment.objects.count(), 1)
        self.assertEqual(Card.objects.count(), 3)

    def test_create_rejects_floor_out_of_range(self):
        response = self.client.post('/api/apartments/', {'floor': 51, 'unitNumber': '5101'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('floor', response.data['details'])
        self.assertEqual(Apartment.objects.count(), 0)

    def test_list_includes_card_stats(self):
        ApartmentLifecycleService.create_apartment(floor=3, unit_number='305')
        ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')

        response = self.client.get('/api/apartments/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([item['unitNumber'] for item in response.data], ['201', '305'])
        self.assertEqual(response.data[0]['stats'], {'totalCards': 3, 'activeCards': 1})

    def test_list_by_floor(self):
        ApartmentLifecycleService.create_apartment(floor=2, unit_number='202')
        ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')
        ApartmentLifecycleService.create_apartment(floor=3, unit_number='305')

        response = self.client.get('/api/apartments/floor/2/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['total'], 2)
        self.assertEqual([item['unitNumber'] for item in response.data['apartments']], ['201', '202'])

        response = self.client.get('/api/apartments/floor/0/')
        self.assertEqual(response.status_code, 400)

    def test_retrieve_includes_cards(self):
        apartment = ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')

        response = self.client.get(f'/api/apartments/{apartment.id}/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([card['cardType'] for card in response.data['cards']], ['A', 'B', 'C'])

    def test_update_apartment(self):
        apartment = ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')

        response = self.client.patch(f'/api/apartments/{apartment.id}/', {'floor': 3}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['floor'], 3)

        response = self.client.put(f'/api/apartments/{apartment.id}/', {}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_delete_apartment(self):
        apartment = ApartmentLifecycleService.create_apartment(floor=2, unit_number='201')
        CommandLedgerEntry.objects.create(
            unit_number='201', card_type='A', action='ACTIVATE', success=True, created_at=timezone.now(),
        )

        response = self.client.delete(f'/api/apartments/{apartment.id}/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(Card.objects.count(), 0)
        self.assertEqual(CommandLedgerEntry.objects.count(), 0)

        response = self.client.get(f'/api/apartments/{apartment.id}/')
        self.assertEqual(response.status_code, 404)

        response = self.client.delete(f'/api/apartments/{apartment.id}/')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['error'], 'NotFound')


class SeedBuildingCommandTest(TestCase):

    def test_seed_creates_apartments_and_cards(self):
        out = StringIO()

        call_command('seed_building', floors=2, units_per_floor=3, stdout=out)

        self.assertEqual(
            list(Apartment.objects.values_list('unit_number', flat=True)),
            ['101', '102', '103', '201', '202', '203'],
        )
        self.assertEqual(Card.objects.count(), 18)
        self.assertIn('6 apartamentos creados', out.getvalue())

    def test_seed_is_idempotent(self):
        call_command('seed_building', floors=1, units_per_floor=2, stdout=StringIO())
        out = StringIO()

        call_command('seed_building', floors=1, units_per_floor=2, stdout=out)

        self.assertEqual(Apartment.objects.count(), 2)
        self.assertIn('0 apartamentos creados', out.getvalue())
