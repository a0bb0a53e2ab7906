from datetime import timedelta
from unittest import mock

from django.db import DatabaseError, transaction
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from apps.cards.models import Card
from apps.cards.services import CardRegistry
from apps.core.exceptions import ImmutableLedgerEntry
from apps.users.models import User

from .models import CommandLedgerEntry
from .services import CommandAuthorizer, CommandLedger, DecisionReason
from .statistics import ElevatorStatistics


def make_entry(unit_number, card_type='A', success=True, action='ACTIVATE', created_at=None):
    return CommandLedgerEntry.objects.create(
        unit_number=unit_number,
        card_type=card_type,
        action=action,
        success=success,
        created_at=created_at or timezone.now(),
    )


class CommandAuthorizerTest(TestCase):

    def setUp(self):
        CardRegistry.provision_default_cards('apt-201')

    def test_active_card_is_allowed_and_touched(self):
        before = timezone.now()

        with transaction.atomic():
            decision = CommandAuthorizer.authorize('201', 'A', 'ACTIVATE')

        self.assertTrue(decision.allowed)
        self.assertEqual(decision.reason, DecisionReason.AUTHORIZED)
        card = Card.objects.get(apartment_identifier='apt-201', card_type='A')
        self.assertIsNotNone(card.last_used_at)
        self.assertGreaterEqual(card.last_used_at, before)

    def test_inactive_card_is_denied(self):
        with transaction.atomic():
            decision = CommandAuthorizer.authorize('201', 'B', 'ACTIVATE')

        self.assertFalse(decision.allowed)
        self.assertEqual(decision.reason, DecisionReason.CARD_INACTIVE)
        card = Card.objects.get(apartment_identifier='apt-201', card_type='B')
        self.assertIsNone(card.last_used_at)

    def test_missing_card_is_denied(self):
        with transaction.atomic():
            decision = CommandAuthorizer.authorize('999', 'A', 'ACTIVATE')

        self.assertFalse(decision.allowed)
        self.assertEqual(decision.reason, DecisionReason.CARD_NOT_FOUND)
        self.assertIsNone(decision.card)

    def test_decision_follows_current_active_flag(self):
        card = Card.objects.get(apartment_identifier='apt-201', card_type='A')
        CardRegistry.set_active(card.id, False)

        with transaction.atomic():
            decision = CommandAuthorizer.authorize('201', 'A', 'ACTIVATE')

        self.assertFalse(decision.allowed)
        self.assertEqual(decision.reason, DecisionReason.CARD_INACTIVE)


class SendCommandEndpointTest(TestCase):
    """
    Tests for POST /api/elevator/command/
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email='residente@example.com', password='secreto123', name='Residente')
        self.client.force_authenticate(user=self.user)
        CardRegistry.provision_default_cards('apt-201')

    def post_command(self, unit_number='201', card_type='A', action='ACTIVATE'):
        return self.client.post('/api/elevator/command/', {
            'unitNumber': unit_number,
            'cardType': card_type,
            'action': action,
        }, format='json')

    def test_active_card_command_is_allowed(self):
        before = timezone.now()

        response = self.post_command()

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data['allowed'])
        self.assertEqual(response.data['entry']['unitNumber'], '201')
        self.assertTrue(response.data['entry']['success'])

        self.assertEqual(CommandLedgerEntry.objects.count(), 1)
        self.assertTrue(CommandLedgerEntry.objects.get().success)
        card = Card.objects.get(apartment_identifier='apt-201', card_type='A')
        self.assertGreaterEqual(card.last_used_at, before)

    def test_inactive_card_returns_400_and_records_failure(self):
        response = self.post_command(card_type='C')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'CardInactive')
        self.assertFalse(response.data['allowed'])

        entry = CommandLedgerEntry.objects.get()
        self.assertFalse(entry.success)
        self.assertEqual(entry.card_type, 'C')

    def test_missing_card_returns_404_and_records_failure(self):
        response = self.post_command(unit_number='999')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['error'], 'CardNotFound')

        entry = CommandLedgerEntry.objects.get()
        self.assertFalse(entry.success)
        self.assertEqual(entry.unit_number, '999')

    def test_legacy_action_names_are_accepted(self):
        response = self.post_command(action='APAGAR')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['entry']['action'], 'DEACTIVATE')
        self.assertEqual(CommandLedgerEntry.objects.get().action, 'DEACTIVATE')

    def test_invalid_payload_is_rejected_without_ledger_entry(self):
        response = self.post_command(action='SUBIR')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'ValidationError')
        self.assertIn('action', response.data['details'])

        response = self.post_command(card_type='D')
        self.assertEqual(response.status_code, 400)

        self.assertEqual(CommandLedgerEntry.objects.count(), 0)

    def test_storage_fault_records_failed_attempt(self):
        with mock.patch(
            'apps.elevator.services.CardRegistry.touch_last_used',
            side_effect=DatabaseError('conexión perdida'),
        ):
            response = self.post_command()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data['error'], 'Internal')

        entry = CommandLedgerEntry.objects.get()
        self.assertFalse(entry.success)
        card = Card.objects.get(apartment_identifier='apt-201', card_type='A')
        self.assertIsNone(card.last_used_at)

    def test_failed_ledger_write_never_reports_success(self):
        with mock.patch(
            'apps.elevator.services.CommandLedger.record',
            side_effect=DatabaseError('conexión perdida'),
        ):
            response = self.post_command()

        self.assertEqual(response.status_code, 500)
        self.assertNotIn('allowed', response.data)
        self.assertEqual(CommandLedgerEntry.objects.count(), 0)
        card = Card.objects.get(apartment_identifier='apt-201', card_type='A')
        self.assertIsNone(card.last_used_at)

    def test_every_attempt_writes_exactly_one_entry(self):
        self.post_command()
        self.post_command(card_type='B')
        self.post_command(unit_number='777')

        self.assertEqual(CommandLedgerEntry.objects.count(), 3)
        self.assertEqual(CommandLedgerEntry.objects.filter(success=True).count(), 1)

    def test_requires_authentication(self):
        response = APIClient().post('/api/elevator/command/', {
            'unitNumber': '201', 'cardType': 'A', 'action': 'ACTIVATE',
        }, format='json')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data['error'], 'Unauthorized')
        self.assertEqual(CommandLedgerEntry.objects.count(), 0)


class CommandLedgerTest(TestCase):

    def setUp(self):
        now = timezone.now()
        self.entries = [
            make_entry('201', created_at=now - timedelta(minutes=5 - i))
            for i in range(5)
        ]

    def test_pagination_returns_newest_first_with_total(self):
        page, total = CommandLedger.list_entries(limit=2, offset=0)

        self.assertEqual(total, 5)
        self.assertEqual([entry.id for entry in page], [self.entries[4].id, self.entries[3].id])

    def test_offset_skips_newest_entries(self):
        page, total = CommandLedger.list_entries(limit=2, offset=4)

        self.assertEqual(total, 5)
        self.assertEqual([entry.id for entry in page], [self.entries[0].id])

    def test_filters_by_unit_and_time_range(self):
        make_entry('305')
        from_time = self.entries[1].created_at
        to_time = self.entries[3].created_at

        page, total = CommandLedger.list_entries(unit_number='305')
        self.assertEqual(total, 1)

        page, total = CommandLedger.list_entries(unit_number='201', from_time=from_time, to_time=to_time)
        self.assertEqual(total, 3)
        self.assertEqual([entry.id for entry in page], [e.id for e in reversed(self.entries[1:4])])

    def test_unknown_filter_is_rejected(self):
        with self.assertRaises(ValueError):
            CommandLedger.filtered(success=True)

    def test_latest_entry(self):
        self.assertEqual(CommandLedger.latest_entry().id, self.entries[4].id)
        CommandLedgerEntry.objects.all().delete()
        self.assertIsNone(CommandLedger.latest_entry())

    def test_entries_are_immutable(self):
        entry = self.entries[0]
        entry.success = False

        with self.assertRaises(ImmutableLedgerEntry):
            entry.save()

        entry.refresh_from_db()
        self.assertTrue(entry.success)

    def test_purge_unit_only_removes_that_unit(self):
        make_entry('305')

        deleted = CommandLedger.purge_unit('201')

        self.assertEqual(deleted, 5)
        self.assertEqual(list(CommandLedgerEntry.objects.values_list('unit_number', flat=True)), ['305'])


class ElevatorStatisticsTest(TestCase):

    def test_apartments_are_ordered_by_total_commands(self):
        now = timezone.now()
        for i in range(5):
            make_entry('201', success=i % 2 == 0, created_at=now - timedelta(seconds=i))
        for i in range(2):
            make_entry('305', created_at=now - timedelta(seconds=i))

        stats = ElevatorStatistics.detailed_stats(lookback_days=7)

        by_apartment = stats['by_apartment']
        self.assertEqual([row['unit_number'] for row in by_apartment], ['201', '305'])
        self.assertEqual(by_apartment[0]['total_commands'], 5)
        self.assertEqual(by_apartment[0]['successful_commands'], 3)
        self.assertEqual(by_apartment[1]['total_commands'], 2)

    def test_apartment_totals_are_lifetime_but_scoped_to_window_activity(self):
        now = timezone.now()
        make_entry('201', created_at=now)
        make_entry('201', created_at=now - timedelta(days=30))
        make_entry('999', created_at=now - timedelta(days=30))

        by_apartment = ElevatorStatistics.detailed_stats(lookback_days=7)['by_apartment']

        self.assertEqual(len(by_apartment), 1)
        self.assertEqual(by_apartment[0]['unit_number'], '201')
        self.assertEqual(by_apartment[0]['total_commands'], 2)
        self.assertEqual(by_apartment[0]['commands_in_window'], 1)

    def test_card_types_are_always_reported(self):
        make_entry('201', card_type='B', success=False)
        make_entry('201', card_type='B', success=True)

        by_card_type = ElevatorStatistics.detailed_stats(lookback_days=7)['by_card_type']

        self.assertEqual([row['card_type'] for row in by_card_type], ['A', 'B', 'C'])
        self.assertEqual(by_card_type[0]['total_commands'], 0)
        self.assertEqual(by_card_type[1]['total_commands'], 2)
        self.assertEqual(by_card_type[1]['successful_commands'], 1)

    def test_days_are_reported_newest_first(self):
        now = timezone.now()
        make_entry('201', created_at=now)
        make_entry('201', created_at=now - timedelta(days=2))
        make_entry('201', success=False, created_at=now - timedelta(days=2))

        by_day = ElevatorStatistics.detailed_stats(lookback_days=7)['by_day']

        self.assertEqual(len(by_day), 2)
        self.assertGreater(by_day[0]['day'], by_day[1]['day'])
        self.assertEqual(by_day[1]['total_commands'], 2)
        self.assertEqual(by_day[1]['successful_commands'], 1)

    def test_zero_lookback_only_counts_today(self):
        now = timezone.now()
        make_entry('201', created_at=now)
        make_entry('305', created_at=now - timedelta(days=2))

        stats = ElevatorStatistics.detailed_stats(lookback_days=0)

        self.assertEqual([row['unit_number'] for row in stats['by_apartment']], ['201'])
        self.assertEqual(len(stats['by_day']), 1)

    def test_negative_lookback_is_rejected(self):
        with self.assertRaises(ValueError):
            ElevatorStatistics.detailed_stats(lookback_days=-1)

    def test_summary_counts(self):
        now = timezone.now()
        make_entry('201', created_at=now)
        make_entry('201', success=False, created_at=now)
        make_entry('305', created_at=now - timedelta(days=3))
        make_entry('305', created_at=now - timedelta(days=10))

        summary = ElevatorStatistics.summary()

        self.assertEqual(summary, {
            'total_count': 4,
            'success_count': 3,
            'count_today': 2,
            'count_last_7_days': 3,
        })
        self.assertEqual(ElevatorStatistics.summary(unit_number='305')['total_count'], 2)


class ElevatorReadEndpointsTest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email='residente@example.com', password='secreto123', name='Residente')
        self.client.force_authenticate(user=self.user)
        now = timezone.now()
        for i in range(5):
            make_entry('201', created_at=now - timedelta(seconds=10 - i))
        make_entry('305', success=False, created_at=now)

    def test_status_reports_last_entry_and_summary(self):
        response = self.client.get('/api/elevator/status/')

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data['connected'])
        self.assertEqual(response.data['lastEntry']['unitNumber'], '305')
        self.assertEqual(response.data['summary']['totalCount'], 6)
        self.assertEqual(response.data['summary']['successCount'], 5)

    def test_logs_are_paginated(self):
        response = self.client.get('/api/elevator/logs/', {'limit': 2, 'offset': 2})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data['entries']), 2)
        self.assertEqual(response.data['pagination'], {'total': 6, 'limit': 2, 'offset': 2, 'page': 2})

    def test_logs_filter_by_unit(self):
        response = self.client.get('/api/elevator/logs/', {'unitNumber': '305'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['pagination']['total'], 1)
        self.assertEqual(response.data['entries'][0]['unitNumber'], '305')

    def test_logs_reject_invalid_paging(self):
        response = self.client.get('/api/elevator/logs/', {'limit': 0})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'ValidationError')

        response = self.client.get('/api/elevator/logs/', {'offset': -1})
        self.assertEqual(response.status_code, 400)

    def test_stats_endpoint(self):
        response = self.client.get('/api/elevator/stats/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['lookbackDays'], 7)
        self.assertEqual(response.data['byApartment'][0]['unitNumber'], '201')
        self.assertEqual(response.data['byApartment'][0]['totalCommands'], 5)
        self.assertEqual(len(response.data['byCardType']), 3)
        self.assertEqual(response.data['byDay'][0]['totalCommands'], 6)

    def test_stats_rejects_negative_lookback(self):
        response = self.client.get('/api/elevator/stats/', {'lookbackDays': -1})

        self.assertEqual(response.status_code, 400)
