from datetime import timedelta

from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from apps.cards.models import Card
from apps.cards.services import CardRegistry
from apps.users.models import User


class RegisterEndpointTest(TestCase):
    """
    Tests for POST /api/auth/register/
    """

    def setUp(self):
        self.client = APIClient()

    def register(self, **overrides):
        payload = {
            'email': 'ana@example.com',
            'password': 'secreto123',
            'name': 'Ana',
            'apartmentId': 'apt-305',
        }
        payload.update(overrides)
        return self.client.post('/api/auth/register/', payload, format='json')

    def test_register_creates_user_and_default_cards(self):
        response = self.register()

        self.assertEqual(response.status_code, 201)
        self.assertIn('access', response.data['tokens'])
        self.assertIn('refresh', response.data['tokens'])
        self.assertEqual(response.data['user']['apartmentId'], 'apt-305')

        user = User.objects.get(email='ana@example.com')
        self.assertEqual(user.floor, 3)
        self.assertEqual(user.unit_number, '305')
        self.assertEqual(Card.objects.filter(apartment_identifier='apt-305').count(), 3)

    def test_register_leaves_existing_cards_alone(self):
        CardRegistry.provision_default_cards('apt-305')
        Card.objects.filter(apartment_identifier='apt-305', card_type='C').update(is_active=True)

        response = self.register()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(Card.objects.filter(apartment_identifier='apt-305').count(), 3)
        self.assertTrue(Card.objects.get(apartment_identifier='apt-305', card_type='C').is_active)

    def test_duplicate_email_is_a_conflict(self):
        self.register()

        response = self.register(apartmentId='apt-201')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data['error'], 'Conflict')
        self.assertEqual(User.objects.count(), 1)
        self.assertFalse(Card.objects.filter(apartment_identifier='apt-201').exists())

    def test_malformed_apartment_id_is_rejected(self):
        response = self.register(apartmentId='departamento-5')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'ValidationError')
        self.assertIn('apartmentId', response.data['details'])
        self.assertEqual(User.objects.count(), 0)

    def test_short_password_is_rejected(self):
        response = self.register(password='123')

        self.assertEqual(response.status_code, 400)
        self.assertIn('password', response.data['details'])


class TokenFlowTest(TestCase):
    """
    Tests for login, logout, refresh and token validation
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email='ana@example.com', password='secreto123', name='Ana',
            apartment_identifier='apt-201', floor=2, unit_number='201',
        )

    def login(self, password='secreto123'):
        return self.client.post('/api/auth/login/', {
            'email': 'ana@example.com', 'password': password,
        }, format='json')

    def test_login_returns_user_and_tokens(self):
        response = self.login()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['email'], 'ana@example.com')
        self.assertIn('access', response.data['tokens'])

        token = AccessToken(response.data['tokens']['access'])
        self.assertEqual(str(token['userId']), str(self.user.id))
        self.assertEqual(token['email'], 'ana@example.com')

    def test_login_with_wrong_password(self):
        response = self.login(password='incorrecta')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data['error'], 'Unauthorized')

    def test_me_with_valid_token(self):
        access = self.login().data['tokens']['access']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')

        response = self.client.get('/api/auth/me/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['unitNumber'], '201')

    def test_missing_token_is_unauthorized(self):
        response = self.client.get('/api/auth/me/')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data['error'], 'Unauthorized')

    def test_expired_token(self):
        token = AccessToken.for_user(self.user)
        token.set_exp(lifetime=-timedelta(minutes=5))
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = self.client.get('/api/auth/me/')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data['error'], 'TokenExpired')

    def test_malformed_token_is_forbidden(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer no-es-un-jwt')

        response = self.client.get('/api/auth/me/')

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['error'], 'InvalidToken')

    def test_refresh_issues_new_access_token(self):
        refresh = self.login().data['tokens']['refresh']

        response = self.client.post('/api/auth/token/refresh/', {'refresh': refresh}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertIn('access', response.data)

    def test_logout_blacklists_refresh_token(self):
        tokens = self.login().data['tokens']
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        response = self.client.post('/api/auth/logout/', {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(response.status_code, 200)

        response = self.client.post('/api/auth/token/refresh/', {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['error'], 'InvalidToken')

    def test_logout_requires_refresh_token(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.post('/api/auth/logout/', {}, format='json')

        self.assertEqual(response.status_code, 400)
