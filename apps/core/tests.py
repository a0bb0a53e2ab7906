import os
import subprocess
import sys
from unittest import mock

from django.conf import settings
from django.test import TestCase, override_settings
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.test import APIClient, APIRequestFactory

from apps.users.models import User

from .exceptions import ApartmentNotFound, CardAlreadyExists, CommandDispatchError
from .handlers import api_exception_handler


class HealthCheckTest(TestCase):

    def test_health_check_does_not_require_authentication(self):
        for url in ['/health/', '/api/health/']:
            response = APIClient().get(url)

            self.assertEqual(response.status_code, 200)
            body = response.json()
            self.assertEqual(body['status'], 'OK')
            self.assertEqual(body['database'], 'healthy')
            self.assertIn('timestamp', body)


class ExceptionHandlerTest(TestCase):

    def setUp(self):
        self.context = {'view': mock.Mock(), 'request': None}

    def test_domain_errors_carry_kind_and_message(self):
        response = api_exception_handler(ApartmentNotFound(), self.context)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data, {'error': 'NotFound', 'message': 'Apartamento no encontrado'})

        response = api_exception_handler(CardAlreadyExists('Duplicada'), self.context)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data, {'error': 'Conflict', 'message': 'Duplicada'})

    def test_validation_errors_include_details(self):
        exc = ValidationError({'floor': ['Debe ser mayor o igual a 1']})

        response = api_exception_handler(exc, self.context)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'ValidationError')
        self.assertEqual(response.data['message'], 'Debe ser mayor o igual a 1')
        self.assertIn('floor', response.data['details'])

    def test_drf_not_found(self):
        response = api_exception_handler(NotFound(), self.context)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['error'], 'NotFound')

    @override_settings(DEBUG=False)
    def test_unexpected_errors_hide_details(self):
        response = api_exception_handler(RuntimeError('fallo de conexión'), self.context)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {'error': 'Internal', 'message': 'Algo salió mal'})

    def test_unexpected_error_from_a_view(self):
        client = APIClient()
        client.force_authenticate(user=User.objects.create_user(
            email='ana@example.com', password='secreto123', name='Ana',
        ))

        with mock.patch(
            'apps.elevator.views.ElevatorStatistics.summary',
            side_effect=RuntimeError('fallo de conexión'),
        ):
            response = client.get('/api/elevator/status/')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data['error'], 'Internal')

    def test_errors_are_logged_with_the_request_path(self):
        request = APIRequestFactory().post('/api/elevator/command/')
        context = {'view': mock.Mock(), 'request': request}

        with self.assertLogs('apps.core.handlers', level='ERROR') as logs:
            api_exception_handler(CommandDispatchError(), context)

        self.assertIn('/api/elevator/command/', logs.output[0])


class AppLoadingTest(TestCase):

    def test_project_loads_in_a_fresh_interpreter(self):
        # Carga las apps desde cero, como lo hace un worker de gunicorn
        script = (
            "import django; django.setup(); "
            "from django.core.management import call_command; call_command('check')"
        )
        result = subprocess.run(
            [sys.executable, '-c', script],
            cwd=settings.BASE_DIR,
            env={**os.environ, 'DJANGO_SETTINGS_MODULE': 'elevator_access_project.settings'},
            capture_output=True,
            text=True,
            timeout=120,
        )

        self.assertEqual(result.returncode, 0, result.stderr)
