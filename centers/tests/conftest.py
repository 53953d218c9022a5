import datetime

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from centers.models import Appointment, DiagnosticCenter, DiagnosticTest, Role, User
from centers.tokens import get_token_codec

PASSWORD = 'P@ssw0rd1'


@pytest.fixture(autouse=True)
def _fast_hashing_and_media(settings, tmp_path):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    settings.MEDIA_ROOT = tmp_path / 'media'


@pytest.fixture
def make_user(db):
    def _make(email, role=Role.PATIENT, **extra):
        extra.setdefault('name', email.split('@')[0])
        return User.objects.create_user(email=email, password=PASSWORD, role=role, **extra)
    return _make


@pytest.fixture
def admin_a(make_user):
    return make_user('admin.a@example.com', Role.DIAGNOSTIC_CENTER_ADMIN)


@pytest.fixture
def admin_b(make_user):
    return make_user('admin.b@example.com', Role.DIAGNOSTIC_CENTER_ADMIN)


@pytest.fixture
def center_a(admin_a):
    return DiagnosticCenter.objects.create(name='Center One', city='Springfield', admin=admin_a)


@pytest.fixture
def center_b(admin_b):
    return DiagnosticCenter.objects.create(name='Center Two', city='Shelbyville', admin=admin_b)


@pytest.fixture
def patient(make_user):
    return make_user('patient@example.com', Role.PATIENT, phone='555-0100')


@pytest.fixture
def make_test():
    def _make(center, name='CBC Panel', **extra):
        extra.setdefault('category', 'blood')
        extra.setdefault('price', '25.00')
        extra.setdefault('duration', 15)
        return DiagnosticTest.objects.create(diagnostic_center=center, name=name, **extra)
    return _make


@pytest.fixture
def cbc_test(center_a, make_test):
    return make_test(center_a, 'CBC Panel', scheduled_times=['09:00', '09:30'])


@pytest.fixture
def make_appointment():
    def _make(patient, test, *, days=1, status=Appointment.STATUS_PENDING, time='09:00'):
        return Appointment.objects.create(
            patient=patient,
            test=test,
            diagnostic_center=test.diagnostic_center,
            appointment_date=timezone.localdate() + datetime.timedelta(days=days),
            appointment_time=time,
            status=status,
        )
    return _make


@pytest.fixture
def token_for():
    def _issue(user):
        return get_token_codec().issue(user.pk)
    return _issue


@pytest.fixture
def client_for(token_for):
    """APIClient carrying a bearer token for ``user``."""
    def _client(user):
        c = APIClient()
        c.credentials(HTTP_AUTHORIZATION=f'Bearer {token_for(user)}')
        return c
    return _client
