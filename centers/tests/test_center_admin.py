"""
Center administrator API: tenant scoping, test catalogue management,
staff, appointments, dashboard and result uploads.
"""
import datetime

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db.models import QuerySet
from django.utils import timezone

from centers.exceptions import NO_CENTER_MESSAGE, NOT_FOUND_MESSAGE, ValidationFailed
from centers.models import Appointment, DiagnosticTest, Role, User
from centers.services.diagnostic_tests import DUPLICATE_NAME_MESSAGE
from centers.services.staff import add_staff

pytestmark = pytest.mark.django_db

TESTS_URL = '/api/diagnostic-center-admin/tests'
STAFF_URL = '/api/diagnostic-center-admin/staff'
APPOINTMENTS_URL = '/api/diagnostic-center-admin/appointments'
UPLOAD_URL = '/api/diagnostic-center-admin/upload-results'


def new_test_payload(**overrides):
    payload = {
        'name': 'Lipid Profile',
        'category': 'blood',
        'price': '40.00',
        'duration': 20,
        'scheduledTimes': ['10:00', '08:30'],
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------
# Tenant isolation
# ---------------------------------------------------------------------
def test_admin_cannot_update_other_centers_test(admin_a, admin_b, center_a, center_b, cbc_test, client_for):
    r = client_for(admin_b).put(f'{TESTS_URL}/{cbc_test.pk}', {'price': '99.00'}, format='json')
    assert r.status_code == 404
    assert r.data == {'success': False, 'message': NOT_FOUND_MESSAGE}
    cbc_test.refresh_from_db()
    assert str(cbc_test.price) == '25.00'

    r = client_for(admin_a).put(f'{TESTS_URL}/{cbc_test.pk}', {'price': '30.00'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['test']['price'] == '30.00'
    cbc_test.refresh_from_db()
    assert str(cbc_test.price) == '30.00'


def test_foreign_id_is_indistinguishable_from_missing(admin_b, center_a, center_b, cbc_test, client_for):
    c = client_for(admin_b)
    foreign = c.delete(f'{TESTS_URL}/{cbc_test.pk}')
    missing = c.delete(f'{TESTS_URL}/999999')
    garbage = c.delete(f'{TESTS_URL}/not-a-number')
    assert foreign.status_code == missing.status_code == garbage.status_code == 404
    assert foreign.content == missing.content == garbage.content
    cbc_test.refresh_from_db()
    assert cbc_test.is_active is True


def test_invalid_payload_on_foreign_test_still_404(admin_b, center_a, center_b, cbc_test, client_for):
    r = client_for(admin_b).patch(f'{TESTS_URL}/{cbc_test.pk}', {'price': '-5'}, format='json')
    assert r.status_code == 404


def test_admin_without_center_gets_distinct_404(make_user, client_for):
    orphan = make_user('orphan@example.com', Role.DIAGNOSTIC_CENTER_ADMIN)
    r = client_for(orphan).get(TESTS_URL)
    assert r.status_code == 404
    assert r.data['message'] == NO_CENTER_MESSAGE


def test_listing_only_shows_own_active_tests(admin_a, center_a, center_b, cbc_test, make_test, client_for):
    make_test(center_b, 'Other Center Test')
    make_test(center_a, 'Retired Test', is_active=False)
    r = client_for(admin_a).get(TESTS_URL)
    assert r.status_code == 200
    assert [t['name'] for t in r.data['data']['tests']] == ['CBC Panel']
    assert r.data['data']['centerName'] == 'Center One'


# ---------------------------------------------------------------------
# Test catalogue
# ---------------------------------------------------------------------
def test_create_test_binds_to_own_center(admin_a, center_a, center_b, client_for):
    r = client_for(admin_a).post(TESTS_URL, new_test_payload(diagnosticCenter=center_b.pk), format='json')
    assert r.status_code == 201
    body = r.data['data']['test']
    assert body['centerId'] == center_a.pk
    assert body['scheduledTimes'] == ['08:30', '10:00']
    assert DiagnosticTest.objects.get(pk=body['id']).diagnostic_center_id == center_a.pk


def test_duplicate_name_is_rejected_case_insensitively(admin_a, center_a, cbc_test, client_for):
    r = client_for(admin_a).post(TESTS_URL, new_test_payload(name='cbc panel'), format='json')
    assert r.status_code == 400
    assert r.data['message'] == DUPLICATE_NAME_MESSAGE
    assert DiagnosticTest.objects.filter(diagnostic_center=center_a, name__iexact='cbc panel').count() == 1


def test_same_name_allowed_in_another_center(admin_b, center_a, center_b, cbc_test, client_for):
    r = client_for(admin_b).post(TESTS_URL, new_test_payload(name='CBC Panel'), format='json')
    assert r.status_code == 201


def test_rename_onto_existing_name_is_rejected(admin_a, center_a, cbc_test, make_test, client_for):
    other = make_test(center_a, 'Thyroid Panel')
    r = client_for(admin_a).patch(f'{TESTS_URL}/{other.pk}', {'name': 'CBC PANEL'}, format='json')
    assert r.status_code == 400
    other.refresh_from_db()
    assert other.name == 'Thyroid Panel'


def test_invalid_payload_is_400(admin_a, center_a, client_for):
    c = client_for(admin_a)
    assert c.post(TESTS_URL, new_test_payload(price='-1'), format='json').status_code == 400
    assert c.post(TESTS_URL, new_test_payload(scheduledTimes=['25:00']), format='json').status_code == 400
    r = c.post(TESTS_URL, {'name': 'Incomplete'}, format='json')
    assert r.status_code == 400
    assert r.data['success'] is False


def test_soft_delete_is_idempotent(admin_a, center_a, cbc_test, client_for):
    c = client_for(admin_a)
    for _ in range(2):
        r = c.delete(f'{TESTS_URL}/{cbc_test.pk}')
        assert r.status_code == 200
        cbc_test.refresh_from_db()
        assert cbc_test.is_active is False
    assert DiagnosticTest.objects.filter(pk=cbc_test.pk).exists()
    assert c.get(TESTS_URL).data['data']['tests'] == []
    # the name is free again once the old test is inactive
    assert c.post(TESTS_URL, new_test_payload(name='CBC Panel'), format='json').status_code == 201


def test_markup_is_stripped_from_text_fields(admin_a, center_a, client_for):
    r = client_for(admin_a).post(
        TESTS_URL, new_test_payload(description='<script>x()</script>Fasting required'), format='json'
    )
    assert r.status_code == 201
    assert '<script>' not in r.data['data']['test']['description']


def test_ampersand_survives_create_and_edit(admin_a, center_a, client_for):
    c = client_for(admin_a)
    r = c.post(TESTS_URL, new_test_payload(name='Liver & Kidney Panel'), format='json')
    assert r.status_code == 201
    test_id = r.data['data']['test']['id']
    assert DiagnosticTest.objects.get(pk=test_id).name == 'Liver & Kidney Panel'

    r = c.patch(f'{TESTS_URL}/{test_id}', {'name': r.data['data']['test']['name']}, format='json')
    assert r.status_code == 200
    assert r.data['data']['test']['name'] == 'Liver & Kidney Panel'
    assert c.get(f'/api/diagnostic-tests/center/{center_a.pk}').data['data']['tests'][0]['name'] == 'Liver & Kidney Panel'


# ---------------------------------------------------------------------
# Staff
# ---------------------------------------------------------------------
def test_add_list_and_deactivate_staff(admin_a, center_a, client_for):
    c = client_for(admin_a)
    r = c.post(STAFF_URL, {'name': 'Lab Tech', 'email': 'Tech@Example.com', 'phone': '555-0199'}, format='json')
    assert r.status_code == 201
    staff = r.data['data']['staff']
    assert staff['email'] == 'tech@example.com'
    assert staff['role'] == Role.PATIENT
    assert staff['centerId'] == center_a.pk
    assert r.data['data']['initialPassword']

    listing = c.get(STAFF_URL).data['data']['staff']
    assert [s['email'] for s in listing] == ['tech@example.com']

    r = c.delete(f'{STAFF_URL}/{staff["id"]}')
    assert r.status_code == 200
    assert User.objects.get(pk=staff['id']).is_active is False
    assert c.get(STAFF_URL).data['data']['staff'] == []


def test_generated_password_allows_login(admin_a, center_a, client_for):
    r = client_for(admin_a).post(STAFF_URL, {'name': 'Nurse Joy', 'email': 'joy@example.com'}, format='json')
    password = r.data['data']['initialPassword']
    login = client_for(admin_a).post('/api/auth/login', {'email': 'joy@example.com', 'password': password}, format='json')
    assert login.status_code == 200
    assert login.data['data']['token']


def test_duplicate_staff_email_is_400(admin_a, center_a, patient, client_for):
    r = client_for(admin_a).post(STAFF_URL, {'name': 'Dup', 'email': patient.email.upper()}, format='json')
    assert r.status_code == 400
    assert r.data['message'] == 'User already exists with this email'


def test_staff_cannot_be_added_as_center_admin(admin_a, center_a, client_for):
    r = client_for(admin_a).post(
        STAFF_URL, {'name': 'Co Admin', 'email': 'co.admin@example.com', 'role': Role.DIAGNOSTIC_CENTER_ADMIN},
        format='json',
    )
    assert r.status_code == 400
    assert not User.objects.filter(email='co.admin@example.com').exists()


def test_concurrent_duplicate_staff_email_is_400(monkeypatch, center_a, patient):
    # the pre-check passes as if the other insert had not committed yet
    monkeypatch.setattr(QuerySet, 'exists', lambda self: False)
    with pytest.raises(ValidationFailed) as exc:
        add_staff(center_a, name='Racer', email=patient.email, role=Role.PATIENT)
    assert exc.value.status_code == 400
    assert str(exc.value.detail) == 'User already exists with this email'
    assert User.objects.filter(email=patient.email).count() == 1


def test_cannot_deactivate_other_centers_staff(admin_a, center_a, center_b, make_user, client_for):
    theirs = make_user('theirs@example.com', diagnostic_center=center_b)
    r = client_for(admin_a).delete(f'{STAFF_URL}/{theirs.pk}')
    assert r.status_code == 404
    theirs.refresh_from_db()
    assert theirs.is_active is True


# ---------------------------------------------------------------------
# Appointments
# ---------------------------------------------------------------------
@pytest.fixture
def booked(patient, center_a, center_b, cbc_test, make_test, make_appointment):
    other = make_test(center_b, 'Other')
    return {
        'mine': [
            make_appointment(patient, cbc_test, days=1),
            make_appointment(patient, cbc_test, days=2, status=Appointment.STATUS_CONFIRMED),
            make_appointment(patient, cbc_test, days=3),
        ],
        'theirs': make_appointment(patient, other, days=1),
    }


def test_appointments_are_paginated_and_scoped(admin_a, booked, client_for):
    c = client_for(admin_a)
    r = c.get(APPOINTMENTS_URL, {'limit': 2})
    assert r.status_code == 200
    data = r.data['data']
    assert data['total'] == 3
    assert data['totalPages'] == 2
    assert data['currentPage'] == 1
    assert len(data['appointments']) == 2
    page2 = c.get(APPOINTMENTS_URL, {'limit': 2, 'page': 2}).data['data']
    assert len(page2['appointments']) == 1
    seen = {a['id'] for a in data['appointments'] + page2['appointments']}
    assert seen == {a.pk for a in booked['mine']}


def test_appointments_filter_by_status(admin_a, booked, client_for):
    r = client_for(admin_a).get(APPOINTMENTS_URL, {'status': 'confirmed'})
    assert [a['id'] for a in r.data['data']['appointments']] == [booked['mine'][1].pk]


def test_appointment_query_is_validated(admin_a, center_a, client_for):
    c = client_for(admin_a)
    assert c.get(APPOINTMENTS_URL, {'limit': 500}).status_code == 400
    assert c.get(APPOINTMENTS_URL, {'status': 'lost'}).status_code == 400


def test_update_status(admin_a, admin_b, booked, client_for):
    appt = booked['mine'][0]
    url = f'{APPOINTMENTS_URL}/{appt.pk}/status'
    assert client_for(admin_b).patch(url, {'status': 'cancelled'}, format='json').status_code == 404
    assert client_for(admin_b).patch(url, {'status': 'bogus'}, format='json').status_code == 404

    c = client_for(admin_a)
    assert c.patch(url, {'status': 'bogus'}, format='json').status_code == 400
    r = c.patch(url, {'status': 'confirmed'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['appointment']['status'] == 'confirmed'
    appt.refresh_from_db()
    assert appt.status == Appointment.STATUS_CONFIRMED


def test_dashboard_counts_only_own_center(admin_a, booked, patient, cbc_test, make_appointment, client_for):
    make_appointment(patient, cbc_test, days=0, status=Appointment.STATUS_COMPLETED)
    r = client_for(admin_a).get('/api/diagnostic-center-admin/dashboard')
    assert r.status_code == 200
    data = r.data['data']
    assert data['diagnosticCenter']['name'] == 'Center One'
    stats = data['stats']
    assert stats['totalAppointments'] == 4
    assert stats['totalTests'] == 1
    assert stats['todaysAppointments'] == 1
    assert len(stats['recentAppointments']) == 4
    by_status = {row['status']: row['count'] for row in stats['appointmentStats']}
    assert by_status == {'pending': 2, 'confirmed': 1, 'in_progress': 0, 'completed': 1, 'cancelled': 0}


# ---------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------
def upload(client, appointment_id, name='report.pdf', content=b'%PDF-1.4 result'):
    return client.post(
        UPLOAD_URL,
        {
            'appointmentId': str(appointment_id),
            'summary': 'All values within range',
            'file': SimpleUploadedFile(name, content, content_type='application/octet-stream'),
        },
        format='multipart',
    )


def test_upload_results_then_patient_sees_them(admin_a, booked, patient, client_for):
    appt = booked['mine'][0]
    before = timezone.now() - datetime.timedelta(seconds=1)
    r = upload(client_for(admin_a), appt.pk)
    assert r.status_code == 200
    results = r.data['data']['appointment']['results']
    assert results['reportUrl'].startswith('/media/results/')
    assert results['reportUrl'].endswith('.pdf')
    assert results['summary'] == 'All values within range'
    appt.refresh_from_db()
    assert appt.results_uploaded_at >= before

    mine = client_for(patient).get('/api/appointments/my-results').data['data']['results']
    assert [a['id'] for a in mine] == [appt.pk]


def test_upload_rejects_disallowed_extension(admin_a, booked, client_for):
    r = upload(client_for(admin_a), booked['mine'][0].pk, name='payload.exe')
    assert r.status_code == 400
    assert 'file' in r.data['message']


def test_upload_for_foreign_appointment_is_404(admin_a, booked, client_for):
    r = upload(client_for(admin_a), booked['theirs'].pk)
    assert r.status_code == 404
    assert r.data['message'] == NOT_FOUND_MESSAGE
    booked['theirs'].refresh_from_db()
    assert booked['theirs'].report_url == ''


@pytest.mark.parametrize('payload', [
    {},
    {'file': SimpleUploadedFile('payload.exe', b'MZ', content_type='application/octet-stream')},
])
def test_foreign_appointment_is_404_whatever_the_file(admin_a, booked, client_for, payload):
    data = dict(payload, appointmentId=str(booked['theirs'].pk))
    r = client_for(admin_a).post(UPLOAD_URL, data, format='multipart')
    assert r.status_code == 404
    assert r.data['message'] == NOT_FOUND_MESSAGE


def test_upload_without_file_for_own_appointment_is_400(admin_a, booked, client_for):
    r = client_for(admin_a).post(UPLOAD_URL, {'appointmentId': str(booked['mine'][0].pk)}, format='multipart')
    assert r.status_code == 400
