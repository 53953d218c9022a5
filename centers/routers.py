"""
URL mappings for the diagnostic center API.

Paths mirror the ones the web client calls, without trailing slashes.
"""
from django.urls import path

from .auth_views import login_view, me_view, register_view
from .views import appointments, catalogue, center_admin, health

urlpatterns = [
    path('healthz', health.healthz, name='healthz'),

    # Authentication
    path('api/auth/register', register_view, name='register_view'),
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/me', me_view, name='me_view'),

    # Public catalogue
    path('api/diagnostic-centers', catalogue.list_centers, name='center_list'),
    path('api/diagnostic-centers/<str:center_id>', catalogue.center_detail, name='center_detail'),
    path('api/diagnostic-tests/center/<str:center_id>', catalogue.center_tests, name='center_tests'),

    # Patient appointments
    path('api/appointments', appointments.book, name='appointment_book'),
    path('api/appointments/my', appointments.my_appointments, name='appointment_my'),
    path('api/appointments/my-results', appointments.my_results, name='appointment_my_results'),

    # Diagnostic center admin
    path('api/diagnostic-center-admin/dashboard', center_admin.dashboard, name='admin_dashboard'),
    path('api/diagnostic-center-admin/staff', center_admin.staff, name='admin_staff'),
    path('api/diagnostic-center-admin/staff/<str:staff_id>', center_admin.staff_detail, name='admin_staff_detail'),
    path('api/diagnostic-center-admin/appointments', center_admin.appointments, name='admin_appointments'),
    path(
        'api/diagnostic-center-admin/appointments/<str:appointment_id>/status',
        center_admin.appointment_status,
        name='admin_appointment_status',
    ),
    path('api/diagnostic-center-admin/tests', center_admin.tests, name='admin_tests'),
    path('api/diagnostic-center-admin/tests/<str:test_id>', center_admin.test_detail, name='admin_test_detail'),
    path('api/diagnostic-center-admin/upload-results', center_admin.upload_results, name='admin_upload_results'),
]
