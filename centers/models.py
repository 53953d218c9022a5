"""
Database models for the diagnostic center backend.

A diagnostic center is owned by exactly one ``diagnostic_center_admin``
user.  Tests, appointments and staff members all carry a reference to
the center they belong to; every admin-facing query is filtered by that
reference.  Nothing here is ever hard-deleted: tests and users are
deactivated through their ``is_active`` flag so historical appointments
keep pointing at valid rows.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class Role(models.TextChoices):
    PATIENT = 'patient', 'Patient'
    DIAGNOSTIC_CENTER_ADMIN = 'diagnostic_center_admin', 'Diagnostic Center Admin'
    ADMIN = 'admin', 'Platform Administrator'


class Permission(models.TextChoices):
    MANAGE_TESTS = 'manage_tests', 'Manage tests'
    MANAGE_STAFF = 'manage_staff', 'Manage staff'
    MANAGE_APPOINTMENTS = 'manage_appointments', 'Manage appointments'
    UPLOAD_RESULTS = 'upload_results', 'Upload results'
    VIEW_DASHBOARD = 'view_dashboard', 'View dashboard'
    BOOK_APPOINTMENTS = 'book_appointments', 'Book appointments'
    VIEW_RESULTS = 'view_results', 'View results'


CENTER_ADMIN_PERMISSIONS = [
    Permission.MANAGE_TESTS,
    Permission.MANAGE_STAFF,
    Permission.MANAGE_APPOINTMENTS,
    Permission.UPLOAD_RESULTS,
    Permission.VIEW_DASHBOARD,
]

# Granted when a user is created without an explicit permission set
ROLE_DEFAULT_PERMISSIONS: dict[str, list[str]] = {
    Role.PATIENT: [Permission.BOOK_APPOINTMENTS, Permission.VIEW_RESULTS],
    Role.DIAGNOSTIC_CENTER_ADMIN: list(CENTER_ADMIN_PERMISSIONS),
    Role.ADMIN: list(Permission.values),
}


class UserManager(BaseUserManager):
    """Manager for the email-keyed user model."""

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('The email must be set')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', Role.ADMIN)
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """Principal of the platform.

    Users log in with their email.  ``role`` is one of :class:`Role`;
    ``permissions`` is the finer-grained set checked by the
    authorization gate.  ``diagnostic_center`` links staff members
    (including patients registered by a center) to the center they were
    added to.  Center ownership is modelled on
    :class:`DiagnosticCenter.admin`, not here.
    """
    username = None
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    role = models.CharField(max_length=32, choices=Role.choices, default=Role.PATIENT, db_index=True)
    permissions = models.JSONField(default=list, blank=True)
    diagnostic_center = models.ForeignKey(
        'DiagnosticCenter',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='staff',
    )
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS: list[str] = []

    objects = UserManager()

    def save(self, *args, **kwargs):
        if self._state.adding and not self.permissions:
            self.permissions = [str(p) for p in ROLE_DEFAULT_PERMISSIONS.get(self.role, [])]
        super().save(*args, **kwargs)

    def has_permission(self, permission: str) -> bool:
        return permission in set(self.permissions or [])

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class DiagnosticCenter(models.Model):
    """The tenant-scoping entity: one center per admin."""
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    street = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    admin = models.OneToOneField(
        User,
        on_delete=models.PROTECT,
        related_name='owned_center',
        limit_choices_to={'role': Role.DIAGNOSTIC_CENTER_ADMIN},
    )
    operating_hours = models.JSONField(default=dict, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.pk})"


class DiagnosticTest(models.Model):
    CATEGORY_CHOICES = [
        ('blood', 'Blood'),
        ('urine', 'Urine'),
        ('imaging', 'Imaging'),
        ('cardiology', 'Cardiology'),
        ('pathology', 'Pathology'),
        ('radiology', 'Radiology'),
        ('other', 'Other'),
    ]
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    duration = models.PositiveIntegerField(help_text="Duration in minutes")
    preparation_instructions = models.TextField(blank=True)
    requirements = models.JSONField(default=list, blank=True)
    scheduled_times = models.JSONField(default=list, blank=True, help_text="Bookable HH:MM slots")
    diagnostic_center = models.ForeignKey(
        DiagnosticCenter, on_delete=models.CASCADE, related_name='tests'
    )
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['diagnostic_center', 'is_active'], name='centers_dia_diagnos_5b1c0e_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.name} @ {self.diagnostic_center_id}"


class Appointment(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_CONFIRMED = 'confirmed'
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_IN_PROGRESS, 'In progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    patient = models.ForeignKey(User, on_delete=models.PROTECT, related_name='appointments')
    test = models.ForeignKey(DiagnosticTest, on_delete=models.PROTECT, related_name='appointments')
    diagnostic_center = models.ForeignKey(
        DiagnosticCenter, on_delete=models.PROTECT, related_name='appointments'
    )
    appointment_date = models.DateField(db_index=True)
    appointment_time = models.CharField(max_length=5)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    notes = models.TextField(blank=True)
    report_url = models.CharField(max_length=512, blank=True)
    result_summary = models.TextField(blank=True)
    results_uploaded_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['diagnostic_center', 'status'], name='centers_app_diagnos_0f2d7a_idx'),
            models.Index(fields=['diagnostic_center', 'appointment_date'], name='centers_app_diagnos_8c41e3_idx'),
            models.Index(fields=['patient', 'created_at'], name='centers_app_patient_3e9b52_idx'),
        ]

    @property
    def has_results(self) -> bool:
        return bool(self.report_url)

    def __str__(self) -> str:
        return f"appt {self.pk} p={self.patient_id} t={self.test_id} {self.appointment_date} {self.appointment_time}"
