"""
Django admin registrations for the center models.

Platform administrators use ``/admin/`` to create centers, assign their
owning admin and inspect bookings.
"""

from django.contrib import admin

from .models import Appointment, DiagnosticCenter, DiagnosticTest, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'name', 'role', 'diagnostic_center', 'is_active', 'last_login')
    list_filter = ('role', 'is_active')
    search_fields = ('email', 'name', 'phone')
    exclude = ('password',)


@admin.register(DiagnosticCenter)
class DiagnosticCenterAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'city', 'admin', 'is_active', 'created_at')
    list_filter = ('is_active', 'city')
    search_fields = ('name', 'city', 'admin__email')


@admin.register(DiagnosticTest)
class DiagnosticTestAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'category', 'price', 'diagnostic_center', 'is_active')
    list_filter = ('category', 'is_active', 'diagnostic_center')
    search_fields = ('name', 'diagnostic_center__name')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'test', 'diagnostic_center', 'appointment_date', 'appointment_time', 'status')
    list_filter = ('status', 'diagnostic_center')
    search_fields = ('patient__email', 'test__name')
