import os

from django.conf import settings
from rest_framework import serializers

from centers.models import Appointment
from centers.serializers.auth import clean_text
from centers.serializers.diagnostic_tests import validate_time_slot

STATUS_VALUES = [s for s, _ in Appointment.STATUS_CHOICES]


class AppointmentCreateSerializer(serializers.Serializer):
    center = serializers.IntegerField(min_value=1)
    test = serializers.IntegerField(min_value=1)
    appointmentDate = serializers.DateField()
    appointmentTime = serializers.CharField(max_length=5)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=2000)

    def validate_appointmentTime(self, v):
        return validate_time_slot(v)

    def validate_notes(self, v):
        return clean_text(v)


class AppointmentListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=10)
    status = serializers.ChoiceField(choices=STATUS_VALUES, required=False)


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUS_VALUES)


class ResultUploadSerializer(serializers.Serializer):
    appointmentId = serializers.CharField()
    summary = serializers.CharField(required=False, allow_blank=True, max_length=5000)
    file = serializers.FileField(allow_empty_file=False)

    def validate_summary(self, v):
        return clean_text(v)

    def validate_file(self, f):
        max_bytes = settings.UPLOAD_MAX_MB * 1024 * 1024
        if f.size > max_bytes:
            raise serializers.ValidationError(f'File exceeds the {settings.UPLOAD_MAX_MB}MB limit')
        ext = os.path.splitext(f.name or '')[1].lower()
        if ext not in settings.ALLOWED_RESULT_EXTENSIONS:
            raise serializers.ValidationError('Only PDF, DOC, DOCX, JPG, and PNG files are allowed')
        return f
