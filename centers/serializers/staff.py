from rest_framework import serializers

from centers.models import Role
from centers.serializers.auth import RegisterSerializer


class StaffCreateSerializer(RegisterSerializer):
    password = serializers.CharField(write_only=True, required=False, allow_blank=True)
    # a center has a single admin (DiagnosticCenter.admin); staff join as patients
    role = serializers.ChoiceField(
        choices=[Role.PATIENT.value],
        required=False,
        default=Role.PATIENT.value,
    )

    def validate_password(self, v):
        if not v:
            return v
        return super().validate_password(v)
