# centers/management/commands/ensure_demo_data.py
from django.core.management.base import BaseCommand
from django.db import transaction

from centers.models import DiagnosticCenter, DiagnosticTest, Role, ROLE_DEFAULT_PERMISSIONS, User

DEMO_PASSWORD = "Demo@12345"

DEMO_USERS = [
    ("admin.north@example.com", "North Lab Admin", Role.DIAGNOSTIC_CENTER_ADMIN),
    ("admin.south@example.com", "South Lab Admin", Role.DIAGNOSTIC_CENTER_ADMIN),
    ("patient@example.com", "Demo Patient", Role.PATIENT),
]

DEMO_CENTERS = [
    ("North Diagnostics", "admin.north@example.com", "12 Elm Street", "Springfield"),
    ("South Imaging", "admin.south@example.com", "400 Harbor Road", "Shelbyville"),
]

DEMO_TESTS = [
    ("CBC Panel", "blood", "25.00", 15, ["09:00", "09:30", "10:00"]),
    ("Lipid Profile", "blood", "40.00", 15, []),
    ("Chest X-Ray", "radiology", "80.00", 30, ["14:00", "15:00"]),
]


class Command(BaseCommand):
    help = f"Ensure demo admins, centers and tests exist; password={DEMO_PASSWORD} (idempotent)."

    @transaction.atomic
    def handle(self, *args, **opts):
        users = {}
        for email, name, role in DEMO_USERS:
            u, created = User.objects.get_or_create(email=email, defaults={"name": name, "role": role})
            if created or not u.is_active or u.role != role:
                u.set_password(DEMO_PASSWORD)
                u.role = role
                u.is_active = True
                u.permissions = [str(p) for p in ROLE_DEFAULT_PERMISSIONS[role]]
                u.save()
            users[email] = u
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role})"))

        for name, admin_email, street, city in DEMO_CENTERS:
            center, _ = DiagnosticCenter.objects.get_or_create(
                admin=users[admin_email],
                defaults={"name": name, "street": street, "city": city},
            )
            for test_name, category, price, duration, times in DEMO_TESTS:
                DiagnosticTest.objects.get_or_create(
                    diagnostic_center=center,
                    name=test_name,
                    is_active=True,
                    defaults={
                        "category": category,
                        "price": price,
                        "duration": duration,
                        "scheduled_times": times,
                    },
                )
            self.stdout.write(self.style.SUCCESS(f"ok: center {center.name} (admin {admin_email})"))
        self.stdout.write(self.style.SUCCESS("Demo data ensured."))
