from centers.models import DiagnosticCenter, DiagnosticTest


def format_center(center: DiagnosticCenter) -> dict:
    return {
        'id': center.id,
        'name': center.name,
        'description': center.description,
        'address': {
            'street': center.street,
            'city': center.city,
            'state': center.state,
            'zipCode': center.zip_code,
        },
        'phone': center.phone,
        'email': center.email,
        'operatingHours': center.operating_hours,
    }


def format_test(test: DiagnosticTest) -> dict:
    return {
        'id': test.id,
        'name': test.name,
        'description': test.description,
        'category': test.category,
        'price': str(test.price),
        'duration': test.duration,
        'preparationInstructions': test.preparation_instructions,
        'requirements': test.requirements,
        'scheduledTimes': test.scheduled_times,
        'centerId': test.diagnostic_center_id,
        'isActive': test.is_active,
        'createdAt': test.created_at.isoformat() if test.created_at else None,
        'updatedAt': test.updated_at.isoformat() if test.updated_at else None,
    }


def active_centers():
    return DiagnosticCenter.objects.filter(is_active=True).order_by('name')


def active_center(center_id) -> DiagnosticCenter | None:
    try:
        pk = int(center_id)
    except (TypeError, ValueError):
        return None
    return active_centers().filter(pk=pk).first()


def active_tests_for_center(center_id):
    return DiagnosticTest.objects.filter(
        diagnostic_center_id=center_id, diagnostic_center__is_active=True, is_active=True
    ).order_by('name')
