from django.db import DatabaseError, connections
from django.http import JsonResponse


def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        return JsonResponse({'success': True, 'data': {'db': bool(row and row[0] == 1)}})
    except DatabaseError as e:
        return JsonResponse({'success': False, 'message': 'Database unavailable', 'error': str(e)}, status=500)
