from django.db import connection, DatabaseError
from django.http import JsonResponse
import logging

logger = logging.getLogger(__name__)


def health_check(request):
    """Liveness probe that also pings the database."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError:
        logger.exception('Health check could not reach the database')
        return JsonResponse({'status': 'unhealthy', 'database': 'unreachable'}, status=503)

    return JsonResponse({'status': 'ok', 'database': 'ok'})


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'error': 'Not found',
        'status': 404
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({
        'error': 'Internal server error',
        'status': 500
    }, status=500)
