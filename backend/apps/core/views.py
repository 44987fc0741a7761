"""
Operational endpoints.
"""

from django.db import connection
from django.db.utils import OperationalError
from django.http import JsonResponse


def health(request):
    """GET /health/ - liveness plus a trivial database round trip."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        database = "ok"
    except OperationalError:
        database = "unavailable"

    status_code = 200 if database == "ok" else 503
    return JsonResponse(
        {"status": "ok" if status_code == 200 else "degraded", "database": database},
        status=status_code,
    )
