"""
WSGI entrypoint for the Retur Service.

Run with any WSGI server, e.g. ``gunicorn retur_service.wsgi``.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'retur_service.settings')

application = get_wsgi_application()
