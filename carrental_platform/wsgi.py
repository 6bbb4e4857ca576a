"""
WSGI config for carrental_platform project.

Starts the in-process rental sweeper next to the request handlers unless
RENTAL_SWEEPER_AUTOSTART is switched off (e.g. when a dedicated
``run_rental_sweeper`` worker is deployed instead).
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'carrental_platform.settings')

application = get_wsgi_application()

from django.conf import settings  # noqa: E402

if settings.RENTAL_SWEEPER_AUTOSTART:
    from api.rental.sweeper import start_default_sweeper  # noqa: E402

    start_default_sweeper()
