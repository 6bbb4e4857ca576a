from datetime import timedelta

import pytz
from django.conf import settings
from django.utils import timezone


def server_today():
    """Current calendar date in the fleet's time zone."""
    local_tz = pytz.timezone(settings.TIME_ZONE)
    return timezone.now().astimezone(local_tz).date()


def booking_start_date(today=None):
    """Bookings always start the day after ``today``."""
    return (today or server_today()) + timedelta(days=1)
