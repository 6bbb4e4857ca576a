"""
Expiry sweep for unpaid reservations.

A rental left in PENDING_PAYMENT longer than the payment window is
cancelled through the lifecycle, which deletes it and frees the car.
"""
import logging
import threading
from dataclasses import dataclass, field
from datetime import timedelta

from django.conf import settings
from django.db import close_old_connections
from django.utils import timezone

from api.rental.exceptions import InvalidStateError, NotFoundError
from api.rental.models import Rental
from api.rental.services import default_lifecycle

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    expired: list = field(default_factory=list)
    skipped: list = field(default_factory=list)
    failed: list = field(default_factory=list)

    @property
    def changed(self):
        return bool(self.expired)


def payment_window():
    return timedelta(minutes=settings.RENTAL_PAYMENT_WINDOW_MINUTES)


def expire_pending_rentals(now=None, lifecycle=None):
    """
    Cancel every PENDING_PAYMENT rental whose payment deadline is strictly
    before ``now``. Each rental is cancelled in its own transaction; a
    failure on one does not stop the others.
    """
    now = now or timezone.now()
    lifecycle = lifecycle or default_lifecycle
    deadline = now - payment_window()

    result = SweepResult()
    expired_ids = list(
        Rental.objects.using(lifecycle.using)
        .pending()
        .created_before(deadline)
        .values_list('id', flat=True)
    )

    for rental_id in expired_ids:
        try:
            lifecycle.cancel_rental(rental_id)
        except (NotFoundError, InvalidStateError):
            # Paid or cancelled by a request since the scan.
            result.skipped.append(rental_id)
        except Exception:
            logger.exception("failed to expire rental %s", rental_id)
            result.failed.append(rental_id)
        else:
            result.expired.append(rental_id)

    if expired_ids:
        logger.info(
            "rental sweep: %d expired, %d skipped, %d failed",
            len(result.expired), len(result.skipped), len(result.failed)
        )
    return result


class RentalSweeper:
    """
    Runs ``sweep`` every ``interval`` seconds on a daemon thread.

    Ticks never overlap: a tick that finds the previous sweep still running
    is skipped.
    """

    def __init__(self, interval=None, sweep=expire_pending_rentals):
        if interval is None:
            interval = settings.RENTAL_SWEEP_INTERVAL_SECONDS
        self.interval = interval
        self._sweep = sweep
        self._sweep_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread = None

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop, name='rental-sweeper', daemon=True
        )
        self._thread.start()
        logger.info("rental sweeper started, interval %ss", self.interval)

    def stop(self, timeout=5):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("rental sweeper stopped")

    def run_once(self):
        """Run a single sweep; returns None when one is already in flight."""
        if not self._sweep_lock.acquire(blocking=False):
            logger.warning("rental sweep still running, tick skipped")
            return None
        try:
            return self._sweep()
        finally:
            self._sweep_lock.release()

    def _loop(self):
        while not self._stop_event.wait(self.interval):
            close_old_connections()
            try:
                self.run_once()
            except Exception:
                logger.exception("rental sweep tick failed")
            finally:
                close_old_connections()


_default_sweeper = None
_default_sweeper_lock = threading.Lock()


def start_default_sweeper():
    """Start the process-wide sweeper once; later calls return the same one."""
    global _default_sweeper
    with _default_sweeper_lock:
        if _default_sweeper is None:
            _default_sweeper = RentalSweeper()
        _default_sweeper.start()
        return _default_sweeper
