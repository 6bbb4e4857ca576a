import signal
import threading

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from api.rental.sweeper import RentalSweeper


class Command(BaseCommand):
    help = "Run the unpaid-rental sweeper in the foreground until interrupted"

    def add_arguments(self, parser):
        parser.add_argument(
            '--interval',
            type=int,
            default=settings.RENTAL_SWEEP_INTERVAL_SECONDS,
            help="Seconds between sweeps (default: RENTAL_SWEEP_INTERVAL_SECONDS)",
        )

    def handle(self, *args, **options):
        if options['interval'] < 1:
            raise CommandError("--interval must be at least 1 second")

        stop = threading.Event()
        sweeper = RentalSweeper(interval=options['interval'])

        def _shutdown(signum, frame):
            stop.set()

        signal.signal(signal.SIGTERM, _shutdown)
        signal.signal(signal.SIGINT, _shutdown)

        sweeper.start()
        self.stdout.write(self.style.SUCCESS(
            f"Rental sweeper running every {sweeper.interval}s, press Ctrl+C to stop"
        ))
        stop.wait()
        sweeper.stop()
        self.stdout.write("Rental sweeper stopped")
