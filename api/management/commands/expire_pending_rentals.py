from django.core.management.base import BaseCommand
from django.utils import timezone

from api.rental.sweeper import expire_pending_rentals, payment_window


class Command(BaseCommand):
    help = "Cancel unpaid rentals whose payment window has passed and release their cars"

    def handle(self, *args, **options):
        now = timezone.localtime()
        self.stdout.write(f"Current server time: {now:%Y-%m-%d %H:%M:%S %Z}")

        result = expire_pending_rentals(now=now)

        for rental_id in result.failed:
            self.stdout.write(self.style.ERROR(f"Failed to expire rental {rental_id}"))

        if result.expired:
            minutes = int(payment_window().total_seconds() // 60)
            self.stdout.write(self.style.SUCCESS(
                f"Expired {len(result.expired)} rentals unpaid for more than {minutes} minutes"
            ))
        else:
            self.stdout.write("No rentals needed expiring")
