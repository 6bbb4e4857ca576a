from django.db.models import Count, Sum
from rest_framework.response import Response
from rest_framework.views import APIView

from api.client.models import Role, User
from api.garage.models import Car
from api.permissions import IsAdminRole
from api.rental.models import Rental, RentalStatus


class DashboardView(APIView):
    """Fleet totals for the admin home page."""

    permission_classes = [IsAdminRole]

    def get(self, request):
        revenue = (
            Rental.objects.filter(status=RentalStatus.PAID)
            .aggregate(total=Sum('total_price'))['total']
        )
        status_counts = {
            row['status']: row['count']
            for row in Car.objects.values('status').annotate(count=Count('id'))
        }
        return Response({
            'total_cars': Car.objects.count(),
            'total_users': User.objects.filter(role=Role.USER).count(),
            'total_revenue': revenue or 0,
            'status_counts': status_counts,
        })
