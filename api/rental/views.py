import logging

from django.db.models.functions import Lower
from django.urls import reverse
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.permissions import IsAdminRole, IsClient, IsRentalOwnerOrAdmin
from api.rental.exceptions import InvalidStateError, NotFoundError
from api.rental.models import Rental, RentalStatus
from api.rental.serializers import BookingRequestSerializer, RentalSerializer
from api.rental.services import cancel_rental, confirm_payment, create_rental

logger = logging.getLogger(__name__)


def lifecycle_error_response(exc):
    if isinstance(exc, NotFoundError):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)


class RentalViewSet(viewsets.GenericViewSet):
    """
    Customer side of the booking workflow:

    * ``POST /rentals/`` books a car and reserves it until payment
    * ``GET /rentals/my/`` lists own rentals, newest first
    * ``POST /rentals/{id}/pay/`` and ``/cancel/`` (owner or admin)
    """

    queryset = Rental.objects.select_related('car', 'car__brand', 'car__model', 'client')
    serializer_class = RentalSerializer
    permission_classes = [IsAuthenticated, IsRentalOwnerOrAdmin]

    def get_permissions(self):
        if self.action in ('create', 'my'):
            return [IsAuthenticated(), IsClient()]
        return super().get_permissions()

    def create(self, request):
        serializer = BookingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            rental = create_rental(serializer.to_booking(), request.user.email)
        except (NotFoundError, InvalidStateError) as e:
            return lifecycle_error_response(e)

        data = RentalSerializer(rental).data
        data['payment_url'] = f"{reverse('payment-process')}?rentalId={rental.id}"
        return Response(data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def my(self, request):
        rentals = self.get_queryset().for_client_email(request.user.email)
        return Response(self.get_serializer(rentals, many=True).data)

    @action(detail=True, methods=['post'])
    def pay(self, request, pk=None):
        rental = self.get_object()
        try:
            rental = confirm_payment(rental.id)
        except (NotFoundError, InvalidStateError) as e:
            return lifecycle_error_response(e)
        return Response(RentalSerializer(rental).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        rental = self.get_object()
        rental_id = rental.id
        try:
            rental = cancel_rental(rental_id)
        except (NotFoundError, InvalidStateError) as e:
            return lifecycle_error_response(e)

        if rental.pk is None:
            return Response({"id": str(rental_id), "deleted": True}, status=status.HTTP_200_OK)
        return Response(RentalSerializer(rental).data, status=status.HTTP_200_OK)


RENTAL_SORT_FIELDS = {
    'brand': Lower('car__brand__name'),
    'model': Lower('car__model__name'),
    'email': Lower('client__email'),
    'totalPrice': 'total_price',
    'startDate': 'start_date',
    'createdAt': 'created_at',
}


class AdminRentalViewSet(mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         mixins.DestroyModelMixin,
                         viewsets.GenericViewSet):
    queryset = Rental.objects.select_related('car', 'car__brand', 'car__model', 'client')
    serializer_class = RentalSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        plate = params.get('plate', '').strip()
        email = params.get('email', '').strip()
        status_filter = params.get('statusFilter', '').strip()

        if plate:
            queryset = queryset.filter(car__license_plate__icontains=plate)
        if email:
            queryset = queryset.filter(client__email__icontains=email)
        if status_filter in RentalStatus.values:
            queryset = queryset.filter(status=status_filter)

        sort_key = RENTAL_SORT_FIELDS.get(params.get('sortField'), 'created_at')
        if params.get('sortDir', 'desc').lower() == 'desc':
            ordering = sort_key.desc() if hasattr(sort_key, 'desc') else f'-{sort_key}'
        else:
            ordering = sort_key.asc() if hasattr(sort_key, 'asc') else sort_key
        return queryset.order_by(ordering)

    def destroy(self, request, pk=None):
        rental = self.get_object()
        try:
            cancel_rental(rental.id)
        except (NotFoundError, InvalidStateError) as e:
            return lifecycle_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)
