import logging
import uuid

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.permissions import IsClient
from api.rental.exceptions import InvalidStateError, NotFoundError
from api.rental.models import Rental, RentalStatus
from api.rental.serializers import RentalSerializer
from api.rental.services import confirm_payment
from payments.serializers import CardPaymentSerializer

logger = logging.getLogger(__name__)


def _own_rental(request, rental_id):
    try:
        rental = Rental.objects.select_related('car', 'client').get(id=rental_id)
    except (Rental.DoesNotExist, ValueError):
        return None
    if rental.client_id != request.user.pk:
        return None
    return rental


class PaymentProcessView(APIView):
    """
    GET  ?rentalId=<id>  the customer's rental awaiting payment
    POST card details    pays the rental
    """

    permission_classes = [IsAuthenticated, IsClient]

    def get(self, request):
        try:
            rental_id = uuid.UUID(request.query_params.get('rentalId', ''))
        except ValueError:
            return Response({"detail": "rentalId is required."}, status=status.HTTP_400_BAD_REQUEST)

        rental = _own_rental(request, rental_id)
        if rental is None:
            return Response({"detail": "Rental not found."}, status=status.HTTP_404_NOT_FOUND)
        if rental.status != RentalStatus.PENDING_PAYMENT:
            return Response({"detail": "Rental is not awaiting payment."}, status=status.HTTP_409_CONFLICT)
        return Response(RentalSerializer(rental).data)

    def post(self, request):
        serializer = CardPaymentSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        rental = _own_rental(request, serializer.validated_data['rentalId'])
        if rental is None:
            return Response({"detail": "Rental not found."}, status=status.HTTP_404_NOT_FOUND)

        try:
            rental = confirm_payment(rental.id)
        except NotFoundError as e:
            return Response({"detail": str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidStateError as e:
            return Response({"detail": str(e)}, status=status.HTTP_409_CONFLICT)

        logger.info("card payment accepted for rental %s (card ending %s)",
                    rental.id, serializer.validated_data['cardNumber'][-4:])
        return Response(
            {"paymentSuccess": True, "rental": RentalSerializer(rental).data},
            status=status.HTTP_200_OK
        )
