import logging

from django.db import IntegrityError, transaction
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.client.models import Role, User
from api.client.serializers import ProfileSerializer, RoleSerializer, UserSerializer
from api.permissions import IsAdminRole

logger = logging.getLogger(__name__)


def integrity_error_message(error):
    """Map a uniqueness violation to the field the user has to fix."""
    message = str(error).lower()
    if 'passport' in message:
        return "A passport with this series and number is already registered."
    if 'driver_license' in message:
        return "A driver license with this series and number is already registered."
    if 'phone' in message:
        return "This phone number is already used by another account."
    if 'email' in message:
        return "This email is already used by another account."
    return "Could not update the profile. Check the entered data."


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)

    def put(self, request):
        serializer = ProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            with transaction.atomic():
                user = serializer.save()
        except IntegrityError as e:
            logger.info("profile update for %s rejected: %s", request.user.email, e)
            request.user.refresh_from_db()
            return Response(
                {"detail": integrity_error_message(e)},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)


class AdminUserViewSet(mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       mixins.DestroyModelMixin,
                       viewsets.GenericViewSet):
    queryset = User.objects.all().order_by('email')
    serializer_class = UserSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        email = self.request.query_params.get('email', '').strip()
        role = self.request.query_params.get('role', '').strip()
        if email:
            queryset = queryset.filter(email__icontains=email)
        if role in Role.values:
            queryset = queryset.filter(role=role)
        return queryset

    @action(detail=True, methods=['post'])
    def role(self, request, pk=None):
        user = self.get_object()
        serializer = RoleSerializer(user, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserSerializer(user).data)

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.rentals.open().exists():
            return Response(
                {"detail": "Cancel the user's open rentals before deleting the account."},
                status=status.HTTP_409_CONFLICT
            )
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
