from rest_framework.permissions import BasePermission

from api.client.models import Role


class IsClient(BasePermission):
    message = "Only customers can do this."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role == Role.USER)


class IsAdminRole(BasePermission):
    message = "Administrator role required."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role == Role.ADMIN)


class IsRentalOwnerOrAdmin(BasePermission):
    message = "You can only manage your own rentals."

    def has_object_permission(self, request, view, obj):
        return request.user.role == Role.ADMIN or obj.client_id == request.user.pk
