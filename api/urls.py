# api/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from api.client.views import AdminUserViewSet, ProfileView
from api.garage.views import AdminBrandViewSet, AdminCarModelViewSet, AdminCarViewSet, CatalogViewSet
from api.rental.views import AdminRentalViewSet, RentalViewSet
from api.views import DashboardView

router = DefaultRouter()
router.register(r'cars', CatalogViewSet, basename='catalog')
router.register(r'rentals', RentalViewSet, basename='rental')
router.register(r'admin/brands', AdminBrandViewSet, basename='admin-brand')
router.register(r'admin/models', AdminCarModelViewSet, basename='admin-model')
router.register(r'admin/cars', AdminCarViewSet, basename='admin-car')
router.register(r'admin/users', AdminUserViewSet, basename='admin-user')
router.register(r'admin/rentals', AdminRentalViewSet, basename='admin-rental')


urlpatterns = [
    path('profile/', ProfileView.as_view(), name='profile'),
    path('admin/dashboard/', DashboardView.as_view(), name='admin-dashboard'),
    path('', include(router.urls)),
]
