from django.conf import settings
from django.db.models import Count, Max, Min
from django.db.models.functions import Lower
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.garage.models import Brand, Car, CarModel, CarStatus
from api.garage.serializers import BrandSerializer, CarModelSerializer, CarSerializer
from api.permissions import IsAdminRole, IsClient

DEFAULT_MAX_PRICE = 10000


def _positive_int(value):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


class CatalogViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Cars customers can book. Query parameters:
    brandId, year, color, city, minPrice, maxPrice (major currency units)
    and sortOrder (default, priceAsc, priceDesc).
    """

    queryset = Car.objects.select_related('brand', 'model').filter(status=CarStatus.AVAILABLE)
    serializer_class = CarSerializer
    permission_classes = [IsAuthenticated, IsClient]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset
        params = self.request.query_params

        brand_id = params.get('brandId')
        if brand_id and brand_id != '0':
            queryset = queryset.filter(brand_id=brand_id)

        year = _positive_int(params.get('year'))
        if year:
            queryset = queryset.filter(year=year)

        color = params.get('color', '').strip()
        if color:
            queryset = queryset.filter(color__iexact=color)

        city = params.get('city', '').strip()
        if city:
            queryset = queryset.filter(city__iexact=city)

        # Filters come in major units, prices are stored in minor units.
        min_price = _positive_int(params.get('minPrice'))
        if min_price:
            queryset = queryset.filter(price_per_day__gte=min_price * 100)

        max_price = _positive_int(params.get('maxPrice'))
        if max_price:
            queryset = queryset.filter(price_per_day__lte=max_price * 100)

        sort_order = params.get('sortOrder', 'default')
        if sort_order == 'priceAsc':
            queryset = queryset.order_by('price_per_day')
        elif sort_order == 'priceDesc':
            queryset = queryset.order_by('-price_per_day')
        return queryset

    def list(self, request, *args, **kwargs):
        cars = list(self.get_queryset())

        brands = {car.brand.id: car.brand for car in cars if car.brand}
        price_range = (
            Car.objects.filter(status=CarStatus.AVAILABLE, price_per_day__gt=0)
            .aggregate(low=Min('price_per_day'), high=Max('price_per_day'))
        )

        return Response({
            'cars': self.get_serializer(cars, many=True).data,
            'facets': {
                'brands': BrandSerializer(
                    sorted(brands.values(), key=lambda b: b.name), many=True
                ).data,
                'years': sorted({car.year for car in cars if car.year}),
                'colors': sorted({car.color for car in cars if car.color.strip()}),
                'cities': sorted({car.city for car in cars if car.city.strip()}),
                'min_price': (price_range['low'] or 0) // 100,
                'max_price': (
                    price_range['high'] // 100 if price_range['high'] else DEFAULT_MAX_PRICE
                ),
            },
        })


class AdminBrandViewSet(viewsets.ModelViewSet):
    queryset = Brand.objects.all()
    serializer_class = BrandSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        ordering = Lower('name').desc() if self.request.query_params.get('sortDir') == 'desc' else Lower('name')
        return super().get_queryset().order_by(ordering)

    def destroy(self, request, *args, **kwargs):
        brand = self.get_object()
        counts = Brand.objects.filter(pk=brand.pk).aggregate(
            models_count=Count('models', distinct=True),
            cars_count=Count('cars', distinct=True),
        )
        if counts['models_count']:
            return Response(
                {"detail": f"Cannot delete brand \"{brand.name}\": {counts['models_count']} model(s) belong to it."},
                status=status.HTTP_409_CONFLICT
            )
        if counts['cars_count']:
            return Response(
                {"detail": f"Cannot delete brand \"{brand.name}\": {counts['cars_count']} car(s) in the fleet."},
                status=status.HTTP_409_CONFLICT
            )
        brand.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminCarModelViewSet(viewsets.ModelViewSet):
    queryset = CarModel.objects.select_related('brand')
    serializer_class = CarModelSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        brand_filter = self.request.query_params.get('brandFilter')
        if brand_filter and brand_filter != '0':
            queryset = queryset.filter(brand_id=brand_filter)
        ordering = Lower('name').desc() if self.request.query_params.get('sortDir') == 'desc' else Lower('name')
        return queryset.order_by(ordering)

    def destroy(self, request, *args, **kwargs):
        car_model = self.get_object()
        cars_count = car_model.cars.count()
        if cars_count:
            return Response(
                {"detail": f"Cannot delete model \"{car_model.name}\": {cars_count} car(s) in the fleet."},
                status=status.HTTP_409_CONFLICT
            )
        car_model.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminCarViewSet(viewsets.ModelViewSet):
    queryset = Car.objects.select_related('brand', 'model')
    serializer_class = CarSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        brand_filter = params.get('brandFilter')
        if brand_filter and brand_filter != '0':
            queryset = queryset.filter(brand_id=brand_filter)

        plate = params.get('plate', '').strip()
        if plate:
            queryset = queryset.filter(license_plate__icontains=plate)

        city = params.get('cityFilter', '').strip()
        if city:
            queryset = queryset.filter(city=city)

        status_filter = params.get('statusFilter', '').strip()
        if status_filter in CarStatus.values:
            queryset = queryset.filter(status=status_filter)

        sort_key = 'price_per_day' if params.get('sortField') == 'price' else Lower('model__name')
        if params.get('sortDir') == 'desc':
            ordering = '-price_per_day' if sort_key == 'price_per_day' else sort_key.desc()
        else:
            ordering = sort_key
        return queryset.order_by(ordering)

    @action(detail=False, methods=['get'])
    def cities(self, request):
        return Response(settings.FLEET_CITIES)

    def destroy(self, request, *args, **kwargs):
        car = self.get_object()
        if car.status in (CarStatus.RESERVED, CarStatus.RENTED):
            return Response(
                {"detail": "Cannot delete a reserved or rented car."},
                status=status.HTTP_409_CONFLICT
            )
        if car.rentals.exists():
            return Response(
                {"detail": "Cannot delete a car with rental history."},
                status=status.HTTP_409_CONFLICT
            )
        car.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
