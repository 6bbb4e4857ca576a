from django import forms
from django.contrib import admin
from django.contrib import messages
from django.contrib.auth.models import Group
from django.db import transaction
from django.db.models import Count

from api.client.models import User
from api.garage.models import LIFECYCLE_CAR_STATUSES, Brand, Car, CarModel, CarStatus, is_lifecycle_status_change
from api.rental.exceptions import RentalError
from api.rental.models import Rental
from api.rental.services import cancel_rental


class CustomAdminSite(admin.AdminSite):
    site_header = "Car Rental Back Office"
    site_title = "Admin Portal"
    index_title = "Dashboard"

    def get_app_list(self, request, app_label=None):
        app_dict = self._build_app_dict(request, app_label)

        custom_groups = [
            {
                'name': 'Catalog',
                'app_label': 'catalog',
                'models': self._get_models_for_group(app_dict, ['Brand', 'CarModel', 'Car'])
            },
            {
                'name': 'Management',
                'app_label': 'management',
                'models': self._get_models_for_group(app_dict, ['Rental', 'User'])
            },
        ]
        return [group for group in custom_groups if group['models']]

    def _get_models_for_group(self, app_dict, model_names):
        """Helper method to get models from app_dict by name"""
        models = []
        if 'api' in app_dict:
            for model in app_dict['api']['models']:
                if model['object_name'] in model_names:
                    models.append(model)
        return models


# Replace the default admin site
admin.site = CustomAdminSite(name='admin')


class BrandAdmin(admin.ModelAdmin):
    list_display = ('name', 'models_count', 'cars_count')
    search_fields = ('name',)

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            _models_count=Count('models', distinct=True),
            _cars_count=Count('cars', distinct=True),
        )

    def models_count(self, obj):
        return obj._models_count
    models_count.short_description = 'Models'

    def cars_count(self, obj):
        return obj._cars_count
    cars_count.short_description = 'Cars'


class CarModelAdmin(admin.ModelAdmin):
    list_display = ('name', 'brand')
    list_filter = ('brand',)
    search_fields = ('name', 'brand__name')


class CarAdminForm(forms.ModelForm):
    class Meta:
        model = Car
        fields = '__all__'

    def clean_status(self):
        status = self.cleaned_data['status']
        current = self.instance.status if self.instance.pk else CarStatus.AVAILABLE
        if is_lifecycle_status_change(current, status):
            raise forms.ValidationError("Reserved and rented statuses are managed by rentals.")
        return status


class CarAdmin(admin.ModelAdmin):
    form = CarAdminForm
    list_display = ('license_plate', 'brand', 'model', 'year', 'color', 'city', 'price_display', 'status')
    list_filter = ('status', 'brand', 'city')
    search_fields = ('license_plate', 'model__name', 'brand__name')

    def price_display(self, obj):
        return f"{obj.price_per_day / 100:.2f}"
    price_display.short_description = 'Price per day'

    def save_model(self, request, obj, form, change):
        if not change:
            return super().save_model(request, obj, form, change)

        with transaction.atomic():
            current = Car.objects.select_for_update().values_list('status', flat=True).get(pk=obj.pk)
            if 'status' not in form.changed_data:
                obj.status = current
            elif is_lifecycle_status_change(current, obj.status):
                # A booking moved the car after the form was opened.
                self.message_user(
                    request,
                    f"Status of {obj.license_plate} left as {current}: it is managed by rentals.",
                    messages.WARNING
                )
                obj.status = current
            super().save_model(request, obj, form, change)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.status in LIFECYCLE_CAR_STATUSES:
            return False
        return super().has_delete_permission(request, obj)


class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'last_name', 'first_name', 'phone', 'role', 'is_active')
    list_filter = ('role', 'is_active')
    search_fields = ('email', 'last_name', 'phone')
    exclude = ('password', 'last_login')
    readonly_fields = ('date_joined',)


class RentalAdmin(admin.ModelAdmin):
    list_display = ('id', 'client', 'car', 'start_date', 'end_date', 'total_display', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('client__email', 'car__license_plate')
    date_hierarchy = 'created_at'
    readonly_fields = ('client', 'car', 'start_date', 'end_date', 'total_price', 'status', 'created_at')
    actions = ['cancel_selected_rentals']

    def total_display(self, obj):
        return f"{obj.total_price / 100:.2f}"
    total_display.short_description = 'Total'

    def has_add_permission(self, request):
        # Rentals are created by the booking workflow only.
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_actions(self, request):
        actions = super().get_actions(request)
        actions.pop('delete_selected', None)
        return actions

    def cancel_selected_rentals(self, request, queryset):
        cancelled = 0
        for rental_id in queryset.values_list('id', flat=True):
            try:
                cancel_rental(rental_id)
                cancelled += 1
            except RentalError as e:
                self.message_user(request, f"Rental {rental_id}: {e}", messages.WARNING)
        self.message_user(request, f"Cancelled {cancelled} rental(s).", messages.SUCCESS)

    cancel_selected_rentals.short_description = "Cancel selected rentals and release their cars"


# --- Registration ---
try:
    admin.site.unregister(Group)
except admin.sites.NotRegistered:
    pass

models_to_register = [
    (Brand, BrandAdmin),
    (CarModel, CarModelAdmin),
    (Car, CarAdmin),
    (User, UserAdmin),
    (Rental, RentalAdmin),
]

for model, admin_class in models_to_register:
    try:
        admin.site.unregister(model)
    except admin.sites.NotRegistered:
        pass
    admin.site.register(model, admin_class)
