from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path('api/auth/', include('auth.urls')),
    path('api/', include('payments.urls')),
    path('api/', include('api.urls')),
    path('admin/', admin.site.urls),  # Keep this last
]
