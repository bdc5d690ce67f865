"""
URL configuration for the café back-office project.

Every API route lives under /api/. Each app ships its own urls module
with an app_name namespace used by reverse() in the tests.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenRefreshView

from config.views import health_check

urlpatterns = [
    # Health check
    path('api/health/', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/', include('apps.accounts.urls')),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # API endpoints
    path('api/users/', include('apps.accounts.user_urls')),
    path('api/employees/', include('apps.employees.urls')),
    path('api/products/', include('apps.products.urls')),
    path('api/clients/', include('apps.clients.urls')),
    path('api/prepaids/', include('apps.clients.prepaid_urls')),
    path('api/sales/', include('apps.sales.urls')),
    path('api/egresses/', include('apps.egresses.urls')),
]


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
