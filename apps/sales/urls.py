from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'sales'

router = SimpleRouter()
router.register(r'', views.SaleViewSet, basename='sale')

urlpatterns = [
    # GET    /api/sales/                 - Paginated sales
    # POST   /api/sales/                 - Settle a new sale
    # GET    /api/sales/all/             - All sales
    # GET    /api/sales/daily/           - One day of sales with summary
    # GET    /api/sales/{id}/            - Sale detail
    # PATCH  /api/sales/{id}/            - Update or cancel
    # DELETE /api/sales/{id}/            - Soft delete (reverses stock and prepaid)
    path('', include(router.urls)),
]
