from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'egresses'

router = SimpleRouter()
router.register(r'', views.EgressViewSet, basename='egress')

urlpatterns = [
    # GET    /api/egresses/                 - Paginated egresses
    # POST   /api/egresses/                 - Register egress
    # GET    /api/egresses/all/             - All egresses
    # GET    /api/egresses/statistics/      - Completed totals per currency
    # GET    /api/egresses/{id}/            - Egress detail
    # PATCH  /api/egresses/{id}/            - Update (PENDING only)
    # DELETE /api/egresses/{id}/            - Soft delete (PENDING only)
    # PATCH  /api/egresses/{id}/complete/   - Mark completed
    # PATCH  /api/egresses/{id}/cancel/     - Mark cancelled
    path('', include(router.urls)),
]
