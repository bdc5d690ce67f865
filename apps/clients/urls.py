from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'clients'

router = SimpleRouter()
router.register(r'', views.ClientViewSet, basename='client')

urlpatterns = [
    # GET    /api/clients/                        - Paginated clients
    # POST   /api/clients/                        - Create client (optionally with prepaids)
    # GET    /api/clients/all/                    - All clients
    # GET    /api/clients/{id}/                   - Client detail
    # PATCH  /api/clients/{id}/                   - Update client
    # DELETE /api/clients/{id}/                   - Soft delete (cascades to prepaids)
    # GET    /api/clients/{id}/prepaids/          - Client prepaids
    # GET    /api/clients/{id}/prepaids/pending/  - Client pending prepaids
    path('', include(router.urls)),
]
