from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'prepaids'

router = SimpleRouter()
router.register(r'', views.PrepaidViewSet, basename='prepaid')

urlpatterns = [
    # GET    /api/prepaids/                            - Paginated prepaids
    # GET    /api/prepaids/all/                        - All prepaids
    # GET    /api/prepaids/status/?status=             - Prepaids by status
    # GET    /api/prepaids/{id}/                       - Prepaid detail
    # GET    /api/prepaids/client/{client_id}/         - Client prepaids
    # POST   /api/prepaids/client/{client_id}/         - Add prepaid to client
    # GET    /api/prepaids/client/{client_id}/pending/ - Client pending prepaids
    # GET    /api/prepaids/client/{client_id}/total/   - Client pending total
    path('', include(router.urls)),
]
