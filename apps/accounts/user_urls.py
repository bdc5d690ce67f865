from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'users'

router = SimpleRouter()
router.register(r'', views.UserViewSet, basename='user')

urlpatterns = [
    # GET    /api/users/        - Paginated users
    # POST   /api/users/        - Create user (admin)
    # GET    /api/users/all/    - All users
    # GET    /api/users/{id}/   - User detail
    # PATCH  /api/users/{id}/   - Update user
    # DELETE /api/users/{id}/   - Soft delete
    path('', include(router.urls)),
]
