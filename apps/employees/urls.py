from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'employees'

router = SimpleRouter()
router.register(r'', views.EmployeeViewSet, basename='employee')

urlpatterns = [
    # GET    /api/employees/        - Paginated employees
    # POST   /api/employees/        - Create employee
    # GET    /api/employees/all/    - All employees
    # GET    /api/employees/{id}/   - Employee detail
    # PATCH  /api/employees/{id}/   - Update employee
    # DELETE /api/employees/{id}/   - Soft delete
    path('', include(router.urls)),
]
