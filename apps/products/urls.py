from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'products'

router = SimpleRouter()
router.register(r'', views.ProductViewSet, basename='product')

urlpatterns = [
    # GET    /api/products/                      - Paginated products
    # POST   /api/products/                      - Create product
    # GET    /api/products/all/                  - All products
    # GET    /api/products/category/{category}/  - Products by category
    # GET    /api/products/{id}/                 - Product detail
    # PATCH  /api/products/{id}/                 - Update product
    # DELETE /api/products/{id}/                 - Soft delete
    # PATCH  /api/products/{id}/stock/add/       - Add stock
    # PATCH  /api/products/{id}/stock/subtract/  - Subtract stock
    path('', include(router.urls)),
]
