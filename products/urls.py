# products/urls.py
from django.urls import path, include
from rest_framework_nested import routers

from .views import ProductViewSet, ReviewViewSet

# ------------------ 1. Main Router ------------------
router = routers.DefaultRouter()
router.register(r'products', ProductViewSet, basename='product')

# ------------------ 2. Nested Router for Product Reviews ------------------
# /products/{product_pk}/reviews/
products_router = routers.NestedSimpleRouter(router, r'products', lookup='product')
products_router.register(r'reviews', ReviewViewSet, basename='product-reviews')

urlpatterns = [
    path('', include(router.urls)),
    path('', include(products_router.urls)),
]
