from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path('admin/', admin.site.urls),

    # Product catalog and vendor lifecycle endpoints
    path('api/', include('products.urls')),

    # Registration, current user and JWT login/refresh
    path('api/auth/', include('djoser.urls')),
    path('api/auth/', include('djoser.urls.jwt')),
]
