"""Root URL configuration for the food-delivery platform backend."""
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/", include("accounts.urls")),
    path("api/", include("restaurants.urls")),
]
