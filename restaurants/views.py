"""
ViewSets for Restaurants app.
"""
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters
from rest_framework.permissions import AllowAny

from restaurants.models import Restaurant
from restaurants.serializers import RestaurantSerializer


class RestaurantViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only ViewSet for Restaurant.
    Restaurants are admin-managed; managers and drivers pick one at signup.
    """
    queryset = Restaurant.active.select_related('address')
    serializer_class = RestaurantSerializer
    permission_classes = [AllowAny]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['address__city']
    search_fields = ['name']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']
