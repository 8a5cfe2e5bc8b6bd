from rest_framework import serializers

from restaurants.models import Restaurant


class RestaurantSerializer(serializers.ModelSerializer):
    """Read-only serializer for Restaurant (used in staff signup dropdown)."""
    phone = serializers.CharField(read_only=True)
    address = serializers.SerializerMethodField()

    class Meta:
        model = Restaurant
        fields = ['id', 'name', 'phone', 'address', 'is_active', 'created_at']
        read_only_fields = ['id', 'name', 'is_active', 'created_at']

    def get_address(self, obj):
        if obj.address:
            return obj.address.address_string
        return None
