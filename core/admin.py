from django.contrib import admin
from core.models import Address


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ('address_line_1', 'city', 'postal_code', 'country', 'is_active')
    list_filter = ('country', 'is_active')
    search_fields = ('address_line_1', 'city', 'postal_code')
