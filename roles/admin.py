from django.contrib import admin
from roles.models import Admin, Customer, DeliveryAgent, Manager, Staff


class ManagerInline(admin.StackedInline):
    model = Manager
    extra = 0


class DeliveryAgentInline(admin.StackedInline):
    model = DeliveryAgent
    extra = 0


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ('identity', 'role', 'status', 'restaurant', 'created_at')
    list_filter = ('role', 'status')
    search_fields = ('identity__email', 'identity__name')
    raw_id_fields = ('identity',)
    inlines = [ManagerInline, DeliveryAgentInline]

    def has_add_permission(self, request):
        # a bare Staff row without its Manager/DeliveryAgent is an orphan
        return False


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ('identity', 'created_at')
    search_fields = ('identity__email', 'identity__name')
    raw_id_fields = ('identity',)


@admin.register(Admin)
class AdminAdmin(admin.ModelAdmin):
    list_display = ('identity', 'created_at')

    def has_add_permission(self, request):
        # the admin is created through registration only
        return False
