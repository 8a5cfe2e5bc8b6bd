from django.contrib import admin
from accounts.models import Identity, Credential


class CredentialInline(admin.StackedInline):
    model = Credential
    can_delete = False
    readonly_fields = ('password_hash', 'updated_at')
    fields = ('password_hash', 'updated_at')


@admin.register(Identity)
class IdentityAdmin(admin.ModelAdmin):
    list_display = ('email', 'name', 'phone', 'is_active', 'last_login', 'created_at')
    search_fields = ('email', 'name')
    ordering = ('-created_at',)
    list_filter = ('is_active',)
    readonly_fields = ('last_login', 'created_at', 'updated_at')
    fieldsets = (
        (None, {'fields': ('email', 'name', 'phone')}),
        ('Status', {'fields': ('is_active', 'last_login', 'created_at', 'updated_at')}),
    )
    inlines = [CredentialInline]

    def has_add_permission(self, request):
        # identities are created through registration only
        return False
