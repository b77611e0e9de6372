from django.contrib import admin
from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    """Admin interface for credit clients."""

    list_display = [
        'client_id',
        'display_name',
        'document_number',
        'phone',
        'email',
        'created_at',
    ]

    search_fields = [
        'first_name',
        'last_name',
        'company_name',
        'document_number',
    ]

    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Identity', {
            'fields': ('first_name', 'last_name', 'company_name', 'document_number')
        }),
        ('Contact', {
            'fields': ('phone', 'email', 'address')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )
