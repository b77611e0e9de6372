from django.contrib import admin
from django.utils.html import format_html
from .models import Payment, PaymentMethod, PaymentType


TYPE_COLORS = {
    PaymentType.CREDIT: ('#2F6690', 'white'),
    PaymentType.SALE: ('#4CAF50', 'white'),
    PaymentType.OTHER: ('#ccc', '#333'),
}


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ['payment_method_id', 'name', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name']


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Read-only admin for payments.

    Payments are an append-only audit trail; corrections are new payments.
    """

    list_display = [
        'payment_id',
        'amount',
        'type_badge',
        'credit',
        'sale_id',
        'payment_method',
        'status',
        'user',
        'payment_timestamp',
    ]

    list_filter = [
        'payment_type',
        'status',
        'payment_method',
        'payment_timestamp',
    ]

    search_fields = [
        'payment_id',
        'notes',
        'credit__credit_id',
    ]

    date_hierarchy = 'payment_timestamp'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def type_badge(self, obj):
        """Display payment type as colored badge."""
        bg, fg = TYPE_COLORS.get(obj.payment_type, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_payment_type_display()
        )
    type_badge.short_description = 'Type'
    type_badge.admin_order_field = 'payment_type'
