from django.contrib import admin
from django.utils.html import format_html
from .models import Credit, CreditStatus


STATUS_COLORS = {
    CreditStatus.PAID: ('#4CAF50', 'white'),
    CreditStatus.OVERDUE: ('#D64545', 'white'),
    CreditStatus.PENDING: ('#FFC107', '#333'),
}


@admin.register(Credit)
class CreditAdmin(admin.ModelAdmin):
    """
    Read-mostly admin for credits.

    Balances change only through the payment services, so amount_paid and
    status are read-only here.
    """

    list_display = [
        'credit_id',
        'client',
        'sale_id',
        'credit_amount',
        'amount_paid',
        'balance_display',
        'due_date',
        'status_badge',
    ]

    list_filter = [
        'status',
        'due_date',
    ]

    search_fields = [
        'credit_id',
        'client__first_name',
        'client__last_name',
        'client__company_name',
        'client__document_number',
    ]

    raw_id_fields = ['client']

    readonly_fields = ['amount_paid', 'status', 'created_at', 'updated_at']

    date_hierarchy = 'due_date'

    def balance_display(self, obj):
        return f'{obj.balance:.2f}'
    balance_display.short_description = 'Balance'

    def status_badge(self, obj):
        """Display stored status as colored badge."""
        bg, fg = STATUS_COLORS.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'
