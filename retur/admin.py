"""
Retur Module - Django Admin Configuration

Internal admin panel for the operations team to:
- View and search returs
- Approve returs in bulk with a refund mode

Access at: http://127.0.0.1:8000/admin/
"""

from django.contrib import admin

from . import store
from .exceptions import NotFound
from .models import Retur


@admin.register(Retur)
class ReturAdmin(admin.ModelAdmin):
    list_display = ['id', 'item', 'reason', 'status', 'refund_mode']
    list_filter = ['status', 'refund_mode']
    search_fields = ['item', 'reason']
    # Status changes go through the approve actions, never free editing
    readonly_fields = ['status', 'refund_mode']
    list_per_page = 25

    actions = ['approve_with_item', 'approve_with_cash']

    def _approve(self, request, queryset, refund_mode):
        approved = 0
        for retur_id in queryset.values_list('id', flat=True):
            try:
                store.approve_retur(retur_id, refund_mode)
            except NotFound:
                continue
            approved += 1
        self.message_user(request, f'{approved} return(s) approved ({refund_mode}).')

    @admin.action(description='Approve selected returns (replacement item)')
    def approve_with_item(self, request, queryset):
        self._approve(request, queryset, Retur.REFUND_ITEM)

    @admin.action(description='Approve selected returns (cash refund)')
    def approve_with_cash(self, request, queryset):
        self._approve(request, queryset, Retur.REFUND_CASH)

    def has_delete_permission(self, request, obj=None):
        # Deletes go through the API so they land in the undo buffer
        return False
