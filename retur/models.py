"""
Retur Module - Database Models

TABLES:
1. Retur → A customer's returned item with its resolution state
"""

from django.db import models


# ============================================================
# RETUR MODEL
# ============================================================

class Retur(models.Model):
    """
    One returned item.

    Lifecycle:
        Pending  → created by customer (refund_mode empty)
        Approved → approved with refund_mode 'barang' or 'uang'
    There is no way back from Approved.
    """

    STATUS_PENDING = 'Pending'
    STATUS_APPROVED = 'Approved'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
    ]

    REFUND_ITEM = 'barang'
    REFUND_CASH = 'uang'

    REFUND_MODE_CHOICES = [
        (REFUND_ITEM, 'Replacement Item'),
        (REFUND_CASH, 'Cash Refund'),
    ]

    item = models.CharField(max_length=255)
    reason = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    # Empty while Pending
    refund_mode = models.CharField(max_length=10, choices=REFUND_MODE_CHOICES, blank=True, default='')

    class Meta:
        db_table = 'retur'
        ordering = ['id']

    def __str__(self):
        return f"Retur {self.id} - {self.item} ({self.status})"

    @property
    def is_approved(self):
        return self.status == self.STATUS_APPROVED
