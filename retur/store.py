"""
Retur Module - Return Store

All reads and writes of the retur table go through these functions.
Views never touch Retur.objects directly.

Every database failure is re-raised as StorageError, lookups that find
nothing raise NotFound and bad refund modes raise InvalidInput.
The store knows nothing about undo: delete_retur() hands back a snapshot
and the caller decides what to do with it.
"""

import logging
from dataclasses import dataclass

from django.db import DatabaseError, transaction

from .exceptions import InvalidInput, NotFound, StorageError
from .models import Retur

logger = logging.getLogger('retur')

# Same choices the API schema advertises through ApproveReturSerializer
VALID_REFUND_MODES = tuple(value for value, _ in Retur.REFUND_MODE_CHOICES)


@dataclass(frozen=True)
class DeletedRetur:
    """Copy of a retur row taken just before it was deleted."""

    id: int
    item: str
    reason: str
    status: str
    refund_mode: str

    @classmethod
    def from_retur(cls, retur):
        return cls(
            id=retur.id,
            item=retur.item,
            reason=retur.reason,
            status=retur.status,
            refund_mode=retur.refund_mode,
        )


def list_returs():
    try:
        return list(Retur.objects.order_by('id'))
    except DatabaseError as exc:
        raise StorageError('Failed to retrieve returns') from exc


def create_retur(item, reason):
    """
    Insert a new retur.

    Only item and reason come from the client. Status always starts
    as Pending with no refund mode.
    """
    try:
        retur = Retur.objects.create(
            item=item,
            reason=reason,
            status=Retur.STATUS_PENDING,
            refund_mode='',
        )
    except DatabaseError as exc:
        raise StorageError('Failed to create return') from exc

    logger.info(f'Retur created: {retur.id} ({retur.item})')
    return retur


def get_retur(retur_id):
    try:
        return Retur.objects.get(id=retur_id)
    except Retur.DoesNotExist:
        raise NotFound(f'Return {retur_id} not found')
    except DatabaseError as exc:
        raise StorageError('Failed to retrieve return') from exc


def approve_retur(retur_id, refund_mode):
    """
    Approve a retur with the given refund mode.

    The status and refund mode are written by one UPDATE filtered on id,
    so there is no read-then-write window. Approving an already approved
    retur is allowed and simply overwrites refund_mode; with concurrent
    approvals the last writer wins.
    """
    if refund_mode not in VALID_REFUND_MODES:
        raise InvalidInput(
            f"refund_mode must be '{Retur.REFUND_ITEM}' or '{Retur.REFUND_CASH}'"
        )

    try:
        updated = Retur.objects.filter(id=retur_id).update(
            status=Retur.STATUS_APPROVED,
            refund_mode=refund_mode,
        )
    except DatabaseError as exc:
        raise StorageError('Failed to update return') from exc

    if not updated:
        raise NotFound(f'Return {retur_id} not found')

    logger.info(f'Retur approved: {retur_id} refund_mode={refund_mode}')
    return get_retur(retur_id)


def delete_retur(retur_id):
    """
    Delete a retur and return a DeletedRetur snapshot of it.

    The row is locked before it is copied so two concurrent deletes of
    the same id cannot both produce a snapshot.
    """
    try:
        with transaction.atomic():
            retur = Retur.objects.select_for_update().get(id=retur_id)
            snapshot = DeletedRetur.from_retur(retur)
            retur.delete()
    except Retur.DoesNotExist:
        raise NotFound(f'Return {retur_id} not found')
    except DatabaseError as exc:
        raise StorageError('Failed to delete return') from exc

    logger.info(f'Retur deleted: {retur_id}')
    return snapshot


def restore_retur(snapshot, preserve_id=False):
    """
    Insert a deleted retur again, keeping its status and refund mode.

    By default the restored row gets a new id, so any reference to the
    old id is stale after an undo. With preserve_id=True the old id is
    reused if nothing else holds it; otherwise a new id is issued.
    """
    fields = {
        'item': snapshot.item,
        'reason': snapshot.reason,
        'status': snapshot.status,
        'refund_mode': snapshot.refund_mode,
    }

    try:
        if preserve_id:
            if Retur.objects.filter(id=snapshot.id).exists():
                logger.warning(f'Retur id {snapshot.id} is taken, restoring under a new id')
            else:
                fields['id'] = snapshot.id
        retur = Retur.objects.create(**fields)
    except DatabaseError as exc:
        raise StorageError('Failed to restore return') from exc

    logger.info(f'Retur restored: {snapshot.id} → {retur.id}')
    return retur
