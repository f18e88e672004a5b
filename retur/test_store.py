"""
Retur Module - Store Tests

Exercise the store functions directly, without HTTP.
"""

from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase

from . import store
from .exceptions import InvalidInput, NotFound, StorageError
from .models import Retur
from .serializers import ApproveReturSerializer


class StoreLifecycleTests(TestCase):

    def test_create_is_pending(self):
        retur = store.create_retur('Shoes', 'Wrong size')
        self.assertIsNotNone(retur.id)
        self.assertEqual(retur.status, Retur.STATUS_PENDING)
        self.assertEqual(retur.refund_mode, '')
        self.assertFalse(retur.is_approved)

    def test_approve_sets_status_and_mode(self):
        retur = store.create_retur('Shoes', 'Wrong size')
        approved = store.approve_retur(retur.id, Retur.REFUND_CASH)
        self.assertTrue(approved.is_approved)
        self.assertEqual(approved.refund_mode, Retur.REFUND_CASH)

    def test_approve_invalid_mode(self):
        retur = store.create_retur('Shoes', 'Wrong size')
        for bad_mode in ['', None, 'cash', 'Uang', 1]:
            with self.assertRaises(InvalidInput):
                store.approve_retur(retur.id, bad_mode)

        retur.refresh_from_db()
        self.assertEqual(retur.status, Retur.STATUS_PENDING)
        self.assertEqual(retur.refund_mode, '')

    def test_concurrent_approvals_last_writer_wins(self):
        """
        Two approvals that both saw the retur as Pending are not serialized:
        each is a plain UPDATE and whichever commits last decides refund_mode.
        """
        retur = store.create_retur('Shoes', 'Wrong size')
        seen_by_first = store.get_retur(retur.id)
        seen_by_second = store.get_retur(retur.id)
        self.assertFalse(seen_by_first.is_approved)
        self.assertFalse(seen_by_second.is_approved)

        store.approve_retur(retur.id, Retur.REFUND_ITEM)
        store.approve_retur(retur.id, Retur.REFUND_CASH)

        retur.refresh_from_db()
        self.assertEqual(retur.status, Retur.STATUS_APPROVED)
        self.assertEqual(retur.refund_mode, Retur.REFUND_CASH)

    def test_refund_modes_match_api_schema(self):
        schema_choices = ApproveReturSerializer().fields['refund_mode'].choices
        self.assertEqual(set(store.VALID_REFUND_MODES), set(schema_choices))

    def test_approve_missing(self):
        with self.assertRaises(NotFound):
            store.approve_retur(12345, Retur.REFUND_ITEM)

    def test_list_in_id_order(self):
        first = store.create_retur('Shoes', 'Wrong size')
        second = store.create_retur('Hat', 'Too small')
        self.assertEqual([r.id for r in store.list_returs()], [first.id, second.id])

    def test_delete_returns_snapshot(self):
        retur = store.create_retur('Shoes', 'Wrong size')
        store.approve_retur(retur.id, Retur.REFUND_ITEM)

        snapshot = store.delete_retur(retur.id)
        self.assertEqual(snapshot.id, retur.id)
        self.assertEqual(snapshot.status, Retur.STATUS_APPROVED)
        self.assertEqual(snapshot.refund_mode, Retur.REFUND_ITEM)

        with self.assertRaises(NotFound):
            store.get_retur(retur.id)
        self.assertEqual(store.list_returs(), [])

    def test_delete_missing(self):
        with self.assertRaises(NotFound):
            store.delete_retur(12345)


class StoreRestoreTests(TestCase):

    def test_restore_issues_new_id(self):
        retur = store.create_retur('Shoes', 'Wrong size')
        snapshot = store.delete_retur(retur.id)

        restored = store.restore_retur(snapshot)
        self.assertNotEqual(restored.id, snapshot.id)
        self.assertEqual(restored.item, 'Shoes')
        self.assertEqual(restored.status, Retur.STATUS_PENDING)

    def test_restore_preserving_id(self):
        retur = store.create_retur('Shoes', 'Wrong size')
        snapshot = store.delete_retur(retur.id)

        restored = store.restore_retur(snapshot, preserve_id=True)
        self.assertEqual(restored.id, snapshot.id)

    def test_restore_preserving_taken_id_falls_back(self):
        retur = store.create_retur('Shoes', 'Wrong size')
        snapshot = store.delete_retur(retur.id)
        store.restore_retur(snapshot, preserve_id=True)

        with self.assertLogs('retur', level='WARNING'):
            again = store.restore_retur(snapshot, preserve_id=True)
        self.assertNotEqual(again.id, snapshot.id)
        self.assertEqual(Retur.objects.count(), 2)


class StoreStorageErrorTests(TestCase):

    def test_create_failure_wrapped(self):
        with patch.object(Retur.objects, 'create', side_effect=DatabaseError('disk full')):
            with self.assertRaises(StorageError) as ctx:
                store.create_retur('Shoes', 'Wrong size')
        self.assertEqual(ctx.exception.message, 'Failed to create return')
        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)

    def test_approve_failure_wrapped(self):
        retur = store.create_retur('Shoes', 'Wrong size')
        with patch.object(Retur.objects, 'filter', side_effect=DatabaseError('gone away')):
            with self.assertRaises(StorageError):
                store.approve_retur(retur.id, Retur.REFUND_CASH)

    def test_list_failure_wrapped(self):
        with patch.object(Retur.objects, 'order_by', side_effect=DatabaseError('gone away')):
            with self.assertRaises(StorageError):
                store.list_returs()

    def test_get_failure_wrapped(self):
        with patch.object(Retur.objects, 'get', side_effect=DatabaseError('gone away')):
            with self.assertRaises(StorageError) as ctx:
                store.get_retur(1)
        self.assertEqual(ctx.exception.message, 'Failed to retrieve return')
        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)

    def test_delete_failure_wrapped(self):
        retur = store.create_retur('Shoes', 'Wrong size')
        with patch.object(Retur, 'delete', side_effect=DatabaseError('disk full')):
            with self.assertRaises(StorageError) as ctx:
                store.delete_retur(retur.id)
        self.assertEqual(ctx.exception.message, 'Failed to delete return')
        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)
        # The delete rolled back, the row is still there
        self.assertEqual(store.get_retur(retur.id).item, 'Shoes')

    def test_restore_failure_wrapped(self):
        retur = store.create_retur('Shoes', 'Wrong size')
        snapshot = store.delete_retur(retur.id)
        with patch.object(Retur.objects, 'create', side_effect=DatabaseError('duplicate key')):
            with self.assertRaises(StorageError) as ctx:
                store.restore_retur(snapshot)
        self.assertEqual(ctx.exception.message, 'Failed to restore return')
        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)
