"""
Retur Module - API Tests

These tests validate the HTTP workflows:
1. Creation (always Pending)
2. Approval (refund mode validation, not found, re-approval)
3. Delete + undo (LIFO order, identity, failure handling)

Run tests with: python manage.py test retur
"""

from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import Client, TestCase, override_settings
from rest_framework.test import APIClient

from .exceptions import StorageError
from .models import Retur
from .undo import deleted_returs


class BaseTestCase(TestCase):
    """
    Base test class with helper methods.
    Empties the process-wide undo buffer around every test.
    """

    def setUp(self):
        self.client = APIClient()
        self.base_url = '/retur'
        deleted_returs.clear()
        self.addCleanup(deleted_returs.clear)

    def _create(self, item='Shoes', reason='Wrong size'):
        response = self.client.post(
            self.base_url,
            {'item': item, 'reason': reason},
            format='json'
        )
        self.assertEqual(response.status_code, 201)
        return response.data

    def _approve(self, retur_id, refund_mode):
        return self.client.post(
            f'{self.base_url}/{retur_id}/approve',
            {'refund_mode': refund_mode},
            format='json'
        )

    def _delete(self, retur_id):
        return self.client.delete(f'{self.base_url}/{retur_id}/delete')

    def _undo(self):
        return self.client.post(f'{self.base_url}/undo')


# ============================================================
# CREATION TESTS
# ============================================================

class CreateReturTests(BaseTestCase):

    def test_create_starts_pending(self):
        data = self._create()
        self.assertEqual(data['item'], 'Shoes')
        self.assertEqual(data['reason'], 'Wrong size')
        self.assertEqual(data['status'], 'Pending')
        self.assertEqual(data['refund_mode'], '')

    def test_client_status_and_refund_mode_ignored(self):
        """Status, refund_mode and id in the body must not reach the database."""
        response = self.client.post(
            self.base_url,
            {
                'id': 999,
                'item': 'Jacket',
                'reason': 'Torn sleeve',
                'status': 'Approved',
                'refund_mode': 'uang',
            },
            format='json'
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['status'], 'Pending')
        self.assertEqual(response.data['refund_mode'], '')
        self.assertNotEqual(response.data['id'], 999)

        retur = Retur.objects.get(id=response.data['id'])
        self.assertEqual(retur.status, Retur.STATUS_PENDING)

    def test_missing_item_rejected(self):
        response = self.client.post(self.base_url, {'reason': 'Broken'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('item', response.data)
        self.assertEqual(Retur.objects.count(), 0)

    def test_malformed_json_rejected(self):
        response = self.client.post(
            self.base_url,
            data='{"item": "Shoes",',
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Retur.objects.count(), 0)


# ============================================================
# LIST & DETAIL TESTS
# ============================================================

class ListAndDetailTests(BaseTestCase):

    def test_list_empty(self):
        response = self.client.get(self.base_url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, [])

    def test_list_in_creation_order(self):
        first = self._create(item='Shoes')
        second = self._create(item='Hat')

        response = self.client.get(self.base_url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual([r['id'] for r in response.data], [first['id'], second['id']])

    def test_get_detail(self):
        created = self._create()
        response = self.client.get(f'{self.base_url}/{created["id"]}')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['item'], 'Shoes')

    def test_get_nonexistent(self):
        response = self.client.get(f'{self.base_url}/9999')
        self.assertEqual(response.status_code, 404)
        self.assertIn('error', response.data)

    def test_get_bad_id(self):
        response = self.client.get(f'{self.base_url}/abc')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'Invalid ID format')

    def test_get_padded_id_rejected(self):
        created = self._create()
        response = self.client.get(f'{self.base_url}/%20{created["id"]}%20')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'Invalid ID format')

    def test_get_non_ascii_digit_id_rejected(self):
        # Arabic-Indic digit seven
        response = self.client.get(f'{self.base_url}/%D9%A7')
        self.assertEqual(response.status_code, 400)

    def test_storage_failure_hides_details(self):
        with patch('retur.store.list_returs', side_effect=StorageError('Failed to retrieve returns')):
            with self.assertLogs('retur', level='ERROR'):
                response = self.client.get(self.base_url)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {'error': 'Failed to retrieve returns'})


# ============================================================
# APPROVE TESTS
# ============================================================

class ApproveReturTests(BaseTestCase):

    def test_approve_with_cash(self):
        created = self._create()
        response = self._approve(created['id'], 'uang')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], 'Approved')
        self.assertEqual(response.data['refund_mode'], 'uang')

    def test_approve_with_item(self):
        created = self._create()
        response = self._approve(created['id'], 'barang')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['refund_mode'], 'barang')

    def test_invalid_refund_mode_leaves_record_unchanged(self):
        created = self._create()
        response = self._approve(created['id'], 'voucher')
        self.assertEqual(response.status_code, 400)
        self.assertIn('refund_mode', response.data['error'])

        retur = Retur.objects.get(id=created['id'])
        self.assertEqual(retur.status, Retur.STATUS_PENDING)
        self.assertEqual(retur.refund_mode, '')

    def test_missing_refund_mode_rejected(self):
        created = self._create()
        response = self.client.post(f'{self.base_url}/{created["id"]}/approve', {}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_non_object_body_rejected(self):
        created = self._create()
        response = self.client.post(
            f'{self.base_url}/{created["id"]}/approve', ['uang'], format='json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'Invalid input')

    def test_approve_nonexistent(self):
        response = self._approve(9999, 'uang')
        self.assertEqual(response.status_code, 404)

    def test_approve_bad_id(self):
        response = self._approve('abc', 'uang')
        self.assertEqual(response.status_code, 400)

    def test_reapprove_overwrites_refund_mode(self):
        """
        Approving an approved retur is not blocked: the second call wins.
        """
        created = self._create()
        self._approve(created['id'], 'barang')
        response = self._approve(created['id'], 'uang')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], 'Approved')
        self.assertEqual(response.data['refund_mode'], 'uang')


# ============================================================
# DELETE TESTS
# ============================================================

class DeleteReturTests(BaseTestCase):

    def test_delete_removes_record(self):
        created = self._create()
        response = self._delete(created['id'])
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], f'Return with ID {created["id"]} deleted')

        self.assertEqual(self.client.get(f'{self.base_url}/{created["id"]}').status_code, 404)
        self.assertEqual(self.client.get(self.base_url).data, [])
        self.assertEqual(len(deleted_returs), 1)

    def test_delete_nonexistent(self):
        response = self._delete(9999)
        self.assertEqual(response.status_code, 404)
        self.assertTrue(deleted_returs.is_empty())

    def test_delete_bad_id(self):
        response = self._delete('abc')
        self.assertEqual(response.status_code, 400)

    def test_delete_storage_failure_leaves_buffer_empty(self):
        """A delete that fails in the database must not be undoable."""
        created = self._create()

        with patch.object(Retur, 'delete', side_effect=DatabaseError('disk full')):
            with self.assertLogs('retur', level='ERROR'):
                response = self._delete(created['id'])
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {'error': 'Failed to delete return'})
        self.assertTrue(Retur.objects.filter(id=created['id']).exists())
        self.assertTrue(deleted_returs.is_empty())

    def test_delete_requires_delete_method(self):
        created = self._create()
        response = self.client.post(f'{self.base_url}/{created["id"]}/delete')
        self.assertEqual(response.status_code, 405)
        self.assertTrue(Retur.objects.filter(id=created['id']).exists())


# ============================================================
# UNDO TESTS
# ============================================================

class UndoDeleteTests(BaseTestCase):

    def test_undo_empty_buffer(self):
        self._create()
        response = self._undo()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'No returns to undo'})
        self.assertEqual(Retur.objects.count(), 1)

    def test_undo_restores_content_under_new_id(self):
        created = self._create()
        self._approve(created['id'], 'barang')
        self._delete(created['id'])

        response = self._undo()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['item'], 'Shoes')
        self.assertEqual(response.data['reason'], 'Wrong size')
        self.assertEqual(response.data['status'], 'Approved')
        self.assertEqual(response.data['refund_mode'], 'barang')
        # The old id is stale after undo
        self.assertNotEqual(response.data['id'], created['id'])
        self.assertEqual(self.client.get(f'{self.base_url}/{created["id"]}').status_code, 404)
        self.assertTrue(deleted_returs.is_empty())

    def test_undo_is_lifo(self):
        first = self._create(item='Shoes')
        second = self._create(item='Hat')
        self._delete(first['id'])
        self._delete(second['id'])

        self.assertEqual(self._undo().data['item'], 'Hat')
        self.assertEqual(self._undo().data['item'], 'Shoes')
        self.assertEqual(self._undo().status_code, 400)

    @override_settings(RETUR_UNDO_POLICY={
        'PRESERVE_ID_ON_RESTORE': True,
        'REQUEUE_ON_RESTORE_FAILURE': True,
    })
    def test_undo_can_preserve_id(self):
        created = self._create()
        self._delete(created['id'])

        response = self._undo()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['id'], created['id'])
        self.assertEqual(self.client.get(f'{self.base_url}/{created["id"]}').status_code, 200)

    def test_failed_restore_requeues_snapshot(self):
        created = self._create()
        self._delete(created['id'])

        with patch('retur.store.restore_retur', side_effect=StorageError('Failed to restore return')):
            with self.assertLogs('retur', level='ERROR'):
                response = self._undo()
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {'error': 'Failed to restore return'})
        self.assertEqual(len(deleted_returs), 1)

        # The snapshot is still there for the next attempt
        response = self._undo()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['item'], 'Shoes')

    @override_settings(RETUR_UNDO_POLICY={
        'PRESERVE_ID_ON_RESTORE': False,
        'REQUEUE_ON_RESTORE_FAILURE': False,
    })
    def test_failed_restore_can_drop_snapshot(self):
        created = self._create()
        self._delete(created['id'])

        with patch('retur.store.restore_retur', side_effect=StorageError('Failed to restore return')):
            with self.assertLogs('retur', level='ERROR'):
                response = self._undo()
        self.assertEqual(response.status_code, 500)
        self.assertTrue(deleted_returs.is_empty())
        self.assertEqual(Retur.objects.count(), 0)

    def test_full_lifecycle(self):
        """Create → approve (cash) → delete → undo."""
        created = self._create(item='Shoes', reason='Wrong size')
        self.assertEqual(created['status'], 'Pending')

        approved = self._approve(created['id'], 'uang').data
        self.assertEqual(approved['status'], 'Approved')
        self.assertEqual(approved['refund_mode'], 'uang')

        self.assertEqual(self._delete(created['id']).status_code, 200)
        self.assertEqual(self.client.get(f'{self.base_url}/{created["id"]}').status_code, 404)

        restored = self._undo().data
        self.assertEqual(restored['item'], 'Shoes')
        self.assertEqual(restored['status'], 'Approved')
        self.assertEqual(restored['refund_mode'], 'uang')
        self.assertNotEqual(restored['id'], created['id'])


# ============================================================
# SCHEMA & ADMIN TESTS
# ============================================================

class SchemaAndAdminTests(TestCase):

    def test_schema_available(self):
        response = APIClient().get('/api/schema/')
        self.assertEqual(response.status_code, 200)

    def test_admin_bulk_approve(self):
        admin_user = get_user_model().objects.create_superuser(
            username='ops', email='ops@example.com', password='secret-pass'
        )
        client = Client()
        client.force_login(admin_user)

        retur = Retur.objects.create(item='Shoes', reason='Wrong size')
        response = client.get('/admin/retur/retur/')
        self.assertEqual(response.status_code, 200)

        response = client.post('/admin/retur/retur/', {
            'action': 'approve_with_cash',
            '_selected_action': [retur.id],
        })
        self.assertEqual(response.status_code, 302)

        retur.refresh_from_db()
        self.assertEqual(retur.status, Retur.STATUS_APPROVED)
        self.assertEqual(retur.refund_mode, Retur.REFUND_CASH)
