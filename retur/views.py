"""
Retur Module - API Views

Thin wrappers: parse the request, call the store, serialize the result.
Store errors map to status codes:
    InvalidInput → 400, NotFound → 404, StorageError → 500
"""

import logging
import re

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from . import store
from .exceptions import InvalidInput, NotFound, StorageError
from .serializers import (
    ReturSerializer,
    CreateReturSerializer,
    ApproveReturSerializer,
    MessageSerializer,
    ErrorSerializer,
)
from .undo import deleted_returs

logger = logging.getLogger('retur')

ID_PATTERN = re.compile(r'[0-9]+')


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def _error(message, code):
    return Response({'error': message}, status=code)


def _parse_id(raw_id):
    """URL ids must be plain ASCII digits; anything else is a 400."""
    if not isinstance(raw_id, str) or not ID_PATTERN.fullmatch(raw_id):
        raise InvalidInput('Invalid ID format')
    return int(raw_id)


def _storage_failure(exc):
    # Backend detail stays in the log
    logger.exception(f'Storage error: {exc.message}')
    return _error(exc.message, status.HTTP_500_INTERNAL_SERVER_ERROR)


# ============================================================
# API ENDPOINTS
# ============================================================

@extend_schema(methods=['GET'], responses={200: ReturSerializer(many=True), 500: ErrorSerializer})
@extend_schema(
    methods=['POST'],
    request=CreateReturSerializer,
    responses={201: ReturSerializer, 400: ErrorSerializer, 500: ErrorSerializer},
)
@api_view(['GET', 'POST'])
def retur_collection(request):
    """
    GET  /retur → all returs
    POST /retur → create a retur (always starts Pending)
    """
    if request.method == 'POST':
        return _create_retur(request)
    return _list_returs(request)


def _list_returs(request):
    try:
        returs = store.list_returs()
    except StorageError as exc:
        return _storage_failure(exc)

    return Response(ReturSerializer(returs, many=True).data)


def _create_retur(request):
    serializer = CreateReturSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        retur = store.create_retur(data['item'], data['reason'])
    except StorageError as exc:
        return _storage_failure(exc)

    return Response(ReturSerializer(retur).data, status=status.HTTP_201_CREATED)


@extend_schema(responses={200: ReturSerializer, 400: ErrorSerializer, 404: ErrorSerializer})
@api_view(['GET'])
def get_retur_detail(request, retur_id):
    """
    GET /retur/{id}
    """
    try:
        retur = store.get_retur(_parse_id(retur_id))
    except InvalidInput as exc:
        return _error(exc.message, status.HTTP_400_BAD_REQUEST)
    except NotFound as exc:
        return _error(exc.message, status.HTTP_404_NOT_FOUND)
    except StorageError as exc:
        return _storage_failure(exc)

    return Response(ReturSerializer(retur).data)


@extend_schema(
    request=ApproveReturSerializer,
    responses={200: ReturSerializer, 400: ErrorSerializer, 404: ErrorSerializer},
)
@api_view(['POST'])
def approve_retur(request, retur_id):
    """
    POST /retur/{id}/approve

    Request: {"refund_mode": "barang"} or {"refund_mode": "uang"}
    Approving twice is not rejected; the second call overwrites refund_mode.
    """
    if not isinstance(request.data, dict):
        return _error('Invalid input', status.HTTP_400_BAD_REQUEST)

    try:
        retur = store.approve_retur(_parse_id(retur_id), request.data.get('refund_mode'))
    except InvalidInput as exc:
        return _error(exc.message, status.HTTP_400_BAD_REQUEST)
    except NotFound as exc:
        return _error(exc.message, status.HTTP_404_NOT_FOUND)
    except StorageError as exc:
        return _storage_failure(exc)

    return Response(ReturSerializer(retur).data)


@extend_schema(responses={200: MessageSerializer, 400: ErrorSerializer, 404: ErrorSerializer})
@api_view(['DELETE'])
def delete_retur(request, retur_id):
    """
    DELETE /retur/{id}/delete

    Removes the retur and pushes its snapshot onto the undo buffer.
    """
    try:
        parsed_id = _parse_id(retur_id)
        snapshot = store.delete_retur(parsed_id)
    except InvalidInput as exc:
        return _error(exc.message, status.HTTP_400_BAD_REQUEST)
    except NotFound as exc:
        return _error(exc.message, status.HTTP_404_NOT_FOUND)
    except StorageError as exc:
        return _storage_failure(exc)

    deleted_returs.push(snapshot)

    return Response({'message': f'Return with ID {parsed_id} deleted'})


@extend_schema(request=None, responses={200: ReturSerializer, 400: ErrorSerializer, 500: ErrorSerializer})
@api_view(['POST'])
def undo_delete(request):
    """
    POST /retur/undo

    Re-inserts the most recently deleted retur. See RETUR_UNDO_POLICY
    for whether it keeps its old id and what happens if the insert fails.
    """
    snapshot, found = deleted_returs.pop()
    if not found:
        logger.warning('Undo requested but nothing was deleted')
        return _error('No returns to undo', status.HTTP_400_BAD_REQUEST)

    policy = settings.RETUR_UNDO_POLICY
    try:
        retur = store.restore_retur(snapshot, preserve_id=policy['PRESERVE_ID_ON_RESTORE'])
    except StorageError as exc:
        if policy['REQUEUE_ON_RESTORE_FAILURE']:
            deleted_returs.push(snapshot)
        else:
            logger.error(f'Snapshot of retur {snapshot.id} dropped after failed restore')
        return _storage_failure(exc)

    return Response(ReturSerializer(retur).data)
