"""
Retur Module - Serializers

Input:
    CreateReturSerializer  → POST /retur body
    ApproveReturSerializer → POST /retur/{id}/approve body (schema only,
                             refund_mode is checked by the store)
Output:
    ReturSerializer        → every record returned by the API
"""

from rest_framework import serializers
from .models import Retur


# ============================================================
# RETUR SERIALIZER
# ============================================================

class ReturSerializer(serializers.ModelSerializer):
    """
    What the client sees:
    {
        "id": 7,
        "item": "Shoes",
        "reason": "Wrong size",
        "status": "Approved",
        "refund_mode": "uang"
    }
    """

    class Meta:
        model = Retur
        fields = ['id', 'item', 'reason', 'status', 'refund_mode']
        read_only_fields = fields


# ============================================================
# CREATE RETUR SERIALIZER
# ============================================================

class CreateReturSerializer(serializers.Serializer):
    """
    Validates a new retur.

    Any id / status / refund_mode in the body is ignored: only item
    and reason are declared here.
    """

    item = serializers.CharField(max_length=255, help_text="Returned item")
    reason = serializers.CharField(max_length=2000, help_text="Why it is returned")


# ============================================================
# APPROVE RETUR SERIALIZER
# ============================================================

class ApproveReturSerializer(serializers.Serializer):
    """
    Documents the approve body in the API schema. The view hands refund_mode
    straight to store.approve_retur, which checks it against the same
    Retur.REFUND_MODE_CHOICES.
    """

    refund_mode = serializers.ChoiceField(
        choices=Retur.REFUND_MODE_CHOICES,
        help_text="'barang' for a replacement item, 'uang' for cash",
    )


class MessageSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
