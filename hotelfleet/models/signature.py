"""
Signature
---------------------------

The guest's signature on a rental contract, stored as PNG bytes. Signatures
are never modified once written.
"""

from tortoise import Model, fields


class Signature(Model):
    id = fields.IntField(primary_key=True)
    hotel_id: int = fields.IntField()
    data: bytes = fields.BinaryField()
    created_at = fields.DatetimeField(auto_now_add=True)
