"""
Signatures
----------

Stores and fetches the PNG signatures guests draw on their rental contract.
"""
import base64
import binascii
from typing import Optional

from hotelfleet.models import Signature
from hotelfleet.service.exceptions import BadInputError

DATA_URL_PREFIX = "data:image/png;base64,"


def decode_signature(encoded: str) -> bytes:
    """
    Decodes a base64 PNG, given either raw or as a data url.

    :raises BadInputError: If the data is empty or not valid base64.
    """
    if not encoded or not encoded.strip():
        raise BadInputError("Signature data cannot be empty")

    if encoded.startswith(DATA_URL_PREFIX):
        encoded = encoded[len(DATA_URL_PREFIX):]

    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as error:
        raise BadInputError("Invalid base64 signature data") from error

    if not data:
        raise BadInputError("Signature data cannot be empty")

    return data


async def store_signature(hotel_id: int, encoded: str) -> Signature:
    """
    Stores a signature for a hotel.

    :raises BadInputError: If the signature can't be decoded.
    """
    return await Signature.create(hotel_id=hotel_id, data=decode_signature(encoded))


async def get_signature(signature_id: Optional[int], hotel_id: int) -> Optional[Signature]:
    """Gets a signature, as long as it belongs to the given hotel."""
    if signature_id is None:
        return None
    return await Signature.filter(id=signature_id, hotel_id=hotel_id).first()
