# Address Module
"""
Kaspa address encoding and decoding (CashAddr-style checksum).
"""

from .kaspa_address import (
    encode_address,
    decode_address,
    address_to_payload,
    payload_to_address,
    network_prefix,
)

__all__ = [
    'encode_address',
    'decode_address',
    'address_to_payload',
    'payload_to_address',
    'network_prefix',
]
