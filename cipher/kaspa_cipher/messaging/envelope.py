"""
Encrypted Message Envelope

Wire format (no length prefixes):

    | nonce (12) | ephemeral_public_key (33 or 32) | ciphertext || tag (16) |

The key field length is inferred from the byte at offset 12: 0x02 or 0x03
means a 33-byte SEC1 compressed point, anything else means 32 bytes. A
32-byte key whose first byte happens to be 0x02/0x03 is therefore misread
as 33 bytes; encrypt() only ever emits 33-byte keys.

Transport forms:
    to_hex()      lowercase hex of the envelope
    to_payload()  hex("ciph_msg:") + to_hex(), as written to transactions
"""

import string
from dataclasses import dataclass

from ..config import (
    NONCE_SIZE, XONLY_KEY_SIZE, COMPRESSED_KEY_SIZE, COMPRESSED_PREFIXES,
    MESSAGE_PREFIX_HEX,
)
from ..errors import EnvelopeDecodeError, HexDecodeError


@dataclass(frozen=True)
class EncryptedMessage:
    """
    Container for encrypted message components.

    Format: [nonce | ephemeral_public_key | ciphertext]
    """
    nonce: bytes                 # 12 bytes
    ephemeral_public_key: bytes  # 33 bytes (32 accepted on decode)
    ciphertext: bytes            # Variable length, tag included

    def __post_init__(self):
        for name in ('nonce', 'ephemeral_public_key', 'ciphertext'):
            object.__setattr__(self, name, bytes(getattr(self, name)))
        if len(self.nonce) != NONCE_SIZE:
            raise EnvelopeDecodeError(
                f"Nonce must be {NONCE_SIZE} bytes, got {len(self.nonce)}"
            )

    def to_bytes(self) -> bytes:
        """Serialize to bytes."""
        return self.nonce + self.ephemeral_public_key + self.ciphertext

    @classmethod
    def from_bytes(cls, data: bytes) -> 'EncryptedMessage':
        """
        Deserialize from bytes.

        Truncated input is tolerated: if fewer bytes follow the nonce than
        the key field needs, they all become the key and the ciphertext is
        empty. Decryption of such a message fails authentication.
        """
        data = bytes(data)
        if len(data) < NONCE_SIZE:
            raise EnvelopeDecodeError(
                f"Envelope must be at least {NONCE_SIZE} bytes, got {len(data)}"
            )

        nonce = data[:NONCE_SIZE]

        is_compressed = len(data) > NONCE_SIZE and data[NONCE_SIZE] in COMPRESSED_PREFIXES
        key_size = COMPRESSED_KEY_SIZE if is_compressed else XONLY_KEY_SIZE
        key_end = NONCE_SIZE + key_size

        ephemeral_public_key = data[NONCE_SIZE:key_end]
        ciphertext = data[key_end:]

        return cls(nonce, ephemeral_public_key, ciphertext)

    def to_hex(self) -> str:
        """Serialize to lowercase hex string."""
        return self.to_bytes().hex()

    @classmethod
    def from_hex(cls, hex_str: str) -> 'EncryptedMessage':
        """Deserialize from hex string."""
        if not isinstance(hex_str, str) or not all(c in string.hexdigits for c in hex_str):
            raise HexDecodeError("Invalid hex: non-hexadecimal character")
        try:
            data = bytes.fromhex(hex_str)
        except (ValueError, TypeError) as e:
            raise HexDecodeError(f"Invalid hex: {e}") from e
        return cls.from_bytes(data)

    def to_payload(self) -> str:
        """Hex payload with the ciph_msg: marker, as stored on chain."""
        return MESSAGE_PREFIX_HEX + self.to_hex()

    @classmethod
    def from_payload(cls, payload: str) -> 'EncryptedMessage':
        """Parse a transaction payload, with or without the marker."""
        return cls.from_hex(strip_prefix(payload))


def strip_prefix(payload: str) -> str:
    """Remove the hex-encoded ciph_msg: marker if present."""
    if payload.lower().startswith(MESSAGE_PREFIX_HEX):
        return payload[len(MESSAGE_PREFIX_HEX):]
    return payload
