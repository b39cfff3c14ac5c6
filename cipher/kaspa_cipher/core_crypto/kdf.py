"""
HKDF key derivation (RFC 5869) with SHA-256.

The message key is HKDF(shared_x, salt=None, info=b"") truncated to 32
bytes. Every message has its own ephemeral secret, so the shared secret is
already unique per message and no salt or context string is bound in.
"""

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.backends import default_backend

from ..config import KEY_SIZE, HKDF_INFO
from ..errors import KeyDerivationError


HASH_SIZE = 32
MAX_OUTPUT = 255 * HASH_SIZE


def hkdf_derive_key(shared_secret: bytes,
                    salt: bytes = None,
                    info: bytes = HKDF_INFO,
                    length: int = KEY_SIZE) -> bytes:
    """
    Derive a symmetric key from a shared secret.

    Args:
        shared_secret: Input key material (ECDH x-coordinate)
        salt: Optional salt; None means a zero-filled salt
        info: Expand context
        length: Output length in bytes

    Returns:
        Derived key bytes

    Raises:
        KeyDerivationError: If length exceeds 255 * 32
    """
    if length > MAX_OUTPUT:
        raise KeyDerivationError(
            f"Cannot expand to {length} bytes (maximum {MAX_OUTPUT})"
        )
    try:
        hkdf = HKDF(
            algorithm=hashes.SHA256(),
            length=length,
            salt=salt,
            info=info,
            backend=default_backend()
        )
        return hkdf.derive(shared_secret)
    except ValueError as e:
        raise KeyDerivationError(str(e)) from e
