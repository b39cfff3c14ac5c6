"""
ChaCha20-Poly1305 authenticated encryption (RFC 8439).

Output layout: ciphertext || tag (16 bytes). No associated data.
All decryption failures collapse into one AuthenticationError so callers
cannot tell a wrong key from a modified ciphertext.
"""

import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from ..config import KEY_SIZE, NONCE_SIZE, TAG_SIZE
from ..errors import AuthenticationError
from .keys import RandomSource


def generate_nonce(rng: RandomSource = secrets.token_bytes) -> bytes:
    """
    Generate a random 96-bit nonce.

    Each message key is fresh, so a random nonce never repeats under the
    same key.
    """
    return rng(NONCE_SIZE)


class ChaChaCipher:
    """ChaCha20-Poly1305 over a single derived key."""

    def __init__(self, key: bytes):
        if len(key) != KEY_SIZE:
            raise ValueError(f"Key must be {KEY_SIZE} bytes")
        self._cipher = ChaCha20Poly1305(key)

    def encrypt(self, nonce: bytes, plaintext: bytes) -> bytes:
        """Encrypt; returns ciphertext with the tag appended."""
        return self._cipher.encrypt(nonce, plaintext, None)

    def decrypt(self, nonce: bytes, ciphertext: bytes) -> bytes:
        """
        Verify and decrypt ciphertext || tag.

        Raises:
            AuthenticationError: On any verification failure
        """
        if len(nonce) != NONCE_SIZE or len(ciphertext) < TAG_SIZE:
            raise AuthenticationError()
        try:
            return self._cipher.decrypt(nonce, ciphertext, None)
        except (InvalidTag, ValueError):
            raise AuthenticationError() from None
