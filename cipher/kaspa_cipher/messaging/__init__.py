# Secure Messaging Module
"""
End-to-end encrypted one-shot messages to Kaspa addresses:
- secp256k1 ephemeral ECDH
- HKDF-SHA256 key derivation
- ChaCha20-Poly1305 authenticated encryption

Message format: [nonce | ephemeral public key | ciphertext | tag]
"""

from .envelope import EncryptedMessage, strip_prefix
from .attempt_limiter import AttemptLimiter
from .decryption_cache import DecryptionCache
from .secure_channel import (
    encrypt,
    encrypt_to_address,
    decrypt,
    decrypt_with_key_pair,
    decrypt_hex,
    SecureChannel,
)

__all__ = [
    'EncryptedMessage',
    'strip_prefix',
    'AttemptLimiter',
    'DecryptionCache',
    'encrypt',
    'encrypt_to_address',
    'decrypt',
    'decrypt_with_key_pair',
    'decrypt_hex',
    'SecureChannel',
]
