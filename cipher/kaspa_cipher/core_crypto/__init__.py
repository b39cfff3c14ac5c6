# Core Cryptography Module
"""
Cryptographic building blocks:
- secp256k1 key pairs and x-only key recovery (even parity)
- Ephemeral/static ECDH
- HKDF-SHA256 key derivation
- ChaCha20-Poly1305 authenticated encryption
"""

from .keys import (
    KeyPair,
    RandomSource,
    load_public_key,
    recover_public_key,
)
from .ecdh import derive_shared_secret, sender_agreement, receiver_agreement
from .kdf import hkdf_derive_key
from .aead import ChaChaCipher, generate_nonce

__all__ = [
    'KeyPair',
    'RandomSource',
    'load_public_key',
    'recover_public_key',
    'derive_shared_secret',
    'sender_agreement',
    'receiver_agreement',
    'hkdf_derive_key',
    'ChaChaCipher',
    'generate_nonce',
]
