# kaspa-cipher
"""
ECIES-style encryption of one-shot text messages to Kaspa addresses.

    from kaspa_cipher import KeyPair, encrypt_to_address, decrypt

    message = encrypt_to_address(address, "hello")
    text = decrypt(message, secret_key_bytes)
"""

from .core_crypto import KeyPair
from .messaging import (
    EncryptedMessage,
    AttemptLimiter,
    DecryptionCache,
    SecureChannel,
    encrypt,
    encrypt_to_address,
    decrypt,
    decrypt_hex,
)
from .address import encode_address, decode_address, address_to_payload, payload_to_address
from .errors import (
    CipherError,
    AddressParseError,
    KeyDecodeError,
    KeyDerivationError,
    AuthenticationError,
    EncodingError,
    HexDecodeError,
    EnvelopeDecodeError,
)

__version__ = "0.1.0"

__all__ = [
    'KeyPair',
    'EncryptedMessage',
    'AttemptLimiter',
    'DecryptionCache',
    'SecureChannel',
    'encrypt',
    'encrypt_to_address',
    'decrypt',
    'decrypt_hex',
    'encode_address',
    'decode_address',
    'address_to_payload',
    'payload_to_address',
    'CipherError',
    'AddressParseError',
    'KeyDecodeError',
    'KeyDerivationError',
    'AuthenticationError',
    'EncodingError',
    'HexDecodeError',
    'EnvelopeDecodeError',
]
