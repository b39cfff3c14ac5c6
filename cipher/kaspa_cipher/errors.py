"""
Exception taxonomy for kaspa-cipher.

Every failure surfaces as a subclass of CipherError. Decryption failures are
deliberately coarse: tampering and a wrong key both raise AuthenticationError
with the same message.
"""


class CipherError(Exception):
    """Base class for all kaspa-cipher errors."""
    pass


class AddressParseError(CipherError):
    """Address string or payload is malformed."""
    pass


class KeyDecodeError(CipherError):
    """Bytes do not decode to a valid secp256k1 point or scalar."""
    pass


class KeyDerivationError(CipherError):
    """HKDF expand was asked for more output than it can produce."""
    pass


class AuthenticationError(CipherError):
    """AEAD verification failed."""

    MESSAGE = "Decryption failed - incorrect key or corrupted data"

    def __init__(self, message: str = MESSAGE):
        super().__init__(message)


class EncodingError(CipherError):
    """Text cannot be encoded to, or decoded from, UTF-8."""
    pass


class HexDecodeError(CipherError):
    """Input is not valid hexadecimal."""
    pass


class EnvelopeDecodeError(CipherError):
    """Envelope is too short to contain a nonce."""
    pass
