"""
secp256k1 Key Handling

Key pairs, secret-key loading and public key recovery from x-only address
payloads.

Parity convention:
    Kaspa PubKey addresses store only the 32-byte x-coordinate. Recovery
    always picks the point with even y, and KeyPair.generate() normalizes
    new secrets so their public point already has even y. Both paths use
    XONLY_PARITY from config.
"""

import secrets
from dataclasses import dataclass
from typing import Callable, Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.backends import default_backend

from ..config import (
    CURVE, CURVE_ORDER, SECRET_KEY_SIZE, XONLY_KEY_SIZE,
    EVEN_PARITY_PREFIX, XONLY_PARITY,
)
from ..errors import AddressParseError, KeyDecodeError


RandomSource = Callable[[int], bytes]


def random_scalar(rng: RandomSource = secrets.token_bytes) -> int:
    """
    Draw a secret scalar uniformly from [1, n-1].

    Uses rejection sampling over 32-byte draws from rng.
    """
    while True:
        candidate = int.from_bytes(rng(SECRET_KEY_SIZE), 'big')
        if 0 < candidate < CURVE_ORDER:
            return candidate


def private_key_from_scalar(scalar: int) -> ec.EllipticCurvePrivateKey:
    """Build a private key object from an integer scalar."""
    if not 0 < scalar < CURVE_ORDER:
        raise KeyDecodeError("Invalid secret key: scalar out of range")
    try:
        return ec.derive_private_key(scalar, CURVE, default_backend())
    except (ValueError, TypeError) as e:
        raise KeyDecodeError(f"Invalid secret key: {e}") from e


def compressed_bytes(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """SEC1 compressed encoding (33 bytes)."""
    return public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.CompressedPoint
    )


def has_even_y(public_key: ec.EllipticCurvePublicKey) -> bool:
    return public_key.public_numbers().y % 2 == 0


@dataclass
class KeyPair:
    """secp256k1 key pair container."""
    private_key: Optional[ec.EllipticCurvePrivateKey]
    public_key: ec.EllipticCurvePublicKey

    @classmethod
    def generate(cls, rng: RandomSource = secrets.token_bytes) -> 'KeyPair':
        """
        Generate a new key pair whose public point has even y.

        If the drawn scalar d yields an odd-y point, n - d is used instead;
        its public point is the negation, which shares x and has even y.
        """
        scalar = random_scalar(rng)
        private_key = private_key_from_scalar(scalar)
        if XONLY_PARITY == "even" and not has_even_y(private_key.public_key()):
            private_key = private_key_from_scalar(CURVE_ORDER - scalar)
        return cls(private_key, private_key.public_key())

    @classmethod
    def from_secret_bytes(cls, data: bytes) -> 'KeyPair':
        """Load a key pair from a raw 32-byte big-endian secret scalar."""
        if len(data) != SECRET_KEY_SIZE:
            raise KeyDecodeError(
                f"Secret key must be {SECRET_KEY_SIZE} bytes, got {len(data)}"
            )
        private_key = private_key_from_scalar(int.from_bytes(data, 'big'))
        return cls(private_key, private_key.public_key())

    @classmethod
    def from_public_bytes(cls, data: bytes) -> 'KeyPair':
        """Create KeyPair from SEC1 public key bytes (public key only)."""
        return cls(None, load_public_key(data))

    def secret_bytes(self) -> bytes:
        """Get the secret scalar as 32 big-endian bytes."""
        if self.private_key is None:
            raise ValueError("Key pair has no private key")
        value = self.private_key.private_numbers().private_value
        return value.to_bytes(SECRET_KEY_SIZE, 'big')

    def public_bytes(self) -> bytes:
        """Get public key as SEC1 compressed bytes."""
        return compressed_bytes(self.public_key)

    def x_only_public_bytes(self) -> bytes:
        """Get the 32-byte x-coordinate used as address payload."""
        return self.public_key.public_numbers().x.to_bytes(XONLY_KEY_SIZE, 'big')


def load_public_key(data: bytes) -> ec.EllipticCurvePublicKey:
    """
    Decode SEC1 public key bytes.

    Raises:
        KeyDecodeError: If the bytes are not a point on secp256k1
    """
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(CURVE, bytes(data))
    except ValueError as e:
        raise KeyDecodeError(f"Invalid public key: {e}") from e


def recover_public_key(payload: bytes) -> ec.EllipticCurvePublicKey:
    """
    Reconstruct a full public key from an x-only address payload.

    Args:
        payload: 32-byte x-coordinate

    Returns:
        The curve point with that x and even y

    Raises:
        AddressParseError: If payload is not 32 bytes
        KeyDecodeError: If payload is not a valid x-coordinate
    """
    if len(payload) != XONLY_KEY_SIZE:
        raise AddressParseError(
            f"Address payload must be {XONLY_KEY_SIZE} bytes, got {len(payload)}"
        )
    return load_public_key(bytes([EVEN_PARITY_PREFIX]) + bytes(payload))
