"""
Ephemeral/static ECDH over secp256k1.

The sender draws a one-time ephemeral secret, the receiver uses its static
secret; both arrive at the same point and keep only its x-coordinate:

    (e*G) * d == (d*G) * e
"""

import secrets
from typing import Tuple

from cryptography.hazmat.primitives.asymmetric import ec

from .keys import (
    RandomSource, random_scalar, private_key_from_scalar,
    compressed_bytes, load_public_key,
)


def derive_shared_secret(private_key: ec.EllipticCurvePrivateKey,
                         peer_public_key: ec.EllipticCurvePublicKey) -> bytes:
    """
    Compute the shared x-coordinate.

    Returns:
        32-byte big-endian x of private * peer_public
    """
    return private_key.exchange(ec.ECDH(), peer_public_key)


def sender_agreement(recipient_public_key: ec.EllipticCurvePublicKey,
                     rng: RandomSource = secrets.token_bytes) -> Tuple[bytes, bytes]:
    """
    Sender side of the exchange.

    A fresh ephemeral secret is generated for every call and dropped on
    return; only its public half leaves this function.

    Args:
        recipient_public_key: Recovered recipient key
        rng: Secure random source

    Returns:
        Tuple of (ephemeral_public_key as 33-byte SEC1, shared_secret)
    """
    ephemeral = private_key_from_scalar(random_scalar(rng))
    shared_secret = derive_shared_secret(ephemeral, recipient_public_key)
    return compressed_bytes(ephemeral.public_key()), shared_secret


def receiver_agreement(secret_key: ec.EllipticCurvePrivateKey,
                       ephemeral_public_bytes: bytes) -> bytes:
    """
    Receiver side of the exchange.

    Raises:
        KeyDecodeError: If the ephemeral key is not a valid point
    """
    ephemeral_public = load_public_key(ephemeral_public_bytes)
    return derive_shared_secret(secret_key, ephemeral_public)
