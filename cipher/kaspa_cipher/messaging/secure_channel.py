"""
Secure Messaging Module

One-shot encryption to a Kaspa address:
- Recipient key recovered from the x-only address payload (even parity)
- Ephemeral ECDH over secp256k1
- HKDF-SHA256 key derivation (no salt, empty info)
- ChaCha20-Poly1305 authenticated encryption

Message Format:
    [nonce (12 bytes) | ephemeral public key (33 bytes) | ciphertext | tag (16 bytes)]

Security features:
- Fresh ephemeral key for every message (forward secrecy)
- Fresh random nonce for every message
- Uniform AuthenticationError for wrong key and tampering
"""

import secrets
from typing import Optional

from ..address import address_to_payload, payload_to_address
from ..config import DEFAULT_NETWORK, COMPRESSED_KEY_SIZE
from ..core_crypto import (
    KeyPair, RandomSource, recover_public_key,
    sender_agreement, receiver_agreement,
    hkdf_derive_key, ChaChaCipher, generate_nonce,
)
from ..errors import (
    AuthenticationError, CipherError, EncodingError, KeyDecodeError,
    HexDecodeError,
)
from ..integration.event_logger import EventLogger
from .attempt_limiter import AttemptLimiter
from .decryption_cache import DecryptionCache
from .envelope import EncryptedMessage


def encrypt(recipient_address_bytes: bytes,
            plaintext: str,
            *,
            rng: RandomSource = secrets.token_bytes,
            event_logger: Optional[EventLogger] = None) -> EncryptedMessage:
    """
    Encrypt a text message to a recipient.

    Args:
        recipient_address_bytes: 32-byte x-only public key (address payload)
        plaintext: Message text
        rng: Secure random source for the ephemeral key and nonce
        event_logger: Optional audit log

    Returns:
        EncryptedMessage

    Raises:
        AddressParseError: If the payload is not 32 bytes
        KeyDecodeError: If the payload is not a valid x-coordinate
        EncodingError: If the text cannot be encoded as UTF-8
    """
    recipient_public_key = recover_public_key(recipient_address_bytes)

    ephemeral_public, shared_secret = sender_agreement(recipient_public_key, rng)
    message_key = hkdf_derive_key(shared_secret)

    try:
        encoded = plaintext.encode('utf-8')
    except UnicodeEncodeError as e:
        raise EncodingError("Plaintext is not encodable as UTF-8") from e

    nonce = generate_nonce(rng)
    ciphertext = ChaChaCipher(message_key).encrypt(nonce, encoded)

    message = EncryptedMessage(nonce, ephemeral_public, ciphertext)

    if event_logger is not None:
        event_logger.log_encrypt(bytes(recipient_address_bytes), message.to_bytes())
    return message


def encrypt_to_address(address: str,
                       plaintext: str,
                       *,
                       rng: RandomSource = secrets.token_bytes,
                       event_logger: Optional[EventLogger] = None) -> EncryptedMessage:
    """Encrypt to a textual Kaspa PubKey address."""
    return encrypt(address_to_payload(address), plaintext,
                   rng=rng, event_logger=event_logger)


def _decrypt(message: EncryptedMessage, key_pair: KeyPair) -> str:
    # Only 33-byte SEC1 keys are produced by encrypt(); 32-byte fields
    # from lenient framing are not valid SEC1 encodings.
    if len(message.ephemeral_public_key) != COMPRESSED_KEY_SIZE:
        raise KeyDecodeError(
            f"Ephemeral public key must be {COMPRESSED_KEY_SIZE} bytes, "
            f"got {len(message.ephemeral_public_key)}"
        )
    shared_secret = receiver_agreement(key_pair.private_key, message.ephemeral_public_key)
    message_key = hkdf_derive_key(shared_secret)

    plaintext = ChaChaCipher(message_key).decrypt(message.nonce, message.ciphertext)

    try:
        return plaintext.decode('utf-8')
    except UnicodeDecodeError as e:
        raise EncodingError("Decrypted data is not valid UTF-8") from e


def decrypt(message: EncryptedMessage,
            recipient_secret_key: bytes,
            *,
            event_logger: Optional[EventLogger] = None) -> str:
    """
    Decrypt a message with the recipient's secret key.

    Args:
        message: Encrypted message
        recipient_secret_key: 32-byte secret scalar
        event_logger: Optional audit log

    Returns:
        Decrypted text

    Raises:
        KeyDecodeError: If the secret key or ephemeral key is invalid
        AuthenticationError: If the key is wrong or data was modified
        EncodingError: If the plaintext is not UTF-8
    """
    key_pair = KeyPair.from_secret_bytes(recipient_secret_key)
    return decrypt_with_key_pair(message, key_pair, event_logger=event_logger)


def decrypt_with_key_pair(message: EncryptedMessage,
                          key_pair: KeyPair,
                          *,
                          event_logger: Optional[EventLogger] = None) -> str:
    """Decrypt with an already loaded key pair."""
    if event_logger is None:
        return _decrypt(message, key_pair)

    envelope = message.to_bytes()
    try:
        text = _decrypt(message, key_pair)
    except CipherError as e:
        event_logger.log_decrypt(envelope, success=False, error=type(e).__name__)
        raise
    event_logger.log_decrypt(envelope)
    return text


def decrypt_hex(payload: str,
                secret_key_hex: str,
                *,
                event_logger: Optional[EventLogger] = None) -> str:
    """
    Decrypt from hex strings.

    Args:
        payload: Envelope hex, optionally with the ciph_msg: marker
        secret_key_hex: 32-byte secret key as hex
    """
    try:
        secret_key = bytes.fromhex(secret_key_hex)
    except ValueError as e:
        raise HexDecodeError(f"Invalid secret key hex: {e}") from e
    message = EncryptedMessage.from_payload(payload)
    return decrypt(message, secret_key, event_logger=event_logger)


class SecureChannel:
    """
    Recipient-side messaging endpoint bound to one wallet key.

    Example:
        alice = SecureChannel(KeyPair.generate())
        bob = SecureChannel(KeyPair.generate())

        # Alice sends to Bob's address
        encrypted = alice.encrypt_to(bob.address, "Hello Bob!")

        # Bob receives
        text = bob.decrypt_message(encrypted)
    """

    def __init__(self,
                 key_pair: KeyPair,
                 network: str = DEFAULT_NETWORK,
                 cache: Optional[DecryptionCache] = None,
                 event_logger: Optional[EventLogger] = None,
                 limiter: Optional[AttemptLimiter] = None):
        """
        Initialize with the wallet key pair.

        Args:
            key_pair: Key pair with private key
            network: Network used to render the address
            cache: Optional failed-decryption cache
            event_logger: Optional audit log
            limiter: Optional per-message-id attempt limiter
        """
        if key_pair.private_key is None:
            raise ValueError("Private key required for a secure channel")
        self._key_pair = key_pair
        self._address = payload_to_address(key_pair.x_only_public_bytes(), network)
        self._cache = cache
        self._event_logger = event_logger
        self._limiter = limiter

    @property
    def address(self) -> str:
        """Address other parties encrypt to."""
        return self._address

    def encrypt_to(self, address: str, plaintext: str,
                   rng: RandomSource = secrets.token_bytes) -> EncryptedMessage:
        """Encrypt a message to another address."""
        return encrypt_to_address(address, plaintext, rng=rng,
                                  event_logger=self._event_logger)

    def decrypt_message(self, message: EncryptedMessage) -> str:
        """Decrypt a message addressed to this channel."""
        return decrypt_with_key_pair(message, self._key_pair,
                                     event_logger=self._event_logger)

    def try_decrypt(self, payload: str, message_id: str,
                    retry: bool = False) -> Optional[str]:
        """
        Attempt to decrypt a transaction payload.

        Ids already known to fail are skipped, as are ids the attempt
        limiter refuses. Authentication failures are recorded in the cache
        and reported as None; other errors propagate.

        Args:
            payload: Envelope hex, optionally with the ciph_msg: marker
            message_id: Transaction id used as cache key
            retry: Attempt even if the id is cached as failed

        Returns:
            Decrypted text, or None if this key cannot decrypt it
        """
        if (not retry and self._cache is not None
                and self._cache.has_failed(self._address, message_id)):
            if self._event_logger is not None:
                self._event_logger.log_skipped(message_id)
            return None

        if self._limiter is not None:
            if not self._limiter.can_attempt(message_id):
                if self._event_logger is not None:
                    self._event_logger.log_skipped(message_id, reason="rate_limited")
                return None
            self._limiter.record_attempt(message_id)

        message = EncryptedMessage.from_payload(payload)
        try:
            text = self.decrypt_message(message)
        except AuthenticationError:
            if self._cache is not None:
                self._cache.mark_failed(self._address, message_id)
            return None

        if self._cache is not None:
            self._cache.mark_success(self._address, message_id)
        return text


# Self-test when run directly
if __name__ == "__main__":
    print("Secure Messaging Module Test")
    print("=" * 70)

    receiver = KeyPair.generate()
    address = payload_to_address(receiver.x_only_public_bytes(), 'testnet')
    print(f"\n  Receiver address: {address}")

    encrypted = encrypt_to_address(address, "plaintext message")
    print(f"  Envelope: {encrypted.to_hex()[:64]}...")

    decrypted = decrypt(encrypted, receiver.secret_bytes())
    print(f"  Decrypted: {decrypted}")
    print(f"  Status: {'✓ PASS' if decrypted == 'plaintext message' else '✗ FAIL'}")

    try:
        decrypt(encrypted, KeyPair.generate().secret_bytes())
        print("  Wrong key rejected: ✗ FAIL")
    except AuthenticationError:
        print("  Wrong key rejected: ✓ PASS")
