"""
Security tests for kaspa-cipher.

Tests specifically for attack scenarios:
- Wrong recipient key
- Bit flips anywhere in the ciphertext and tag
- Truncation
- Error uniformity
"""

import pytest

from kaspa_cipher.core_crypto import KeyPair
from kaspa_cipher.errors import AuthenticationError, CipherError
from kaspa_cipher.messaging import EncryptedMessage, encrypt, decrypt


@pytest.fixture(scope="module")
def receiver():
    return KeyPair.generate()


@pytest.fixture(scope="module")
def envelope(receiver):
    return encrypt(receiver.x_only_public_bytes(), "plaintext message").to_bytes()


def flip_bit(data: bytes, bit: int) -> bytes:
    tampered = bytearray(data)
    tampered[bit // 8] ^= 1 << (bit % 8)
    return bytes(tampered)


class TestWrongKey:
    """Only the intended recipient can decrypt."""

    def test_fresh_key_rejected(self, envelope):
        message = EncryptedMessage.from_bytes(envelope)
        with pytest.raises(AuthenticationError):
            decrypt(message, KeyPair.generate().secret_bytes())

    def test_many_wrong_keys_rejected(self, envelope):
        message = EncryptedMessage.from_bytes(envelope)
        for _ in range(10):
            with pytest.raises(AuthenticationError):
                decrypt(message, KeyPair.generate().secret_bytes())


class TestTampering:
    """Modified envelopes never yield plaintext."""

    def test_every_ciphertext_bit_flip_detected(self, receiver, envelope):
        """Flip each bit of the ciphertext and tag region in turn."""
        start = (12 + 33) * 8
        for bit in range(start, len(envelope) * 8):
            message = EncryptedMessage.from_bytes(flip_bit(envelope, bit))
            with pytest.raises(AuthenticationError):
                decrypt(message, receiver.secret_bytes())

    @pytest.mark.parametrize("bit", [0, 7, 50, 95])
    def test_nonce_bit_flip_detected(self, receiver, envelope, bit):
        message = EncryptedMessage.from_bytes(flip_bit(envelope, bit))
        with pytest.raises(AuthenticationError):
            decrypt(message, receiver.secret_bytes())

    def test_parity_byte_flip_detected(self, receiver, envelope):
        """0x02 <-> 0x03 gives the negated point: same x, same key."""
        tampered = bytearray(envelope)
        tampered[12] ^= 0x01
        message = EncryptedMessage.from_bytes(bytes(tampered))
        # Negation leaves the shared x unchanged, so this still decrypts
        assert decrypt(message, receiver.secret_bytes()) == "plaintext message"

    @pytest.mark.parametrize("offset", [13, 20, 44])
    def test_ephemeral_key_flip_rejected(self, receiver, envelope, offset):
        """Either an invalid point or a different shared secret."""
        tampered = bytearray(envelope)
        tampered[offset] ^= 0x01
        message = EncryptedMessage.from_bytes(bytes(tampered))
        with pytest.raises(CipherError):
            decrypt(message, receiver.secret_bytes())


class TestTruncation:
    """Truncated envelopes fail cleanly."""

    def test_nonce_and_key_only(self, receiver, envelope):
        """12 + 33 bytes: empty ciphertext, authentication fails."""
        message = EncryptedMessage.from_bytes(envelope[:12 + 33])
        assert message.ciphertext == b""
        with pytest.raises(AuthenticationError):
            decrypt(message, receiver.secret_bytes())

    @pytest.mark.parametrize("cut", [1, 5, 16, 17])
    def test_truncated_tail(self, receiver, envelope, cut):
        message = EncryptedMessage.from_bytes(envelope[:-cut])
        with pytest.raises(AuthenticationError):
            decrypt(message, receiver.secret_bytes())

    def test_appended_bytes(self, receiver, envelope):
        message = EncryptedMessage.from_bytes(envelope + b"\x00")
        with pytest.raises(AuthenticationError):
            decrypt(message, receiver.secret_bytes())


class TestErrorUniformity:
    """Failure messages do not reveal the cause."""

    def test_wrong_key_and_tamper_same_message(self, receiver, envelope):
        with pytest.raises(AuthenticationError) as wrong_key:
            decrypt(EncryptedMessage.from_bytes(envelope), KeyPair.generate().secret_bytes())
        with pytest.raises(AuthenticationError) as tampered:
            decrypt(EncryptedMessage.from_bytes(flip_bit(envelope, len(envelope) * 8 - 1)),
                    receiver.secret_bytes())
        with pytest.raises(AuthenticationError) as truncated:
            decrypt(EncryptedMessage.from_bytes(envelope[:45]), receiver.secret_bytes())

        assert str(wrong_key.value) == str(tampered.value) == str(truncated.value)
