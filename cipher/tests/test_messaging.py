"""
Unit tests for the encrypt/decrypt pipeline.

Tests:
- Round trips (text, unicode, empty)
- Address and hex entry points
- Key validation
- Injectable randomness
"""

import pytest

from kaspa_cipher.address import payload_to_address
from kaspa_cipher.config import CURVE_ORDER
from kaspa_cipher.core_crypto import (
    KeyPair, ChaChaCipher, hkdf_derive_key, sender_agreement,
)
from kaspa_cipher.errors import (
    AddressParseError, AuthenticationError, EncodingError, HexDecodeError,
    KeyDecodeError,
)
from kaspa_cipher.messaging import (
    EncryptedMessage, encrypt, encrypt_to_address, decrypt, decrypt_hex,
)


@pytest.fixture
def receiver():
    return KeyPair.generate()


class TestRoundTrip:
    """Tests for encrypt followed by decrypt."""

    def test_plaintext_message(self, receiver):
        """The reference scenario: address -> encrypt -> decrypt."""
        address = payload_to_address(receiver.x_only_public_bytes(), "testnet")
        encrypted = encrypt_to_address(address, "plaintext message")

        assert decrypt(encrypted, receiver.secret_bytes()) == "plaintext message"

    def test_raw_payload(self, receiver):
        encrypted = encrypt(receiver.x_only_public_bytes(), "hello")
        assert decrypt(encrypted, receiver.secret_bytes()) == "hello"

    @pytest.mark.parametrize("text", [
        "",
        "a",
        "Hello, Kaspa! 👋",
        "Привет, мир",
        "x" * 10000,
    ])
    def test_various_texts(self, receiver, text):
        encrypted = encrypt(receiver.x_only_public_bytes(), text)
        assert decrypt(encrypted, receiver.secret_bytes()) == text

    def test_envelope_shape(self, receiver):
        """12-byte nonce, 33-byte key, plaintext + 16-byte tag."""
        encrypted = encrypt(receiver.x_only_public_bytes(), "hello")

        assert len(encrypted.nonce) == 12
        assert len(encrypted.ephemeral_public_key) == 33
        assert encrypted.ephemeral_public_key[0] in (0x02, 0x03)
        assert len(encrypted.ciphertext) == len("hello") + 16

    def test_through_hex(self, receiver):
        encrypted = encrypt(receiver.x_only_public_bytes(), "over the wire")
        restored = EncryptedMessage.from_hex(encrypted.to_hex())
        assert decrypt(restored, receiver.secret_bytes()) == "over the wire"

    def test_odd_parity_recipient_still_decrypts(self, receiver):
        """
        A recipient whose key has odd y is recovered as the negated point,
        but the shared x-coordinate is unchanged.
        """
        odd_secret = (CURVE_ORDER - int.from_bytes(receiver.secret_bytes(), 'big')).to_bytes(32, 'big')
        odd = KeyPair.from_secret_bytes(odd_secret)
        assert odd.public_bytes()[0] == 0x03

        encrypted = encrypt(odd.x_only_public_bytes(), "parity")
        assert decrypt(encrypted, odd_secret) == "parity"


class TestFreshness:
    """Each message gets its own ephemeral key and nonce."""

    def test_unique_ephemeral_keys_and_nonces(self, receiver):
        messages = [encrypt(receiver.x_only_public_bytes(), "same") for _ in range(50)]

        assert len({m.ephemeral_public_key for m in messages}) == 50
        assert len({m.nonce for m in messages}) == 50
        assert len({m.ciphertext for m in messages}) == 50

    def test_injected_rng_is_deterministic(self, receiver):
        rng = lambda n: b"\x42" * n
        m1 = encrypt(receiver.x_only_public_bytes(), "fixed", rng=rng)
        m2 = encrypt(receiver.x_only_public_bytes(), "fixed", rng=rng)

        assert m1 == m2
        assert m1.nonce == b"\x42" * 12
        assert decrypt(m1, receiver.secret_bytes()) == "fixed"


class TestEntryPoints:
    """Tests for address, hex and key validation."""

    def test_bad_address_payload_length(self):
        with pytest.raises(AddressParseError):
            encrypt(b"\x01" * 31, "hello")

    def test_invalid_x_coordinate(self):
        with pytest.raises(KeyDecodeError):
            encrypt(b"\xff" * 32, "hello")

    def test_malformed_address_string(self):
        with pytest.raises(AddressParseError):
            encrypt_to_address("kaspa:notanaddress", "hello")

    def test_unencodable_plaintext(self, receiver):
        """Lone surrogates cannot be encoded as UTF-8."""
        with pytest.raises(EncodingError):
            encrypt(receiver.x_only_public_bytes(), "\ud800")

    def test_decrypt_hex_with_payload_marker(self, receiver):
        encrypted = encrypt(receiver.x_only_public_bytes(), "marked")
        text = decrypt_hex(encrypted.to_payload(), receiver.secret_bytes().hex())
        assert text == "marked"

    def test_decrypt_hex_bad_key_hex(self, receiver):
        encrypted = encrypt(receiver.x_only_public_bytes(), "x")
        with pytest.raises(HexDecodeError):
            decrypt_hex(encrypted.to_hex(), "not-hex")

    def test_decrypt_hex_bad_envelope_hex(self, receiver):
        with pytest.raises(HexDecodeError):
            decrypt_hex("zz", receiver.secret_bytes().hex())

    @pytest.mark.parametrize("secret", [b"", b"\x01" * 16, b"\x00" * 32])
    def test_invalid_secret_key(self, receiver, secret):
        encrypted = encrypt(receiver.x_only_public_bytes(), "x")
        with pytest.raises(KeyDecodeError):
            decrypt(encrypted, secret)

    def test_raw_32_byte_ephemeral_key_rejected(self, receiver):
        """32-byte key fields decode but are not usable SEC1 keys."""
        encrypted = encrypt(receiver.x_only_public_bytes(), "x")
        raw = EncryptedMessage(encrypted.nonce, b"\x7a" + encrypted.ephemeral_public_key[2:],
                               encrypted.ciphertext)
        with pytest.raises(KeyDecodeError):
            decrypt(raw, receiver.secret_bytes())

    def test_invalid_utf8_plaintext(self, receiver):
        """Authenticated but non-UTF-8 plaintext raises EncodingError."""
        ephemeral_public, shared = sender_agreement(receiver.public_key)
        nonce = b"\x00" * 12
        ciphertext = ChaChaCipher(hkdf_derive_key(shared)).encrypt(nonce, b"\xff\xfe\xfd")
        message = EncryptedMessage(nonce, ephemeral_public, ciphertext)

        with pytest.raises(EncodingError):
            decrypt(message, receiver.secret_bytes())
