"""
Kaspa Address Codec

Addresses are `{prefix}:{data}` where data is the bech32-style (CashAddr
checksum) encoding of `version || payload` followed by a 40-bit checksum.

Versions:
    0  PubKey       32-byte x-only public key
    1  PubKeyECDSA  33-byte compressed public key
    8  ScriptHash   32-byte script hash

Only version 0 carries a key usable for message encryption.
"""

from typing import Tuple

from ..config import (
    NETWORK_PREFIXES, DEFAULT_NETWORK,
    ADDRESS_VERSION_PUBKEY, ADDRESS_VERSION_PUBKEY_ECDSA,
    ADDRESS_VERSION_SCRIPT_HASH,
)
from ..errors import AddressParseError


CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
CHARSET_REV = {c: i for i, c in enumerate(CHARSET)}
CHECKSUM_LENGTH = 8  # 5-bit groups

PAYLOAD_SIZES = {
    ADDRESS_VERSION_PUBKEY: 32,
    ADDRESS_VERSION_PUBKEY_ECDSA: 33,
    ADDRESS_VERSION_SCRIPT_HASH: 32,
}

GENERATORS = (
    0x98F2BC8E61,
    0x79B76D99E2,
    0xF33E5FB3C4,
    0xAE2EABE2A8,
    0x1E4F43E470,
)


def polymod(values: bytes) -> int:
    """CashAddr BCH checksum over 5-bit values."""
    c = 1
    for d in values:
        c0 = c >> 35
        c = ((c & 0x07FFFFFFFF) << 5) ^ d
        for i, generator in enumerate(GENERATORS):
            if (c0 >> i) & 1:
                c ^= generator
    return c ^ 1


def checksum(payload_u5: bytes, prefix: str) -> int:
    prefix_u5 = bytes(c & 0x1F for c in prefix.encode("ascii"))
    return polymod(prefix_u5 + b"\x00" + payload_u5 + b"\x00" * CHECKSUM_LENGTH)


def conv8to5(data: bytes) -> bytes:
    """Regroup 8-bit bytes into 5-bit values, zero-padding the tail."""
    out = bytearray()
    buff = 0
    bits = 0
    for byte in data:
        buff = ((buff << 8) | byte) & 0xFFFF
        bits += 8
        while bits >= 5:
            bits -= 5
            out.append((buff >> bits) & 0x1F)
            buff &= (1 << bits) - 1
    if bits > 0:
        out.append((buff << (5 - bits)) & 0x1F)
    return bytes(out)


def conv5to8(data: bytes) -> bytes:
    """Regroup 5-bit values into bytes, dropping trailing padding bits."""
    out = bytearray()
    buff = 0
    bits = 0
    for value in data:
        buff = ((buff << 5) | value) & 0xFFFF
        bits += 5
        while bits >= 8:
            bits -= 8
            out.append((buff >> bits) & 0xFF)
            buff &= (1 << bits) - 1
    return bytes(out)


def network_prefix(network: str) -> str:
    try:
        return NETWORK_PREFIXES[network]
    except KeyError:
        raise ValueError(f"Unknown network: {network}") from None


def encode_address(payload: bytes,
                   prefix: str = NETWORK_PREFIXES[DEFAULT_NETWORK],
                   version: int = ADDRESS_VERSION_PUBKEY) -> str:
    """
    Encode a Kaspa address.

    Args:
        payload: Key or script hash bytes
        prefix: Network prefix (e.g. "kaspa", "kaspatest")
        version: Address version byte

    Returns:
        Address string
    """
    expected = PAYLOAD_SIZES.get(version)
    if expected is None:
        raise ValueError(f"Unsupported address version: {version}")
    if len(payload) != expected:
        raise ValueError(
            f"Version {version} payload must be {expected} bytes, got {len(payload)}"
        )

    payload_u5 = conv8to5(bytes([version]) + bytes(payload))
    chk = checksum(payload_u5, prefix)
    chk_u5 = conv8to5(chk.to_bytes(8, "big")[3:])
    encoded = "".join(CHARSET[v] for v in payload_u5 + chk_u5)
    return f"{prefix}:{encoded}"


def decode_address(address: str) -> Tuple[str, int, bytes]:
    """
    Decode a Kaspa address.

    Returns:
        Tuple of (prefix, version, payload)

    Raises:
        AddressParseError: On unknown prefix, bad character, bad checksum
            or wrong payload size
    """
    if ":" not in address:
        raise AddressParseError("Address missing prefix")

    prefix, data = address.split(":", 1)
    if prefix not in NETWORK_PREFIXES.values():
        raise AddressParseError(f"Unknown address prefix: {prefix}")
    if len(data) <= CHECKSUM_LENGTH:
        raise AddressParseError("Address too short")

    values = bytearray()
    for ch in data:
        if ch not in CHARSET_REV:
            raise AddressParseError(f"Invalid address character: {ch!r}")
        values.append(CHARSET_REV[ch])

    data_u5 = bytes(values[:-CHECKSUM_LENGTH])
    checksum_u5 = bytes(values[-CHECKSUM_LENGTH:])
    received = int.from_bytes(conv5to8(checksum_u5), "big")
    if checksum(data_u5, prefix) != received:
        raise AddressParseError("Bad address checksum")

    decoded = conv5to8(data_u5)
    if not decoded:
        raise AddressParseError("Empty address payload")
    version, payload = decoded[0], decoded[1:]

    expected = PAYLOAD_SIZES.get(version)
    if expected is None:
        raise AddressParseError(f"Unsupported address version: {version}")
    if len(payload) != expected:
        raise AddressParseError(
            f"Version {version} payload must be {expected} bytes, got {len(payload)}"
        )
    return prefix, version, payload


def address_to_payload(address: str) -> bytes:
    """
    Extract the x-only public key from a PubKey address.

    Raises:
        AddressParseError: If the address is malformed or not version 0
    """
    _, version, payload = decode_address(address)
    if version != ADDRESS_VERSION_PUBKEY:
        raise AddressParseError(
            f"Address version {version} does not carry an x-only public key"
        )
    return payload


def payload_to_address(payload: bytes, network: str = DEFAULT_NETWORK) -> str:
    """Encode an x-only public key as a PubKey address for network."""
    return encode_address(payload, network_prefix(network), ADDRESS_VERSION_PUBKEY)
