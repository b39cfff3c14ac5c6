"""
Protocol constants for kaspa-cipher.

All sizes are in bytes. These values define the wire format and must not
change without breaking every envelope already on chain.
"""

from cryptography.hazmat.primitives.asymmetric import ec


# Curve
CURVE = ec.SECP256K1()
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECRET_KEY_SIZE = 32
XONLY_KEY_SIZE = 32         # address payload (x-coordinate only)
COMPRESSED_KEY_SIZE = 33    # SEC1 compressed point
COMPRESSED_PREFIXES = (0x02, 0x03)

# Address payloads carry no parity bit; recovered points always use even y.
XONLY_PARITY = "even"
EVEN_PARITY_PREFIX = 0x02

# Symmetric layer
KEY_SIZE = 32               # ChaCha20-Poly1305 key
NONCE_SIZE = 12             # 96-bit IETF nonce
TAG_SIZE = 16               # Poly1305 tag
HKDF_INFO = b""

# Kaspa addresses
ADDRESS_VERSION_PUBKEY = 0
ADDRESS_VERSION_PUBKEY_ECDSA = 1
ADDRESS_VERSION_SCRIPT_HASH = 8

NETWORK_PREFIXES = {
    'mainnet': 'kaspa',
    'testnet': 'kaspatest',
    'simnet': 'kaspasim',
    'devnet': 'kaspadev',
}
DEFAULT_NETWORK = 'mainnet'

# Transaction payloads are prefixed with hex("ciph_msg:")
MESSAGE_PREFIX = b"ciph_msg:"
MESSAGE_PREFIX_HEX = MESSAGE_PREFIX.hex()
