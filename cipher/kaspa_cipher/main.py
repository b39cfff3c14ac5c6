"""
kaspa-cipher - command line entry point.

Usage:
    kaspa-cipher keygen [--network testnet]
    kaspa-cipher encrypt --to kaspatest:qq... --text "secret" [--payload]
    kaspa-cipher decrypt --key <secret_key_hex> --message <hex>
"""

import argparse
import sys
from typing import List, Optional

from .address import payload_to_address
from .config import NETWORK_PREFIXES, DEFAULT_NETWORK
from .core_crypto import KeyPair
from .errors import CipherError
from .messaging import encrypt_to_address, decrypt_hex


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kaspa-cipher",
        description="Encrypt and decrypt messages for Kaspa addresses"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    keygen = sub.add_parser("keygen", help="Generate a key pair and its address")
    keygen.add_argument("--network", default=DEFAULT_NETWORK, choices=sorted(NETWORK_PREFIXES))

    enc = sub.add_parser("encrypt", help="Encrypt a message for an address")
    enc.add_argument("--to", required=True, help="Recipient Kaspa address")
    enc.add_argument("--text", required=True, help="Message to encrypt")
    enc.add_argument("--payload", action="store_true",
                     help="Prefix output with the ciph_msg: marker")

    dec = sub.add_parser("decrypt", help="Decrypt a message")
    dec.add_argument("--key", required=True, help="Secret key (hex)")
    dec.add_argument("--message", required=True, help="Envelope or payload (hex)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI; returns the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        if args.command == "keygen":
            key_pair = KeyPair.generate()
            print(f"secret_key: {key_pair.secret_bytes().hex()}")
            print(f"public_key: {key_pair.x_only_public_bytes().hex()}")
            print(f"address:    {payload_to_address(key_pair.x_only_public_bytes(), args.network)}")
        elif args.command == "encrypt":
            message = encrypt_to_address(args.to, args.text)
            print(message.to_payload() if args.payload else message.to_hex())
        elif args.command == "decrypt":
            print(decrypt_hex(args.message, args.key))
    except CipherError as e:
        print(f"error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
