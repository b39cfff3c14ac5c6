"""
Failed Decryption Cache

Remembers message ids that a wallet could not decrypt so they are not
retried on every refresh. An id leaves the cache only when it later
decrypts successfully (e.g. after the wallet key changed).
"""

import json
import time
from typing import Dict, Set


CACHE_VERSION = 1


class DecryptionCache:
    """Per-wallet set of message ids that failed decryption."""

    def __init__(self):
        self._failed: Dict[str, Dict[str, int]] = {}

    def _entries(self, wallet_address: str) -> Dict[str, int]:
        return self._failed.setdefault(wallet_address, {})

    def has_failed(self, wallet_address: str, message_id: str) -> bool:
        """Check if a message id has failed decryption before."""
        return message_id in self._failed.get(wallet_address, {})

    def mark_failed(self, wallet_address: str, message_id: str) -> None:
        self._entries(wallet_address)[message_id] = int(time.time() * 1000)

    def mark_success(self, wallet_address: str, message_id: str) -> bool:
        """
        Drop a message id after a successful decryption.

        Returns:
            True if the id was cached
        """
        return self._failed.get(wallet_address, {}).pop(message_id, None) is not None

    def clear(self, wallet_address: str) -> None:
        self._failed.pop(wallet_address, None)

    def failed_ids(self, wallet_address: str) -> Set[str]:
        return set(self._failed.get(wallet_address, {}))

    def get_stats(self, wallet_address: str) -> Dict[str, int]:
        """Get cache statistics for monitoring."""
        return {'size': len(self._failed.get(wallet_address, {}))}

    def to_json(self) -> str:
        """Export the cache as JSON."""
        data = {
            wallet: {
                'entries': [
                    {'txId': tx_id, 'timestamp': ts}
                    for tx_id, ts in entries.items()
                ],
                'version': CACHE_VERSION,
            }
            for wallet, entries in self._failed.items()
        }
        return json.dumps(data, sort_keys=True)

    @classmethod
    def from_json(cls, json_str: str) -> 'DecryptionCache':
        """
        Import a cache exported by to_json().

        Wallet sections with an unknown format version are ignored.
        """
        cache = cls()
        for wallet, section in json.loads(json_str).items():
            if section.get('version') != CACHE_VERSION:
                continue
            entries = cache._entries(wallet)
            for entry in section.get('entries', []):
                entries[entry['txId']] = entry.get('timestamp', 0)
        return cache
