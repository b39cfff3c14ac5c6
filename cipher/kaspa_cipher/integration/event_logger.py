"""
Event Logger Module

Audit trail for message encryption and decryption.

Features:
- Encrypt / decrypt / failure events
- Privacy-preserving subject hashes (SHA-256), never plaintext or keys
- Tamper-evident log: each record is chained to the previous record hash
- JSON export / import
"""

import hashlib
import json
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Callable


# ============================================================================
# Constants
# ============================================================================

EVENT_VERSION = "1.0"
GENESIS_HASH = "0" * 64
SUBJECT_HASH_LENGTH = 16


# ============================================================================
# Privacy Functions
# ============================================================================

def get_subject_hash(data: bytes) -> str:
    """
    Compute a short privacy-preserving identifier for an address payload
    or envelope.

    Args:
        data: Raw bytes identifying the subject

    Returns:
        First 16 hex characters of SHA-256(data)
    """
    return hashlib.sha256(data).hexdigest()[:SUBJECT_HASH_LENGTH]


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of cipher events that can be logged."""

    MESSAGE_ENCRYPT = "message_encrypt"
    MESSAGE_DECRYPT = "message_decrypt"
    DECRYPT_FAILED = "decrypt_failed"
    DECRYPT_SKIPPED = "decrypt_skipped"


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class CipherEvent:
    """A single audit event."""
    event_type: EventType
    subject: str       # Short hash of address payload or envelope
    timestamp: int     # Unix timestamp
    details: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> str:
        """Convert event to a compact JSON record."""
        return json.dumps({
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'subject': self.subject,
            'time': self.timestamp,
            'details': self.details,
        }, separators=(',', ':'), sort_keys=True)

    @classmethod
    def from_record(cls, record: str) -> 'CipherEvent':
        data = json.loads(record)
        return cls(
            event_type=EventType(data['type']),
            subject=data['subject'],
            timestamp=data['time'],
            details=data.get('details', {}),
        )

    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp)
        return (
            f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] "
            f"{self.event_type.value} | "
            f"subject:{self.subject[:8]}..."
        )


def chain_hash(previous_hash: str, record: str) -> str:
    return hashlib.sha256((previous_hash + record).encode()).hexdigest()


# ============================================================================
# Event Logger
# ============================================================================

class EventLogger:
    """
    Hash-chained audit logger.

    Every record stores the hash of (previous hash || record), so editing,
    dropping or reordering entries breaks verify_chain().
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Initialize the event logger.

        Args:
            clock: Source of Unix timestamps
        """
        self._clock = clock
        self._records: List[Dict[str, str]] = []
        self._callbacks: List[Callable[[CipherEvent], None]] = []

    @property
    def head(self) -> str:
        """Hash of the latest record."""
        return self._records[-1]['hash'] if self._records else GENESIS_HASH

    def __len__(self) -> int:
        return len(self._records)

    def _add_event(self, event: CipherEvent) -> None:
        record = event.to_record()
        self._records.append({
            'record': record,
            'hash': chain_hash(self.head, record),
        })

        for callback in self._callbacks:
            try:
                callback(event)
            except Exception:
                pass  # Don't let callbacks break logging

    def _new_event(self, event_type: EventType, subject: str,
                   details: Optional[Dict[str, Any]] = None) -> CipherEvent:
        event = CipherEvent(
            event_type=event_type,
            subject=subject,
            timestamp=int(self._clock()),
            details=details or {},
        )
        self._add_event(event)
        return event

    def add_callback(self, callback: Callable[[CipherEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[CipherEvent], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ========================================================================
    # Message Events
    # ========================================================================

    def log_encrypt(self, recipient_payload: bytes, envelope: bytes) -> CipherEvent:
        """
        Log an encryption.

        Args:
            recipient_payload: Recipient x-only key (hashed)
            envelope: Serialized envelope (only its hash and size are kept)
        """
        return self._new_event(
            EventType.MESSAGE_ENCRYPT,
            get_subject_hash(recipient_payload),
            {
                'message_id': get_subject_hash(envelope),
                'size': len(envelope),
                'algo': "secp256k1-HKDF-SHA256-ChaCha20Poly1305",
            }
        )

    def log_decrypt(self, envelope: bytes, success: bool = True,
                    error: Optional[str] = None) -> CipherEvent:
        """
        Log a decryption attempt.

        Args:
            envelope: Serialized envelope
            success: Whether decryption succeeded
            error: Error class name on failure
        """
        details: Dict[str, Any] = {'size': len(envelope)}
        if error:
            details['error'] = error
        return self._new_event(
            EventType.MESSAGE_DECRYPT if success else EventType.DECRYPT_FAILED,
            get_subject_hash(envelope),
            details,
        )

    def log_skipped(self, message_id: str, reason: str = "cached") -> CipherEvent:
        """
        Log a decryption that was not attempted.

        Args:
            message_id: Transaction id
            reason: "cached" for known failures, "rate_limited" for the
                attempt limiter
        """
        return self._new_event(
            EventType.DECRYPT_SKIPPED,
            get_subject_hash(message_id.encode()),
            {'reason': reason},
        )

    # ========================================================================
    # Queries
    # ========================================================================

    def get_all_events(self) -> List[CipherEvent]:
        return [CipherEvent.from_record(r['record']) for r in self._records]

    def get_events_by_type(self, event_type: EventType) -> List[CipherEvent]:
        return [e for e in self.get_all_events() if e.event_type == event_type]

    def get_statistics(self) -> Dict[str, int]:
        """Count events per type."""
        stats = {t.value: 0 for t in EventType}
        for event in self.get_all_events():
            stats[event.event_type.value] += 1
        stats['total'] = len(self._records)
        return stats

    def verify_chain(self) -> bool:
        """
        Recompute the hash chain.

        Returns:
            True if no record was modified, removed or reordered
        """
        previous = GENESIS_HASH
        for entry in self._records:
            if chain_hash(previous, entry['record']) != entry['hash']:
                return False
            previous = entry['hash']
        return True

    # ========================================================================
    # Export / Import
    # ========================================================================

    def export_log(self) -> str:
        """Export the log as JSON."""
        return json.dumps({
            'version': EVENT_VERSION,
            'records': self._records,
        })

    @classmethod
    def import_log(cls, json_str: str) -> 'EventLogger':
        """
        Import a log exported by export_log().

        Raises:
            ValueError: If the imported chain does not verify
        """
        data = json.loads(json_str)
        logger = cls()
        logger._records = [
            {'record': r['record'], 'hash': r['hash']}
            for r in data.get('records', [])
        ]
        if not logger.verify_chain():
            raise ValueError("Imported event log failed chain verification")
        return logger
