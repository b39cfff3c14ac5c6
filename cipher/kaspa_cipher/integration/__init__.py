# Integration Module
"""
Audit logging for encryption and decryption events.

Subjects are recorded as truncated SHA-256 hashes; no plaintext or key
material is ever logged.
"""

from .event_logger import (
    EventType,
    CipherEvent,
    EventLogger,
    get_subject_hash,
)

__all__ = [
    'EventType',
    'CipherEvent',
    'EventLogger',
    'get_subject_hash',
]
