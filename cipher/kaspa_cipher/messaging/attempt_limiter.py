"""
Decryption Attempt Limiter

Bounds how often one message id may be run through the decrypt pipeline:
- At most MAX_ATTEMPTS attempts per id
- At least MIN_INTERVAL seconds between attempts on the same id
- The count resets once RESET_AFTER seconds pass without an attempt
"""

import time
from typing import Callable, Dict, Any


MAX_ATTEMPTS = 50
MIN_INTERVAL = 0.1
RESET_AFTER = 60.0


class AttemptLimiter:
    """Per-message-id attempt counter with an injectable clock."""

    def __init__(self,
                 max_attempts: int = MAX_ATTEMPTS,
                 min_interval: float = MIN_INTERVAL,
                 reset_after: float = RESET_AFTER,
                 clock: Callable[[], float] = time.time):
        """
        Initialize the limiter.

        Args:
            max_attempts: Attempts allowed per id within one window
            min_interval: Seconds required between two attempts on an id
            reset_after: Idle seconds after which an id's count resets
            clock: Source of timestamps in seconds
        """
        self.max_attempts = max_attempts
        self.min_interval = min_interval
        self.reset_after = reset_after
        self._clock = clock
        self._attempts: Dict[str, int] = {}
        self._last_attempt: Dict[str, float] = {}

    def can_attempt(self, message_id: str) -> bool:
        """Check whether another attempt on message_id is allowed now."""
        if message_id not in self._last_attempt:
            return True

        elapsed = self._clock() - self._last_attempt[message_id]
        if elapsed > self.reset_after:
            self._attempts[message_id] = 0
            return True
        if elapsed < self.min_interval:
            return False
        return self._attempts.get(message_id, 0) < self.max_attempts

    def record_attempt(self, message_id: str) -> None:
        self._attempts[message_id] = self._attempts.get(message_id, 0) + 1
        self._last_attempt[message_id] = self._clock()

    def get_stats(self, message_id: str) -> Dict[str, Any]:
        """
        Get attempt statistics for one message id.

        Returns:
            Dict with attempts, remaining_attempts and time_until_reset
            (seconds)
        """
        attempts = self._attempts.get(message_id, 0)
        last = self._last_attempt.get(message_id)
        until_reset = 0.0
        if last is not None:
            elapsed = self._clock() - last
            if elapsed > self.reset_after:
                attempts = 0
            else:
                until_reset = self.reset_after - elapsed
        return {
            'attempts': attempts,
            'remaining_attempts': max(0, self.max_attempts - attempts),
            'time_until_reset': until_reset,
        }

    def clear(self, message_id: str) -> None:
        self._attempts.pop(message_id, None)
        self._last_attempt.pop(message_id, None)
