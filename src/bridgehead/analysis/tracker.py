"""
Request tokens per UI action.

Each new request for an action makes the previous ones stale, so a
late response from an older request can be recognized and dropped.
No network cancellation is involved.
"""

import itertools
from typing import Optional


class RequestTracker:
    """Monotonic request tokens keyed by action name."""

    def __init__(self):
        self._counter = itertools.count(1)
        self._current: dict[str, int] = {}
        self._in_flight: dict[str, set[int]] = {}

    def begin(self, key: str) -> int:
        """Start a request for `key`; every earlier token of `key` becomes stale."""
        token = next(self._counter)
        self._current[key] = token
        self._in_flight.setdefault(key, set()).add(token)
        return token

    def is_current(self, key: str, token: int) -> bool:
        return self._current.get(key) == token

    def is_busy(self, key: str) -> bool:
        """True while any request for `key` is outstanding."""
        return bool(self._in_flight.get(key))

    def finish(self, key: str, token: int) -> None:
        self._in_flight.get(key, set()).discard(token)

    def current(self, key: str) -> Optional[int]:
        return self._current.get(key)
