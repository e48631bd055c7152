from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from .schemas import Candidate

LOGGER = logging.getLogger(__name__)

Lookup = Callable[[str], List[Candidate]]


class SearchSession:
    """Debounced place search where only the newest query may publish results.

    Every keystroke goes through :meth:`type`; a lookup is issued by
    :meth:`poll` once the text has been quiet for ``debounce_ms``. Each issued
    lookup gets a token and :meth:`complete` drops results whose token has been
    superseded by a newer query.
    """

    def __init__(
        self,
        lookup: Lookup,
        debounce_ms: int = 300,
        min_length: int = 2,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._lookup = lookup
        self.debounce = debounce_ms / 1000.0
        self.min_length = min_length
        self._clock = clock
        self.text = ""
        self.results: List[Candidate] = []
        self._typed_at: Optional[float] = None
        self._latest_token = 0

    def type(self, text: str) -> None:
        self.text = text
        self._typed_at = self._clock()
        # Anything in flight is now stale.
        self._latest_token += 1

    def due(self) -> bool:
        if self._typed_at is None:
            return False
        return self._clock() - self._typed_at >= self.debounce

    def begin(self) -> Optional[int]:
        """Issue a lookup for the current text; ``None`` when it is too short."""
        self._typed_at = None
        self._latest_token += 1
        if len(self.text.strip()) < self.min_length:
            self.results = []
            return None
        return self._latest_token

    def complete(self, token: int, results: List[Candidate]) -> bool:
        if token != self._latest_token:
            LOGGER.debug("Discarding stale lookup %d (latest is %d)", token, self._latest_token)
            return False
        self.results = list(results)
        return True

    def poll(self) -> bool:
        """Run the pending lookup if the debounce window has elapsed."""
        if not self.due():
            return False
        return self.flush()

    def flush(self) -> bool:
        token = self.begin()
        if token is None:
            return False
        return self.complete(token, self._lookup(self.text.strip()))
