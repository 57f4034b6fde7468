"""In-process navigation history.

Models the browser history the filter state is mirrored into: ``push``
records a new entry (dropping any forward entries) without notifying,
while ``back``/``forward`` move the cursor and notify subscribers with
the entry that became current.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

_logger = logging.getLogger(__name__)

NavigationListener = Callable[[str], None]


class NavigationHistory:
    def __init__(self, initial: str = "") -> None:
        self._entries: list[str] = [initial]
        self._index = 0
        self._listeners: list[NavigationListener] = []

    @property
    def current(self) -> str:
        return self._entries[self._index]

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def can_go_forward(self) -> bool:
        return self._index < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, query: str) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append(query)
        self._index += 1
        _logger.debug("History push %r (%d entries)", query, len(self._entries))

    def back(self) -> bool:
        if not self.can_go_back:
            return False
        self._index -= 1
        self._notify()
        return True

    def forward(self) -> bool:
        if not self.can_go_forward:
            return False
        self._index += 1
        self._notify()
        return True

    def subscribe(self, listener: NavigationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        query = self.current
        for listener in list(self._listeners):
            try:
                listener(query)
            except Exception:
                _logger.warning("Navigation listener failed", exc_info=True)
