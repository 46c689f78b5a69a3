from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")

Listener = Callable[[S], None]


class Observable(Generic[S]):
    """Push side of a "state + notify on change" contract.

    Owners call `_publish(snapshot)` once per committed transition; listeners
    receive snapshots in commit order. A failing listener is logged and does
    not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener[S]] = []

    def subscribe(self, listener: Listener[S]) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, snapshot: S) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("state listener %r failed", listener)
