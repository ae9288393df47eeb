"""
Event bus - Named, synchronous broadcast for cross-cutting extensions.

Unrelated subsystems subscribe listeners to a workflow event by name.
Listeners run in subscription order, each receiving the same mutable
payload mapping; no listener can prevent the others from running.
Exceptions raised by a listener propagate to the workflow's caller.
"""

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

BEFORE_REGISTER = "beforeRegister"
REGISTER_COMPLETE = "registerComplete"
RECOVER_PASSWORD_COMPLETE = "recoverPasswordComplete"

Listener = Callable[[dict[str, Any]], None]


class EventBus:
    """Ordered registry of listeners keyed by event name."""

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: Listener) -> None:
        """Append ``listener`` to the listeners for ``event_name``."""
        self._listeners[event_name].append(listener)

    def listeners(self, event_name: str) -> list[Listener]:
        return list(self._listeners.get(event_name, ()))

    def fire(self, event_name: str, payload: dict[str, Any]) -> None:
        """
        Invoke every listener for ``event_name`` with ``payload``.

        Return values are ignored. Listeners may mutate the payload and
        any mutable values inside it (e.g. an error accumulator).
        """
        listeners = self.listeners(event_name)
        logger.debug("Firing %s to %d listener(s)", event_name, len(listeners))
        for listener in listeners:
            listener(payload)
