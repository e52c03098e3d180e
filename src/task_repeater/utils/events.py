"""Minimal synchronous event emitter."""

from collections import defaultdict
from collections.abc import Callable
from typing import Any

Listener = Callable[..., Any]


class EventEmitter:
    """Register listeners per event name and notify them in registration order."""

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> Listener:
        """Subscribe a listener and return it."""
        self._listeners[event].append(listener)
        return listener

    def once(self, event: str, listener: Listener) -> Listener:
        """Subscribe a listener that is removed right before its first call."""

        def wrapper(*args: Any) -> Any:
            self.off(event, wrapper)
            return listener(*args)

        wrapper.__wrapped__ = listener  # pyright: ignore reportFunctionMemberAccess
        self._listeners[event].append(wrapper)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        """Unsubscribe a listener. Listeners added with once() can be removed by their original function."""
        listeners = self._listeners.get(event)
        if not listeners:
            return
        for registered in listeners:
            if registered is listener or getattr(registered, "__wrapped__", None) is listener:
                listeners.remove(registered)
                return

    def emit(self, event: str, *args: Any) -> bool:
        """Call all listeners of an event. Returns True if the event had listeners."""
        # Copy so listeners can (un)subscribe while the event is dispatched
        listeners = list(self._listeners.get(event, ()))
        for listener in listeners:
            listener(*args)
        return bool(listeners)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))
