"""Observer registration with explicit unsubscribe.

Components that notify others (frame sets, media readers, players and the
controller) derive from :class:`EventEmitter`. Listeners run synchronously in
registration order on the emitting call, so ordering between e.g. "add" and
"finalize" notifications is exactly the order of the underlying calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

Listener = Callable[..., Any]


@dataclass(eq=False)
class Subscription:
    """Handle returned by :meth:`EventEmitter.on`.

    Attributes:
        event: Name of the subscribed event
        listener: Registered callback
    """

    emitter: "EventEmitter"
    event: str
    listener: Listener
    once: bool = False
    active: bool = field(default=True, init=False)

    def unsubscribe(self) -> None:
        """Remove the listener. Calling this more than once is harmless."""
        if self.active:
            self.active = False
            self.emitter._remove(self)


class EventEmitter:
    """Minimal synchronous event emitter."""

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[Subscription]] = {}

    def on(self, event: str, listener: Listener) -> Subscription:
        """Register ``listener`` for ``event``."""
        subscription = Subscription(self, event, listener)
        self._subscriptions.setdefault(event, []).append(subscription)
        return subscription

    def once(self, event: str, listener: Listener) -> Subscription:
        """Register ``listener`` for the next ``event`` only."""
        subscription = Subscription(self, event, listener, once=True)
        self._subscriptions.setdefault(event, []).append(subscription)
        return subscription

    def emit(self, event: str, *args: Any) -> bool:
        """Call all listeners of ``event`` with ``args``.

        :return: True if at least one listener was called
        """
        subscriptions = list(self._subscriptions.get(event, ()))
        for subscription in subscriptions:
            if not subscription.active:
                continue
            if subscription.once:
                subscription.unsubscribe()
            subscription.listener(*args)
        return bool(subscriptions)

    def listener_count(self, event: str) -> int:
        return len(self._subscriptions.get(event, ()))

    def remove_all_listeners(self, event: str | None = None) -> None:
        """Drop listeners of ``event`` (or of every event if None)."""
        events = [event] if event is not None else list(self._subscriptions)
        for name in events:
            for subscription in self._subscriptions.pop(name, []):
                subscription.active = False

    def _remove(self, subscription: Subscription) -> None:
        subscriptions = self._subscriptions.get(subscription.event)
        if subscriptions and subscription in subscriptions:
            subscriptions.remove(subscription)


__all__ = ["EventEmitter", "Subscription", "Listener"]
