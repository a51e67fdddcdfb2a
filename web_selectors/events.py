"""
Synchronous event bus for picker state changes.

Listeners subscribe to an event type and get a Subscription back; calling
unsubscribe() on it detaches the listener. Events are dispatched in
registration order, synchronously, with no deduplication.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from bs4 import Tag


@dataclass(frozen=True)
class SelectorChanged:
    selector: str
    internal: bool = False


@dataclass(frozen=True)
class ElementPicked:
    element: Optional[Tag]
    selector: str


@dataclass(frozen=True)
class PickingChanged:
    picking: bool


@dataclass(frozen=True)
class UniqueChanged:
    unique: bool


@dataclass(frozen=True)
class OutlineEnabledChanged:
    enabled: bool


@dataclass(frozen=True)
class ShortestRuleChanged:
    enabled: bool


class Subscription:
    """Token returned by EventBus.subscribe()."""

    def __init__(self, bus: "EventBus", event_type: type, callback: Callable):
        self._bus = bus
        self.event_type = event_type
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._bus._detach(self)
            self.active = False


class EventBus:
    def __init__(self) -> None:
        self._listeners: Dict[type, List[Subscription]] = {}

    def subscribe(self, event_type: type, callback: Callable[[Any], None]) -> Subscription:
        """Register a callback for a specific event type."""
        subscription = Subscription(self, event_type, callback)
        self._listeners.setdefault(event_type, []).append(subscription)
        return subscription

    def emit(self, event: Any) -> None:
        """Dispatch an event to every listener of its type."""
        for subscription in list(self._listeners.get(type(event), [])):
            if subscription.active:
                subscription.callback(event)

    def _detach(self, subscription: Subscription) -> None:
        listeners = self._listeners.get(subscription.event_type, [])
        for i, item in enumerate(listeners):
            if item is subscription:
                del listeners[i]
                break
