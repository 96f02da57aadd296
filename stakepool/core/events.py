# MIT License
# Copyright (c) 2025 Hashborn

"""
Event system for pool lifecycle events.

Provides a simple pub/sub mechanism. Pools emit only after an operation has
been committed, so listeners never observe rolled-back changes.
"""
from typing import Dict, List, Callable, Any, Optional
import logging

from ..observability.metrics import events_emitted_total

logger = logging.getLogger(__name__)

# Event names
STAKED = "staked"
UNSTAKE_REQUESTED = "unstake_requested"
WITHDRAWN = "withdrawn"
REWARD_PAID = "reward_paid"
REWARD_ADDED = "reward_added"
COOLDOWN_UPDATED = "cooldown_updated"
OWNERSHIP_TRANSFERRED = "ownership_transferred"


class EventBus:
    """
    Simple event bus for pool events.

    Events are delivered synchronously in the emitting thread.
    """

    def __init__(self):
        self.listeners: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: str, callback: Callable) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: Event name (e.g., 'staked', 'reward_paid')
            callback: Function to call with the event data as keyword arguments
        """
        if event_type not in self.listeners:
            self.listeners[event_type] = []

        self.listeners[event_type].append(callback)
        logger.debug(f"Subscribed to event: {event_type}")

    def unsubscribe(self, event_type: str, callback: Callable) -> None:
        """
        Remove a previously subscribed callback.

        Args:
            event_type: Event name the callback was subscribed to
            callback: The same function object passed to subscribe()
        """
        if event_type in self.listeners:
            try:
                self.listeners[event_type].remove(callback)
                logger.debug(f"Unsubscribed from event: {event_type}")
            except ValueError:
                logger.warning(f"Callback not found for event: {event_type}")

    def emit(self, event_type: str, **data: Any) -> None:
        """
        Emit an event to all subscribers.

        A failing listener is logged and skipped; the others still run.
        """
        events_emitted_total.labels(event=event_type).inc()

        listeners = self.listeners.get(event_type, [])
        if not listeners:
            logger.debug(f"No listeners for event: {event_type}")
            return

        logger.debug(f"Emitting event: {event_type} to {len(listeners)} listener(s)")

        for callback in list(listeners):
            try:
                callback(**data)
            except Exception as e:
                logger.error(f"Error in event callback for {event_type}: {e}", exc_info=True)

    def clear(self, event_type: Optional[str] = None) -> None:
        """Clear listeners for one event type, or all listeners if no type given."""
        if event_type:
            self.listeners.pop(event_type, None)
            logger.debug(f"Cleared listeners for event: {event_type}")
        else:
            self.listeners.clear()
            logger.debug("Cleared all event listeners")


# Global event bus instance
event_bus = EventBus()
