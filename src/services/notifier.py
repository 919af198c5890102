"""
Result Notifier - per-session, synchronous observer

Key behaviors:
- One instance per game session (no module-level singleton)
- Closed set of event kinds (Events enum)
- Synchronous, ordered delivery on the caller's thread
- Weak references for automatic subscriber cleanup
- No lock held during callback execution
- Callback errors are logged and counted, never propagated to the publisher
"""

import logging
import threading
import weakref
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Events(Enum):
    """Notifications published by a game session"""

    # Wallet
    BALANCE_CHANGED = "wallet.balance_changed"
    CURRENCY_CHANGED = "wallet.currency_changed"
    BET_TIER_CHANGED = "wallet.bet_tier_changed"
    WAGER_FAILED = "wallet.wager_failed"

    # Round
    PHASE_CHANGED = "round.phase_changed"
    CHOICE_REVEALED = "round.choice_revealed"
    CHOICE_REMOVED = "round.choice_removed"
    ROUND_RESULT_READY = "round.result_ready"


def _callback_key(callback: Callable):
    # Bound methods are recreated on every attribute access
    if hasattr(callback, "__self__") and hasattr(callback, "__func__"):
        return (id(callback.__self__), id(callback.__func__))
    return id(callback)


class ResultNotifier:
    """
    Observer hub for a single game session.

    Subscribers receive {"name": event.value, "data": data}.
    """

    def __init__(self, name: str = "session"):
        self.name = name

        # Subscribers stored as (callback_id, weak_ref_or_callback) tuples
        self._subscribers: dict[Events, list[tuple[int, Any]]] = {}

        # Track callbacks by ID for proper unsubscribe
        self._callback_ids: dict[Events, dict[int, Any]] = {}

        # Lock only for subscription management, not during callback execution
        self._sub_lock = threading.RLock()

        self._stats = {
            "events_published": 0,
            "events_delivered": 0,
            "errors": 0,
        }

        logger.debug(f"ResultNotifier '{name}' initialized")

    def subscribe(self, event: Events, callback: Callable, weak: bool = True):
        """
        Subscribe to an event.

        Args:
            event: Event to subscribe to
            callback: Callback function
            weak: Use weak reference for automatic cleanup (default True)
        """
        if not isinstance(event, Events):
            raise TypeError(f"Unknown event kind: {event!r}")

        with self._sub_lock:
            self._subscribers.setdefault(event, [])
            self._callback_ids.setdefault(event, {})

            cb_id = _callback_key(callback)

            # Skip if already subscribed
            existing = self._callback_ids[event].get(cb_id)
            if existing is not None:
                if self._resolve_callback(existing) is not None:
                    logger.debug(f"Already subscribed to {event.value}, skipping duplicate")
                    return
                # Stale weakref with a recycled id
                self._callback_ids[event].pop(cb_id, None)
                self._subscribers[event] = [
                    (cid, ref) for cid, ref in self._subscribers[event] if cid != cb_id
                ]

            if weak:
                try:
                    if hasattr(callback, "__self__") and hasattr(callback, "__func__"):
                        ref = weakref.WeakMethod(callback)
                    else:
                        ref = weakref.ref(callback)
                except TypeError:
                    # Not weak-referenceable, store directly
                    ref = callback
            else:
                ref = callback

            self._subscribers[event].append((cb_id, ref))
            self._callback_ids[event][cb_id] = ref
            logger.debug(f"Subscribed to {event.value}")

    def unsubscribe(self, event: Events, callback: Callable):
        """Unsubscribe from an event using callback ID matching."""
        with self._sub_lock:
            if event not in self._subscribers:
                return

            cb_id = _callback_key(callback)
            self._callback_ids.get(event, {}).pop(cb_id, None)
            self._subscribers[event] = [
                (cid, ref) for cid, ref in self._subscribers[event] if cid != cb_id
            ]
            if not self._subscribers[event]:
                self._subscribers.pop(event, None)
                self._callback_ids.pop(event, None)
            logger.debug(f"Unsubscribed from {event.value}")

    def publish(self, event: Events, data: Any = None):
        """Deliver an event to all live subscribers before returning."""
        if not isinstance(event, Events):
            raise TypeError(f"Unknown event kind: {event!r}")

        self._stats["events_published"] += 1
        self._dispatch(event, data)

    def _dispatch(self, event: Events, data: Any):
        callbacks_to_call = []
        with self._sub_lock:
            if event in self._subscribers:
                alive_entries = []
                for cb_id, ref in self._subscribers[event]:
                    callback = self._resolve_callback(ref)
                    if callback:
                        callbacks_to_call.append(callback)
                        alive_entries.append((cb_id, ref))
                    else:
                        self._callback_ids.get(event, {}).pop(cb_id, None)
                self._subscribers[event] = alive_entries

        envelope = {"name": event.value, "data": data}
        for callback in callbacks_to_call:
            try:
                callback(envelope)
                self._stats["events_delivered"] += 1
            except Exception as e:
                self._stats["errors"] += 1
                logger.error(f"Error in callback for {event.value}: {e}", exc_info=True)

    def _resolve_callback(self, ref):
        """Resolve weak or direct callback reference"""
        if isinstance(ref, weakref.ReferenceType):
            return ref()
        if callable(ref):
            return ref
        return None

    def has_subscribers(self, event: Events) -> bool:
        """Return True if there are any live subscribers for an event."""
        with self._sub_lock:
            entries = self._subscribers.get(event, [])
            return any(self._resolve_callback(ref) is not None for _, ref in entries)

    def get_stats(self) -> dict[str, Any]:
        """Subscriber counts plus delivery counters"""
        with self._sub_lock:
            stats = {
                "subscriber_count": sum(len(entries) for entries in self._subscribers.values()),
                "event_types": len(self._subscribers),
            }
            stats.update(self._stats)
            return stats

    def clear_all(self):
        """Clear all subscribers (for testing/cleanup)."""
        with self._sub_lock:
            self._subscribers.clear()
            self._callback_ids.clear()
            logger.debug("All subscribers cleared")
