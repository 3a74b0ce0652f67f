"""
Change Notifier for RuleForge.

Delivers post-mutation snapshots of a configuration to its subscribers,
synchronously and in registration order. A mutation made by a subscriber
while a round is running is queued and delivered after that round, so every
subscriber sees revisions in increasing order and ends on the current one.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, List, Optional, TypeAlias

from ruleforge.core.models.configuration import ConfigurationSnapshot

ChangeHandler: TypeAlias = Callable[[ConfigurationSnapshot], None]


class Subscription:
    """Handle returned by ``ChangeNotifier.subscribe``.

    Release it when the observer is torn down, either by calling
    ``unsubscribe()`` or by using the handle as a context manager.
    """

    def __init__(self, notifier: "ChangeNotifier", game_id: str, handler: ChangeHandler) -> None:
        self._notifier = notifier
        self.game_id = game_id
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            self._notifier._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.unsubscribe()

    def __repr__(self) -> str:
        state = "active" if self._active else "released"
        return f"<Subscription game_id={self.game_id} {state}>"


class ChangeNotifier:
    """Synchronous per-configuration pub/sub for configuration snapshots."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Subscription]] = defaultdict(list)
        # game_id -> snapshots waiting while a round for that id is running
        self._pending: Dict[str, Deque[ConfigurationSnapshot]] = {}
        self._logger = logging.getLogger(__name__)

    def subscribe(self, game_id: str, handler: ChangeHandler) -> Subscription:
        """Register a handler for one configuration; handlers run in registration order."""
        subscription = Subscription(self, game_id, handler)
        self._subscribers[game_id].append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        subscriptions = self._subscribers.get(subscription.game_id)
        if subscriptions and subscription in subscriptions:
            subscriptions.remove(subscription)
            if not subscriptions:
                del self._subscribers[subscription.game_id]

    def subscriber_count(self, game_id: str) -> int:
        return len(self._subscribers.get(game_id, []))

    def publish(self, snapshot: ConfigurationSnapshot) -> None:
        """Deliver a snapshot to every subscriber of its configuration.

        Called from inside a subscriber of the same configuration, the
        snapshot is queued and delivered once the running round finishes.
        """
        game_id = snapshot.game_id
        queue = self._pending.get(game_id)
        if queue is not None:
            self._logger.debug(f"Queued revision {snapshot.revision} of '{game_id}' behind the running round")
            queue.append(snapshot)
            return

        queue = self._pending[game_id] = deque([snapshot])
        try:
            while queue:
                self._deliver(queue.popleft())
        finally:
            del self._pending[game_id]

    def _deliver(self, snapshot: ConfigurationSnapshot) -> None:
        subscriptions = list(self._subscribers.get(snapshot.game_id, []))

        if not subscriptions:
            self._logger.debug(f"No subscribers for configuration '{snapshot.game_id}'")
            return

        self._logger.debug(
            f"Notifying {len(subscriptions)} subscriber(s) of '{snapshot.game_id}' "
            f"(revision {snapshot.revision})"
        )
        for subscription in subscriptions:
            # Released during this round by an earlier handler.
            if not subscription.active:
                continue
            self._safe_dispatch(subscription, snapshot)

    def _safe_dispatch(self, subscription: Subscription, snapshot: ConfigurationSnapshot) -> None:
        """Dispatch wrapper to keep one handler failure from stopping the round."""
        handler_name = getattr(subscription.handler, "__name__", str(subscription.handler))
        try:
            subscription.handler(snapshot)
        except Exception as exc:
            self._logger.exception(
                f"Subscriber error in '{handler_name}' for configuration '{snapshot.game_id}'",
                exc_info=exc,
            )

    def clear(self, game_id: Optional[str] = None) -> None:
        """Remove the subscriptions of one configuration, or all of them."""
        if game_id is None:
            targets = [sub for subs in self._subscribers.values() for sub in subs]
        else:
            targets = list(self._subscribers.get(game_id, []))
        for subscription in targets:
            subscription.unsubscribe()
