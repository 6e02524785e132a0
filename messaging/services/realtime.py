"""Message insert notifications and the cache invalidation driven by them."""

import asyncio
import inspect
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Optional, Set, Union

from ..utils.logger import get_app_logger
from .query_cache import QueryCache, CONVERSATIONS_TAG, messages_tag


@dataclass(frozen=True)
class MessageInserted:
    """A row was inserted into the messages table."""

    message_id: str
    conversation_id: str
    sender_id: Optional[str]
    created_at: datetime


# Plain callbacks run inline; coroutine callbacks run in their own task
MessageCallback = Callable[[MessageInserted], Union[None, Awaitable[None]]]


class Subscription:
    """Handle returned by RealtimeHub.subscribe."""

    def __init__(self, callback: MessageCallback, conversation_id: Optional[str]):
        self.callback = callback
        self.conversation_id = conversation_id
        self.active = True

    def matches(self, event: MessageInserted) -> bool:
        return self.conversation_id is None or self.conversation_id == event.conversation_id


class RealtimeHub:
    """
    In-process publish/subscribe for message inserts.

    Subscribers either listen to every insert (conversation_id=None) or to
    one conversation. Plain callbacks run inline during publish, so cache
    invalidation is done by the time publish returns. Coroutine callbacks
    (client notifications) are scheduled as tracked tasks, so a slow
    watcher never holds up the sender. Failures are logged and do not stop
    delivery to the others.
    """

    def __init__(self):
        self._global: List[Subscription] = []
        self._by_conversation: Dict[str, List[Subscription]] = {}  # conversation_id -> subs
        self._tasks: Set[asyncio.Task] = set()
        self.logger = get_app_logger()

    def subscribe(self, callback: MessageCallback, conversation_id: Optional[str] = None) -> Subscription:
        """Register callback for all inserts, or only those of conversation_id."""
        subscription = Subscription(callback, conversation_id)
        if conversation_id is None:
            self._global.append(subscription)
        else:
            self._by_conversation.setdefault(conversation_id, []).append(subscription)
        self.logger.debug(f"[RealtimeHub] subscribed to {conversation_id or 'all messages'}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Unsubscribing twice is a no-op."""
        if not subscription.active:
            return
        subscription.active = False

        if subscription.conversation_id is None:
            self._global = [s for s in self._global if s is not subscription]
            return

        remaining = [
            s for s in self._by_conversation.get(subscription.conversation_id, [])
            if s is not subscription
        ]
        if remaining:
            self._by_conversation[subscription.conversation_id] = remaining
        else:
            self._by_conversation.pop(subscription.conversation_id, None)
        self.logger.debug(f"[RealtimeHub] unsubscribed from {subscription.conversation_id}")

    def subscriber_count(self, conversation_id: Optional[str] = None) -> int:
        if conversation_id is None:
            return len(self._global)
        return len(self._by_conversation.get(conversation_id, []))

    async def publish(self, event: MessageInserted) -> int:
        """
        Deliver an insert notification without waiting on async subscribers.

        Returns:
            Number of subscribers invoked or scheduled
        """
        targets = list(self._global) + list(self._by_conversation.get(event.conversation_id, []))
        delivered = 0
        for subscription in targets:
            if not subscription.active or not subscription.matches(event):
                continue
            try:
                result = subscription.callback(event)
            except Exception:
                self.logger.exception(
                    f"[RealtimeHub] callback error for message {event.message_id}"
                )
                continue

            if inspect.isawaitable(result):
                task = asyncio.create_task(self._run_callback(result, event))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
            delivered += 1
        return delivered

    async def _run_callback(self, pending: Awaitable[None], event: MessageInserted) -> None:
        try:
            await pending
        except Exception:
            self.logger.exception(
                f"[RealtimeHub] callback error for message {event.message_id}"
            )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every scheduled callback to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def clear(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()
        for subscription in self._global:
            subscription.active = False
        for subscriptions in self._by_conversation.values():
            for subscription in subscriptions:
                subscription.active = False
        self._global.clear()
        self._by_conversation.clear()


class RealtimeInvalidator:
    """
    Turns message inserts into cache invalidations.

    One global subscription keeps conversation lists fresh; each watched
    conversation adds a scoped subscription for its message pages. Nothing
    is written into the cache here, readers re-fetch on their next call.
    """

    def __init__(self, hub: RealtimeHub, cache: QueryCache):
        self.hub = hub
        self.cache = cache
        self.logger = get_app_logger()
        self._global_subscription: Optional[Subscription] = None

    @property
    def running(self) -> bool:
        return self._global_subscription is not None

    def start(self) -> None:
        if self._global_subscription is not None:
            return
        self._global_subscription = self.hub.subscribe(self._on_any_message)
        self.logger.info("[RealtimeInvalidator] started")

    def stop(self) -> None:
        if self._global_subscription is None:
            return
        self.hub.unsubscribe(self._global_subscription)
        self._global_subscription = None
        self.logger.info("[RealtimeInvalidator] stopped")

    def _on_any_message(self, event: MessageInserted) -> None:
        self.cache.invalidate(CONVERSATIONS_TAG)

    @asynccontextmanager
    async def watch_conversation(
        self,
        conversation_id: str,
        on_invalidate: Optional[MessageCallback] = None
    ) -> AsyncIterator[Subscription]:
        """
        Keep one conversation's message pages fresh while the block runs.

        Args:
            conversation_id: Conversation being viewed
            on_invalidate: Coroutine function run in the background after each
                invalidation, e.g. to notify a client

        Yields:
            The underlying Subscription, released when the block exits
        """
        def _handle(event: MessageInserted) -> Optional[Awaitable[None]]:
            self.cache.invalidate(messages_tag(conversation_id))
            if on_invalidate is not None:
                return on_invalidate(event)
            return None

        subscription = self.hub.subscribe(_handle, conversation_id=conversation_id)
        try:
            yield subscription
        finally:
            self.hub.unsubscribe(subscription)
