import asyncio
import itertools
import logging
import threading
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# A subscriber only needs to hear "changed" once; extra signals are dropped.
SUBSCRIBER_QUEUE_SIZE = 1

_subscriber_ids = itertools.count(1)


@dataclass(frozen=True)
class Subscription:
    id: int = field(default_factory=lambda: next(_subscriber_ids))
    queue: asyncio.Queue = field(
        default_factory=lambda: asyncio.Queue(maxsize=SUBSCRIBER_QUEUE_SIZE),
        compare=False,
        hash=False,
    )


class ReloadBroadcaster:
    """
    Fan-out channel for the zero-payload reload signal.

    One producer (the content watcher) and any number of subscribers. A
    subscriber only sees signals published after it subscribed.
    """

    def __init__(self):
        self._subscribers: set[Subscription] = set()
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self) -> Subscription:
        subscription = Subscription()
        with self._lock:
            self._subscribers.add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscribers.discard(subscription)

    def publish(self) -> int:
        """Signal every subscriber. Returns how many were notified."""
        with self._lock:
            subscribers = list(self._subscribers)

        count = 0
        for subscription in subscribers:
            try:
                subscription.queue.put_nowait(None)
                count += 1
            except asyncio.QueueFull:
                pass  # already has a pending signal
        logger.debug(f"Reload signal sent to {count} of {len(subscribers)} subscribers")
        return count

    async def wait(self, subscription: Subscription) -> None:
        """Suspend until the next signal for this subscription."""
        await subscription.queue.get()
