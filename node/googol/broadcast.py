# fan-out channel from the ticker to every connection
import asyncio
from typing import Set
from .config import BROADCAST_BUFFER


class Subscription:
    """
    One consumer's buffer. When full, the oldest message is dropped so the
    newest state is always delivered.
    """

    def __init__(self, maxsize: int) -> None:
        self.queue: "asyncio.Queue[str]" = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def offer(self, message: str) -> None:
        if self.queue.full():
            self.queue.get_nowait()
            self.dropped += 1
        self.queue.put_nowait(message)

    async def recv(self) -> str:
        return await self.queue.get()


class Broadcaster:
    def __init__(self, buffer: int = BROADCAST_BUFFER) -> None:
        self.buffer = buffer
        self.published = 0
        self._subscribers: Set[Subscription] = set()

    def subscribe(self) -> Subscription:
        sub = Subscription(self.buffer)
        self._subscribers.add(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        self._subscribers.discard(sub)

    def publish(self, message: str) -> int:
        """
        Never blocks. Returns the number of subscribers the message was offered to.
        """
        self.published += 1
        subscribers = list(self._subscribers)
        for sub in subscribers:
            sub.offer(message)
        return len(subscribers)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
