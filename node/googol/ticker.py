# fixed-period recompute + broadcast loop
import asyncio
import logging
from typing import Optional
from .aggregator import aggregate
from .broadcast import Broadcaster
from .config import TICK_INTERVAL
from .counter import apply_votes
from .registry import ConnectionRegistry
from .state import CounterStore
from .upgrade import apply_poll_votes

logger = logging.getLogger(__name__)


class Ticker:
    """
    Every interval: drain the clients (snapshot + click reset),
    recompute poll and count under the state lock, and publish the new state
    if it differs from the last one published.
    """

    def __init__(
        self,
        store: CounterStore,
        registry: ConnectionRegistry,
        broadcaster: Broadcaster,
        interval: float = TICK_INTERVAL,
    ) -> None:
        self.store = store
        self.registry = registry
        self.broadcaster = broadcaster
        self.interval = interval
        self.ticks = 0
        # clients get the current state on connect, so the loaded state is the baseline
        self.last_message: str = store.state.to_message()
        self._stop = asyncio.Event()
        self._task: Optional["asyncio.Task[None]"] = None

    async def tick(self) -> bool:
        """
        Run one tick. Returns True if a broadcast went out.
        """
        clients = await self.registry.drain()

        async with self.store.lock:
            state = self.store.state
            meter, poll_meter, net_actions = aggregate(clients)
            apply_poll_votes(state, poll_meter)
            apply_votes(state, meter, net_actions, state.upgrade)
            message = state.to_message()

        self.ticks += 1
        if message == self.last_message:
            return False

        self.broadcaster.publish(message)
        self.last_message = message
        return True

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        while not self._stop.is_set():
            try:
                await self.tick()
            except Exception:
                logger.exception("Tick %d failed", self.ticks)

            deadline += self.interval
            now = loop.time()
            if deadline < now:
                # fell behind: skip missed ticks instead of bursting
                deadline = now
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=deadline - now)
            except asyncio.TimeoutError:
                pass

    def start(self) -> "asyncio.Task[None]":
        self._stop.clear()
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        """
        Let the running tick finish, then end the loop.
        """
        self._stop.set()
        if self._task is not None:
            await self._task
            self._task = None
