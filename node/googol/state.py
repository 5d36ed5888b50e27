# the shared counter state + its lock
import asyncio
from .models import CounterState


class CounterStore:
    """
    Owns the single CounterState. The ticker holds the lock for a whole
    recompute; readers hold it just long enough to copy or serialize.
    """

    def __init__(self, state: CounterState) -> None:
        self.state = state
        self.lock = asyncio.Lock()

    async def read(self) -> CounterState:
        async with self.lock:
            return self.state.model_copy(deep=True)

    async def message(self) -> str:
        async with self.lock:
            return self.state.to_message()

    async def count_string(self) -> str:
        async with self.lock:
            return str(self.state.count.value)
