# connected clients and their vote state
import asyncio
from typing import Dict, List
from .models import Client, CounterVote, PollVote


class ConnectionRegistry:
    """
    Maps connection ids to client vote state.

    Every method takes the lock only for the in-memory update, never across
    network I/O. Ids of closed connections are never reused, and updates for
    unknown ids are ignored: a client may disconnect with messages in flight.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._clients: Dict[int, Client] = {}
        self._next_id = 1

    async def register(self) -> int:
        async with self._lock:
            client_id = self._next_id
            self._next_id += 1
            self._clients[client_id] = Client()
            return client_id

    async def unregister(self, client_id: int) -> None:
        async with self._lock:
            self._clients.pop(client_id, None)

    async def set_counter_vote(self, client_id: int, vote: CounterVote) -> None:
        async with self._lock:
            client = self._clients.get(client_id)
            if client is not None:
                client.counter_vote = vote

    async def set_poll_vote(self, client_id: int, vote: PollVote) -> None:
        async with self._lock:
            client = self._clients.get(client_id)
            if client is not None:
                client.poll_vote = vote

    async def increment_action_clicks(self, client_id: int) -> None:
        async with self._lock:
            client = self._clients.get(client_id)
            if client is not None:
                client.action_clicks += 1

    async def snapshot(self) -> List[Client]:
        """
        Copies of every live client, in connection order.
        """
        async with self._lock:
            return [c.model_copy() for c in self._clients.values()]

    async def drain(self) -> List[Client]:
        """
        Snapshot and click reset in one critical section, so a click lands
        either in this snapshot or in the next one.
        """
        async with self._lock:
            clients = [c.model_copy() for c in self._clients.values()]
            for client in self._clients.values():
                client.action_clicks = 0
            return clients

    async def reset_action_clicks(self) -> None:
        async with self._lock:
            for client in self._clients.values():
                client.action_clicks = 0

    async def ids(self) -> List[int]:
        async with self._lock:
            return list(self._clients)

    def __len__(self) -> int:
        return len(self._clients)
