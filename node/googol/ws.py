# websocket endpoint: votes in, state broadcasts out
import asyncio
import contextlib
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from .broadcast import Broadcaster, Subscription
from .config import MAX_MESSAGE_SIZE
from .models import CounterVote, PollVote
from .registry import ConnectionRegistry
from .state import CounterStore

logger = logging.getLogger(__name__)

router = APIRouter()


async def handle_command(registry: ConnectionRegistry, client_id: int, command: str) -> bool:
    """
    Apply one inbound command to the client's vote state.
    Returns False for unknown commands, which are ignored.
    """
    if command == "increment":
        await registry.set_counter_vote(client_id, CounterVote.INCREMENT)
    elif command == "decrement":
        await registry.set_counter_vote(client_id, CounterVote.DECREMENT)
    elif command == "base":
        await registry.set_poll_vote(client_id, PollVote.BASE)
    elif command == "exponent":
        await registry.set_poll_vote(client_id, PollVote.EXPONENT)
    elif command == "action":
        await registry.increment_action_clicks(client_id)
    else:
        logger.info("Unknown command from client %d: %r", client_id, command)
        return False
    return True


async def forward_broadcasts(websocket: WebSocket, sub: Subscription) -> None:
    """
    Sender side of a connection: runs until the socket fails or gets cancelled.
    """
    while True:
        message = await sub.recv()
        try:
            await websocket.send_text(message)
        except Exception:
            # client gone; the receive loop cleans up
            return


@router.websocket("/ws")
async def ws_endpoint(websocket: WebSocket):
    store: CounterStore = websocket.app.state.store
    registry: ConnectionRegistry = websocket.app.state.registry
    broadcaster: Broadcaster = websocket.app.state.broadcaster

    await websocket.accept()
    client_id = await registry.register()
    logger.info("Client %d connected", client_id)

    # read + subscribe with no await in between, so the initial state
    # is never newer than the first broadcast behind it
    initial = await store.message()
    sub = broadcaster.subscribe()
    sub.offer(initial)
    send_task = asyncio.create_task(forward_broadcasts(websocket, sub))

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            text = message.get("text")
            if text is None or len(text) > MAX_MESSAGE_SIZE:
                continue
            await handle_command(registry, client_id, text)
    except WebSocketDisconnect:
        pass
    finally:
        await registry.unregister(client_id)
        broadcaster.unsubscribe(sub)
        send_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await send_task
        logger.info("Client %d disconnected", client_id)
