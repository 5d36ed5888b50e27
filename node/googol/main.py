from fastapi import FastAPI, Request, Response
from contextlib import asynccontextmanager
from pathlib import Path
import logging

from fastapi.staticfiles import StaticFiles
from fastapi.responses import PlainTextResponse, RedirectResponse

from .config import NODE_ID, STATE_FILE, TICK_INTERVAL, VIEW_DIR
from .broadcast import Broadcaster
from .models import NodeStatus
from .registry import ConnectionRegistry
from .state import CounterStore
from .storage import StateFile
from .ticker import Ticker
from .ws import router as ws_router

logger = logging.getLogger(__name__)


def create_app(
    state_file: str = STATE_FILE,
    view_dir: str = VIEW_DIR,
    tick_interval: float = TICK_INTERVAL,
) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: load state, start the ticker
        storage = StateFile(state_file)
        store = CounterStore(storage.load())
        registry = ConnectionRegistry()
        broadcaster = Broadcaster()
        ticker = Ticker(store, registry, broadcaster, interval=tick_interval)

        app.state.store = store
        app.state.registry = registry
        app.state.broadcaster = broadcaster
        app.state.ticker = ticker

        ticker.start()
        yield
        # Shutdown: finish the running tick, then save once
        await ticker.stop()
        async with store.lock:
            try:
                storage.save(store.state)
                logger.info("Counter state saved to %s", storage.path)
            except OSError:
                logger.exception("Error saving counter state to %s", storage.path)

    app = FastAPI(
        title=f"One Googol Counter ({NODE_ID})",
        lifespan=lifespan
    )

    app.include_router(ws_router)

    has_view = Path(view_dir).is_dir()
    if has_view:
        app.mount("/ui", StaticFiles(directory=view_dir, html=True), name="ui")

    @app.get("/")
    async def root(request: Request):
        if has_view:
            return RedirectResponse(url="/ui/")
        return await status(request)

    @app.get("/count", response_class=PlainTextResponse)
    async def get_count(request: Request):
        return await request.app.state.store.count_string()

    @app.get("/state")
    async def get_state(request: Request):
        message = await request.app.state.store.message()
        return Response(content=message, media_type="application/json")

    @app.get("/status")
    async def status(request: Request) -> NodeStatus:
        state = request.app.state
        return NodeStatus(
            node=NODE_ID,
            clients=len(state.registry),
            ticks=state.ticker.ticks,
            broadcasts=state.broadcaster.published,
        )

    return app


app = create_app()
