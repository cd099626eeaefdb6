import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional, Tuple

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from livesite.routers import pages, reload
from livesite.services.broadcaster import ReloadBroadcaster
from livesite.services.content_loader import load_initial_content
from livesite.services.content_watcher import ContentWatcher, run_reload_loop
from livesite.settings import Settings, settings
from livesite.state import ContentStore

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def start_content_watcher(
    settings_obj: Settings, store: ContentStore, broadcaster: ReloadBroadcaster
) -> Tuple[ContentWatcher, asyncio.Task]:
    """Start the watcher thread and the task that refreshes and broadcasts."""
    logger.info("Starting content watcher for hot-reload...")
    watcher = ContentWatcher(settings_obj.content_path, debounce_ms=settings_obj.DEBOUNCE_MS)
    watcher.start()
    task = asyncio.create_task(
        run_reload_loop(watcher, store, broadcaster, settings_obj.content_path)
    )
    return watcher, task


async def stop_content_watcher(watcher: ContentWatcher, task: asyncio.Task) -> None:
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    await asyncio.to_thread(watcher.stop)


def _static_file(path) -> FileResponse:
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(path)


def create_app(settings_obj: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"RUST_ENV is set to development: {settings_obj.is_development}")

        snapshot = await asyncio.to_thread(load_initial_content, settings_obj.content_path)
        store = ContentStore(snapshot, is_development=settings_obj.is_development)
        broadcaster = ReloadBroadcaster()
        app.state.store = store
        app.state.broadcaster = broadcaster

        watcher: Optional[ContentWatcher] = None
        task: Optional[asyncio.Task] = None
        if settings_obj.is_development:
            logger.info("Hot reload enabled. Check logs for file change events.")
            watcher, task = start_content_watcher(settings_obj, store, broadcaster)

        try:
            yield
        finally:
            if watcher is not None:
                await stop_content_watcher(watcher, task)

    app = FastAPI(title="livesite", lifespan=lifespan)
    app.state.settings = settings_obj

    app.include_router(pages.router)
    app.include_router(reload.router)

    static_path = settings_obj.static_path
    app.mount(
        "/static",
        StaticFiles(directory=static_path, check_dir=False),
        name="static",
    )

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon_ico():
        return _static_file(static_path / "favicon.ico")

    @app.get("/favicon.png", include_in_schema=False)
    async def favicon_png():
        return _static_file(static_path / "favicon.png")

    return app


app = create_app()


def run() -> None:
    logger.info(f"listening on {settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
