import asyncio
import concurrent.futures
import logging
import threading
from pathlib import Path
from typing import AsyncIterator, Iterable, List, Optional, Tuple

from watchfiles import Change, watch

from livesite.services.broadcaster import ReloadBroadcaster
from livesite.services.content_loader import refresh_content
from livesite.state import ContentStore

logger = logging.getLogger(__name__)

# Create / modify / remove; anything else (e.g. metadata-only) is ignored
ACCEPTED_CHANGES = {Change.added, Change.modified, Change.deleted}

# Upper bound on one batch while changes keep arriving without a quiet window
MAX_BATCH_MS = 1600


class WatcherError(RuntimeError):
    """The content directory could not be watched."""


def is_editor_temp_file(path) -> bool:
    """Emacs lock files (.#name) and backup files (name~)."""
    name = Path(path).name
    return name.startswith(".#") or name.endswith("~")


def relevant_changes(changes: Iterable[Tuple[Change, str]]) -> List[Path]:
    """Paths of the accepted changes in one debounced batch."""
    paths = []
    for change, path in changes:
        if change not in ACCEPTED_CHANGES:
            continue
        if is_editor_temp_file(path):
            continue
        paths.append(Path(path))
    return paths


class ContentWatcher:
    """
    Watches the content directory recursively in a background thread.

    A batch closes once no new change has arrived for `debounce_ms`, so a
    burst of saves becomes a single batch.

    Each debounced batch with at least one relevant change is handed to the
    event loop through a bounded queue; the watcher thread blocks until the
    consumer has room, so batches are processed one at a time.
    """

    def __init__(self, content_dir: Path, debounce_ms: int = 200):
        self._content_dir = content_dir
        self._debounce_ms = debounce_ms
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self.failed = False

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the watcher thread. Must be called from the event loop."""
        if self.is_running:
            return
        if not self._content_dir.is_dir():
            raise WatcherError(
                f"Failed to start watching content directory '{self._content_dir}'"
            )

        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue(maxsize=1)
        self._stop_event.clear()
        self.failed = False
        self._thread = threading.Thread(
            target=self._watch_loop, name="ContentWatcher", daemon=True
        )
        self._thread.start()
        logger.info(f"Watching {self._content_dir} for changes")

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None
        logger.info("Content watcher stopped")

    async def batches(self) -> AsyncIterator[List[Path]]:
        """Yield one list of changed paths per accepted batch."""
        while self.is_running or (self._queue is not None and not self._queue.empty()):
            try:
                batch = await asyncio.wait_for(self._queue.get(), timeout=0.5)
            except asyncio.TimeoutError:
                continue
            yield batch

    def _watch_loop(self) -> None:
        try:
            for changes in watch(
                self._content_dir,
                watch_filter=None,
                debounce=max(MAX_BATCH_MS, self._debounce_ms),
                step=self._debounce_ms,
                stop_event=self._stop_event,
                recursive=True,
            ):
                paths = relevant_changes(changes)
                if not paths:
                    continue
                logger.debug(
                    f"Relevant file change detected: {[str(p) for p in paths]}"
                )
                self._send(paths)
        except Exception as e:
            self.failed = True
            logger.error(f"Watcher error: {e}")

    def _send(self, paths: List[Path]) -> None:
        future = asyncio.run_coroutine_threadsafe(self._queue.put(paths), self._loop)
        while not self._stop_event.is_set():
            try:
                future.result(timeout=0.5)
                return
            except concurrent.futures.TimeoutError:
                continue
        future.cancel()


async def run_reload_loop(
    watcher: ContentWatcher,
    store: ContentStore,
    broadcaster: ReloadBroadcaster,
    content_dir: Path,
) -> None:
    """Refresh then broadcast, once per batch, strictly in order."""
    async for _paths in watcher.batches():
        logger.info("Content change detected, reloading content and sending signal...")
        await refresh_content(store, content_dir)
        broadcaster.publish()

    if watcher.failed:
        logger.error("Content watcher stopped; live reload is no longer active")
