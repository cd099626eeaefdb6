import threading
from dataclasses import dataclass
from typing import Tuple

from livesite.schemas.content import Post


@dataclass(frozen=True)
class ContentSnapshot:
    """One coherent disk scan of the content directory."""

    banner_html: str
    layout_html: str
    home_html: str
    not_found_html: str
    posts: Tuple[Post, ...] = ()


class ContentStore:
    """
    Process-wide holder of the current ContentSnapshot.

    Snapshots are immutable and replaced wholesale, so a reader that calls
    snapshot() once per request never sees fields from two different loads.
    """

    def __init__(self, snapshot: ContentSnapshot, is_development: bool = False):
        self._snapshot = snapshot
        self._write_lock = threading.Lock()
        self._version = 0
        self.is_development = is_development

    def snapshot(self) -> ContentSnapshot:
        return self._snapshot

    @property
    def version(self) -> int:
        """Number of snapshots installed since startup."""
        return self._version

    def install(self, snapshot: ContentSnapshot) -> None:
        with self._write_lock:
            self._snapshot = snapshot
            self._version += 1
