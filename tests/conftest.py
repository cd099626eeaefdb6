import textwrap
from pathlib import Path

import pytest
from fastapi import FastAPI

from livesite import dependencies as deps
from livesite.routers import pages, reload
from livesite.schemas.content import Post
from livesite.services.broadcaster import ReloadBroadcaster
from livesite.services.page_service import PageService
from livesite.state import ContentSnapshot, ContentStore

LAYOUT = "<html><body>{{ banner }}<main>{{ content }}</main><ul>{{ posts }}</ul></body></html>"


def write_post(posts_dir: Path, name: str, text: str) -> Path:
    path = posts_dir / f"{name}.md"
    path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return path


def post_text(title: str, date: str, slug: str, body: str = "Body") -> str:
    return f"---\ntitle: {title}\ndate: {date}\nslug: {slug}\n---\n{body}\n"


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """A complete content directory with one post and an HTML home page."""
    content = tmp_path / "content"
    content.mkdir()
    (content / "banner.html").write_text("<header>Banner</header>")
    (content / "layout.html").write_text(LAYOUT)
    (content / "home.html").write_text("<p>Hi</p>")
    (content / "not_found.html").write_text("Missing: {{slug}}")

    posts = content / "posts"
    posts.mkdir()
    write_post(posts, "hello", post_text("Hello", "2025-01-01", "hello", "# H"))

    static = content / "static"
    static.mkdir()
    (static / "site.css").write_text("body { margin: 0; }")
    (static / "favicon.ico").write_bytes(b"\x00\x00\x01\x00")
    return content


def make_snapshot(**overrides) -> ContentSnapshot:
    fields = {
        "banner_html": "<header>Banner</header>",
        "layout_html": LAYOUT,
        "home_html": "<p>Hi</p>",
        "not_found_html": "Missing: {{slug}}",
        "posts": (),
    }
    fields.update(overrides)
    return ContentSnapshot(**fields)


def make_app(
    store: ContentStore,
    posts_dir: Path,
    broadcaster: ReloadBroadcaster | None = None,
) -> FastAPI:
    app = FastAPI()
    app.dependency_overrides[deps.get_page_service] = lambda: PageService(
        store=store, posts_dir=posts_dir
    )
    app.dependency_overrides[deps.get_broadcaster] = lambda: broadcaster or ReloadBroadcaster()
    app.include_router(pages.router)
    app.include_router(reload.router)
    return app


class FakeWatcher:
    """Stand-in for ContentWatcher that replays prepared batches."""

    def __init__(self, batches, failed: bool = False):
        self._batches = list(batches)
        self.failed = failed

    async def batches(self):
        for batch in self._batches:
            yield batch


class RecordingBroadcaster(ReloadBroadcaster):
    """Broadcaster that remembers the store version at each publish."""

    def __init__(self, store: ContentStore):
        super().__init__()
        self.store = store
        self.published_versions = []

    def publish(self) -> int:
        self.published_versions.append(self.store.version)
        return super().publish()


def sample_posts():
    return (Post(title="A", slug="a"), Post(title="B", slug="b"))
