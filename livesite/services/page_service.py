import logging
from pathlib import Path
from typing import Optional

from livesite.services.front_matter import parse_front_matter
from livesite.services.markdown_renderer import render_markdown_to_html
from livesite.services.templating import (
    fill_not_found,
    render_missing_front_matter,
    render_post_body,
    render_with_layout,
)
from livesite.state import ContentSnapshot, ContentStore

logger = logging.getLogger(__name__)


class PageService:
    def __init__(self, store: ContentStore, posts_dir: Path):
        self.store = store
        self.posts_dir = posts_dir

    def render_home(self) -> str:
        snapshot = self.store.snapshot()
        return self._render_page(snapshot, snapshot.home_html)

    def render_post(self, slug: str) -> str:
        # One snapshot for the whole request, even if a refresh lands meanwhile
        snapshot = self.store.snapshot()

        markdown = self._read_post(slug)
        if markdown is None:
            logger.debug(f"Post not found: {slug}")
            body = fill_not_found(snapshot.not_found_html, slug)
            return self._render_page(snapshot, body)

        front_matter, text = parse_front_matter(markdown, source=f"posts/{slug}.md")
        body_html = render_markdown_to_html(text)
        if front_matter is None:
            body = render_missing_front_matter(body_html)
        else:
            body = render_post_body(front_matter.title, front_matter.date, body_html)
        return self._render_page(snapshot, body)

    def _read_post(self, slug: str) -> Optional[str]:
        path = self.posts_dir / f"{slug}.md"
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, ValueError):
            return None

    def _render_page(self, snapshot: ContentSnapshot, content: str) -> str:
        return render_with_layout(
            snapshot.layout_html,
            snapshot.banner_html,
            content,
            snapshot.posts,
            self.store.is_development,
        )
