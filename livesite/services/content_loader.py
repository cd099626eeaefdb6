import asyncio
import logging
from pathlib import Path
from typing import List

from livesite.schemas.content import Post
from livesite.services.front_matter import parse_front_matter, split_front_matter
from livesite.services.markdown_renderer import render_markdown_to_html
from livesite.state import ContentSnapshot, ContentStore

logger = logging.getLogger(__name__)


class ContentLoadError(RuntimeError):
    """The content directory could not be loaded at startup."""


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def load_home(content_dir: Path) -> str:
    """Rendered home fragment: home.md (front matter discarded) or home.html."""
    try:
        markdown = _read_text(content_dir / "home.md")
    except FileNotFoundError:
        return _read_text(content_dir / "home.html")

    _, body = split_front_matter(markdown)
    return render_markdown_to_html(body)


def load_post_index(posts_dir: Path) -> List[Post]:
    """Index every *.md file in posts_dir, in directory iteration order."""
    posts = []
    for path in posts_dir.iterdir():
        if path.suffix != ".md" or not path.is_file():
            continue
        front_matter, _ = parse_front_matter(_read_text(path), source=str(path))
        if front_matter is None:
            logger.warning(f"No front matter in {path}")
            posts.append(Post(title="Error", slug="error"))
            continue
        posts.append(Post(title=front_matter.title, slug=front_matter.slug))
    return posts


def load_content(content_dir: Path) -> ContentSnapshot:
    """
    Scan content_dir and build a fresh snapshot.

    Any I/O or decoding error aborts the whole load; a partially read
    directory never becomes a snapshot.
    """
    banner_html = _read_text(content_dir / "banner.html")
    layout_html = _read_text(content_dir / "layout.html")
    not_found_html = _read_text(content_dir / "not_found.html")
    home_html = load_home(content_dir)
    posts = load_post_index(content_dir / "posts")

    return ContentSnapshot(
        banner_html=banner_html,
        layout_html=layout_html,
        home_html=home_html,
        not_found_html=not_found_html,
        posts=tuple(posts),
    )


def load_initial_content(content_dir: Path) -> ContentSnapshot:
    try:
        snapshot = load_content(content_dir)
    except (OSError, ValueError) as e:
        raise ContentLoadError(
            f"Failed to load initial content files from '{content_dir}': {e}"
        ) from e
    logger.info(f"Loaded content from {content_dir} ({len(snapshot.posts)} posts)")
    return snapshot


async def refresh_content(store: ContentStore, content_dir: Path) -> bool:
    """Reload content_dir into store; on failure keep the previous snapshot."""
    logger.info("Reloading application content...")
    try:
        snapshot = await asyncio.to_thread(load_content, content_dir)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to reload content: {e}")
        return False

    store.install(snapshot)
    logger.info("Content successfully reloaded.")
    return True
