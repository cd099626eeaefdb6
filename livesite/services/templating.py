import html
from typing import Iterable

from livesite.schemas.content import Post

# Injected before </body> in development mode.
HOT_RELOAD_SCRIPT = """
<script>
    const socket = new WebSocket(
        (window.location.protocol === "https:" ? "wss://" : "ws://") + window.location.host + "/ws"
    );
    socket.onmessage = (event) => {
        if (event.data === "reload") {
            window.location.reload();
        }
    };
</script>
"""


def render_posts_list(posts: Iterable[Post]) -> str:
    return "".join(
        f'<li><a href="/posts/{post.slug}" class="text-blue no-underline">{post.title}</a></li>'
        for post in posts
    )


def render_with_layout(
    layout: str,
    banner: str,
    content: str,
    posts: Iterable[Post],
    is_development: bool = False,
) -> str:
    """
    Fill the layout slots by literal replacement.

    No escaping and no expression language: authored HTML is trusted and
    unknown placeholders are left as they are.
    """
    page = (
        layout.replace("{{ banner }}", banner)
        .replace("{{ content }}", content)
        .replace("{{ posts }}", render_posts_list(posts))
    )
    if is_development:
        page = inject_reload_script(page)
    return page


def inject_reload_script(page: str) -> str:
    return page.replace("</body>", f"{HOT_RELOAD_SCRIPT}</body>")


def fill_not_found(not_found_html: str, slug: str) -> str:
    # slug comes from the request URL, so it is escaped
    return not_found_html.replace("{{slug}}", html.escape(slug))


def render_post_body(title: str, date: str, body_html: str) -> str:
    return (
        f"<h1>{title}</h1>"
        f'<p style="font-size: smaller; color: #888;">{date}</p>'
        f"{body_html}"
    )


def render_missing_front_matter(body_html: str) -> str:
    return f"<h1>Error: No Front Matter</h1>{body_html}"
