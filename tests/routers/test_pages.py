from fastapi.testclient import TestClient

from livesite.state import ContentStore
from tests.conftest import make_app, make_snapshot, post_text, sample_posts, write_post


def test_homepage_renders_home_and_posts(tmp_path):
    store = ContentStore(
        make_snapshot(
            layout_html="<body>{{ content }}<ul>{{ posts }}</ul></body>",
            home_html="<p>Hi</p>",
            posts=sample_posts(),
        )
    )
    client = TestClient(make_app(store, tmp_path))

    res = client.get("/")

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert "<p>Hi</p>" in res.text
    assert (
        '<li><a href="/posts/a" class="text-blue no-underline">A</a></li>'
        '<li><a href="/posts/b" class="text-blue no-underline">B</a></li>'
    ) in res.text


def test_post_page(tmp_path):
    write_post(tmp_path, "hello", post_text("Hello", "2025-01-01", "hello", "# H"))
    client = TestClient(make_app(ContentStore(make_snapshot()), tmp_path))

    res = client.get("/posts/hello")

    assert res.status_code == 200
    assert "<h1>Hello</h1>" in res.text
    assert '<p style="font-size: smaller; color: #888;">2025-01-01</p>' in res.text
    assert "<h1>H</h1>" in res.text


def test_missing_post_renders_not_found_with_200(tmp_path):
    store = ContentStore(make_snapshot(not_found_html="Missing: {{slug}}"))
    client = TestClient(make_app(store, tmp_path))

    res = client.get("/posts/ghost")

    assert res.status_code == 200
    assert "Missing: ghost" in res.text


def test_homepage_reflects_installed_snapshot(tmp_path):
    store = ContentStore(make_snapshot(home_html="<p>Old</p>"))
    client = TestClient(make_app(store, tmp_path))
    assert "<p>Old</p>" in client.get("/").text

    store.install(make_snapshot(home_html="<p>New</p>"))

    assert "<p>New</p>" in client.get("/").text


def test_unexpected_error_returns_500(tmp_path):
    class BrokenStore(ContentStore):
        def snapshot(self):
            raise RuntimeError("boom")

    client = TestClient(make_app(BrokenStore(make_snapshot()), tmp_path))

    res = client.get("/")
    assert res.status_code == 500
    assert res.json()["detail"] == "Failed to render page"
