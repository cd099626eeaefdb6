from fastapi import Depends
from fastapi.requests import HTTPConnection

from livesite.services.broadcaster import ReloadBroadcaster
from livesite.services.page_service import PageService
from livesite.settings import Settings, settings
from livesite.state import ContentStore


def get_settings(conn: HTTPConnection) -> Settings:
    """Settings the app was created with; the process default otherwise."""
    return getattr(conn.app.state, "settings", settings)


def get_store(conn: HTTPConnection) -> ContentStore:
    return conn.app.state.store


def get_broadcaster(conn: HTTPConnection) -> ReloadBroadcaster:
    return conn.app.state.broadcaster


def get_page_service(
    store: ContentStore = Depends(get_store),
    current_settings: Settings = Depends(get_settings),
):
    return PageService(store=store, posts_dir=current_settings.posts_path)
