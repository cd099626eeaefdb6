import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from livesite import dependencies as deps
from livesite.services.page_service import PageService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def homepage(service: PageService = Depends(deps.get_page_service)):
    try:
        return service.render_home()
    except Exception as e:
        logger.error(f"Unexpected error rendering homepage: {e}")
        raise HTTPException(status_code=500, detail="Failed to render page")


@router.get("/posts/{slug}", response_class=HTMLResponse)
def render_post(slug: str, service: PageService = Depends(deps.get_page_service)):
    """Render a post; a missing post renders the not-found fragment with 200."""
    try:
        return service.render_post(slug)
    except Exception as e:
        logger.error(f"Unexpected error rendering post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to render post")
