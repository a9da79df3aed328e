"""Root page rendering the editor."""

from __future__ import annotations

from fastapi import APIRouter, Query  # type: ignore[import-not-found]
from fastapi.responses import HTMLResponse  # type: ignore[import-not-found]

from ..utils import get_session, render_page

router = APIRouter()


@router.get("/")
async def editor_page(q: str = Query(default="")) -> HTMLResponse:
    """Render the editor, listing items that match ``q``."""

    session = get_session()
    doc = session.require_document()

    # Filtering is lazy; the page consumes it once while rendering.
    return HTMLResponse(render_page(doc, session.search(q), q))
