"""FastAPI application for editing tailoring documents in a browser."""

from __future__ import annotations

from fastapi import FastAPI  # type: ignore[import-not-found]

from .routes.document import router as document_router
from .routes.items import router as items_router
from .routes.root import router as root_router

app = FastAPI(title="XCCDF Tailoring Editor")

app.include_router(root_router)
app.include_router(document_router)
app.include_router(items_router)
