"""List, add, edit and delete tailoring items."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query  # type: ignore
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]
from pydantic import BaseModel  # type: ignore[import-not-found]

from xtailor.exceptions import ValidationError
from xtailor.json_utils import item_to_dict

from ..utils import get_session, http_error

router = APIRouter()


class AddItemRequest(BaseModel):
    """Request body for adding an item."""

    kind: str = "rule"
    idref: str = ""
    value: str | None = None
    severity: str = "default"
    comment: str = ""


class UpdateRequest(BaseModel):
    """Request body for editing a field."""

    field: str
    value: str


@router.get("/items")
async def list_items(q: str = Query(default="")) -> JSONResponse:
    """Return items whose idref or comment contains ``q``."""

    matches = get_session().search(q)
    return JSONResponse([item_to_dict(item) for item in matches])


@router.post("/items", status_code=201)
async def add_item(payload: AddItemRequest) -> JSONResponse:
    """Prepend a new rule or variable to the document.

    Args:
        payload: Request payload describing the new item.

    Returns:
        The created item, including its session identity.
    """

    try:
        item = get_session().add_item(
            payload.kind,
            payload.idref,
            value=payload.value,
            severity=payload.severity,
            comment=payload.comment,
        )
    except ValidationError as exc:
        raise http_error(exc) from exc

    return JSONResponse(item_to_dict(item), status_code=201)


@router.patch("/items/{item_id}")
async def update_item(item_id: int, payload: UpdateRequest) -> JSONResponse:
    """Replace one field of an item.

    Args:
        item_id: Session identity of the item.
        payload: Field name and new value.

    Returns:
        The identity and the updated field.
    """

    try:
        found = get_session().update_field(
            item_id, payload.field, payload.value
        )
    except ValidationError as exc:
        raise http_error(exc) from exc

    if not found:
        raise HTTPException(status_code=404, detail="Item not found")
    return JSONResponse({"item_id": item_id, payload.field: payload.value})


@router.delete("/items/{item_id}")
async def delete_item(item_id: int) -> JSONResponse:
    """Remove an item from the document."""

    if not get_session().delete_item(item_id):
        raise HTTPException(status_code=404, detail="Item not found")
    return JSONResponse({"deleted": item_id})

