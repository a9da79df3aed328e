"""Import, inspect and export the document being edited."""

from __future__ import annotations

import os
from pathlib import Path
from tempfile import NamedTemporaryFile

import yaml  # type: ignore[import-untyped]
from fastapi import (  # type: ignore[import-not-found]
    APIRouter,
    BackgroundTasks,
    File,
    HTTPException,
    Query,
    Response,
    UploadFile,
)
from fastapi.responses import (  # type: ignore[import-not-found]
    FileResponse,
    JSONResponse,
    PlainTextResponse,
    RedirectResponse,
)

from xtailor.exceptions import ParseError
from xtailor.json_utils import document_to_dict
from xtailor.serializer import EXPORT_FILENAME, EXPORT_MEDIA_TYPE
from xtailor.xlsx import write_workbook

from ..utils import get_session, http_error, reset_session

router = APIRouter()


def _summary() -> dict[str, object]:
    """Return identifying details of the current document."""

    doc = get_session().require_document()
    return {
        "profile_id": doc.profile_id,
        "profile_title": doc.profile_title,
        "items": len(doc.items),
    }


@router.get("/document")
async def get_document(
    background_tasks: BackgroundTasks,
    format: str = Query(default="json", enum=["json", "yaml", "xlsx"]),
) -> Response:
    """Return the current document in the requested format.

    Args:
        background_tasks: Used to remove the temporary workbook.
        format: Desired output format.

    Returns:
        The structured document.
    """

    doc = get_session().require_document()

    # Return JSON when requested.
    if format == "json":
        return JSONResponse(document_to_dict(doc))

    # Return YAML output.
    if format == "yaml":
        text = yaml.safe_dump(
            document_to_dict(doc), allow_unicode=True, sort_keys=False
        )
        return PlainTextResponse(text, media_type="application/x-yaml")

    # Prepare XLSX output by writing to a temporary file.
    tmp = NamedTemporaryFile(suffix=".xlsx", delete=False)
    tmp.close()
    write_workbook(doc, Path(tmp.name))

    # Schedule file deletion after the response is sent.
    background_tasks.add_task(os.unlink, tmp.name)

    return FileResponse(tmp.name, filename="tailoring.xlsx")


@router.post("/import")
async def import_document(
    file: UploadFile = File(...),
    redirect: bool = Query(default=False),
) -> Response:
    """Replace the current document with an uploaded tailoring file.

    Args:
        file: Uploaded XML file, read as UTF-8.
        redirect: Send the browser back to the editor page on success.

    Returns:
        A summary of the loaded document, or a redirect to ``/``.
    """

    content = await file.read()
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=400, detail="File is not valid UTF-8 text"
        ) from exc

    # A failed parse keeps the previously loaded document.
    try:
        get_session().load(text)
    except ParseError as exc:
        raise http_error(exc) from exc

    if redirect:
        return RedirectResponse("/", status_code=303)
    return JSONResponse(_summary())


@router.get("/export")
async def export_document() -> Response:
    """Serve the current document as a tailoring XML download."""

    content = get_session().export()
    return Response(
        content,
        media_type=EXPORT_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'
        },
    )


@router.post("/reset")
async def reset_document() -> JSONResponse:
    """Reload the initial document, discarding all edits."""

    reset_session()
    return JSONResponse(_summary())
