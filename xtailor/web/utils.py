"""Session state and rendering helpers for web routes."""

from __future__ import annotations

import html
import logging
import os
from pathlib import Path
from typing import Any

from fastapi import HTTPException  # type: ignore[import-not-found]

from xtailor.exceptions import ParseError, TailoringError
from xtailor.parser import RuleItem, TailoringDocument
from xtailor.parser.types import SELECTION_CHOICES, SEVERITY_CHOICES
from xtailor.session import EditingSession

logger = logging.getLogger(__name__)

JSONDict = dict[str, Any]

# The one document edited through the web interface.
_SESSION: EditingSession | None = None


def initial_document_path() -> Path | None:
    """Return the file the session starts with, if configured.

    The ``XTAILOR_INITIAL_DOCUMENT`` environment variable names a tailoring
    file; when it is unset the embedded sample is used instead.
    """

    value = os.environ.get("XTAILOR_INITIAL_DOCUMENT")
    return Path(value) if value else None


def reset_session() -> EditingSession:
    """Replace the session with one holding the initial document.

    An initial document that cannot be read or parsed is logged and the
    embedded sample is loaded instead.
    """

    global _SESSION

    session = EditingSession()
    path = initial_document_path()
    if path is not None:
        logger.info("Loading initial document from %s", path)
        try:
            session.load_file(path)
        except (OSError, ParseError) as exc:
            logger.error(
                "Cannot load initial document %s (%s); using the sample",
                path,
                exc,
            )
    if session.document is None:
        session.load_sample()

    _SESSION = session
    return session


def get_session() -> EditingSession:
    """Return the shared session, creating it on first use."""

    if _SESSION is None:
        return reset_session()
    return _SESSION


def http_error(exc: TailoringError, status_code: int = 400) -> HTTPException:
    """Convert a model error into an HTTP error for the client."""

    logger.warning("Rejected request: %s", exc)
    return HTTPException(status_code=status_code, detail=str(exc))


def _options(choices: tuple[str, ...], current: str) -> str:
    """Render ``<option>`` tags marking ``current`` as selected."""

    return "".join(
        f"<option value='{choice}'"
        f"{' selected' if choice == current else ''}>{choice}</option>"
        for choice in choices
    )


def render_item_row(item: Any) -> str:
    """Render one editable table row for ``item``."""

    item_id = item.item_id
    comment = html.escape(item.comment, quote=True)
    idref = html.escape(item.idref)

    # Rules edit selection and severity, variables edit their value.
    if isinstance(item, RuleItem):
        controls = (
            f"<td><select onchange="
            f"'edit({item_id}, \"severity\", this.value)'>"
            f"{_options(SEVERITY_CHOICES, item.severity)}</select></td>"
            f"<td><select onchange="
            f"'edit({item_id}, \"selected\", this.value)'>"
            f"{_options(SELECTION_CHOICES, item.selected)}</select></td>"
        )
    else:
        value = html.escape(item.value, quote=True)
        controls = (
            "<td>N/A</td>"
            f"<td><input value=\"{value}\" "
            f"onchange='edit({item_id}, \"value\", this.value)'/></td>"
        )

    return (
        f"<tr id='item-{item_id}'>"
        f"<td>{'Rule' if isinstance(item, RuleItem) else 'Var'}</td>"
        f"<td><input value=\"{comment}\" "
        f"onchange='edit({item_id}, \"comment\", this.value)'/>"
        f"<br/><code>{idref}</code></td>"
        f"{controls}"
        f"<td><button onclick='removeItem({item_id})'>Delete</button></td>"
        "</tr>"
    )


_SCRIPT = """
<script>
async function send(method, url, body) {
  const response = await fetch(url, {
    method: method,
    headers: {'Content-Type': 'application/json'},
    body: body === undefined ? undefined : JSON.stringify(body),
  });
  if (!response.ok) {
    const data = await response.json();
    alert(data.detail);
  }
  return response;
}
function edit(id, field, value) {
  send('PATCH', '/items/' + id, {field: field, value: value});
}
async function removeItem(id) {
  if (!confirm('Are you sure you want to delete this rule?')) return;
  const response = await send('DELETE', '/items/' + id);
  if (response.ok) document.getElementById('item-' + id).remove();
}
async function addItem(form) {
  const data = Object.fromEntries(new FormData(form));
  const response = await send('POST', '/items', data);
  if (response.ok) location.reload();
  return false;
}
</script>
"""


def render_page(doc: TailoringDocument, items: Any, query: str) -> str:
    """Render the editor page for ``doc`` showing ``items``.

    Args:
        doc: Current tailoring document.
        items: Items to list, usually filtered by ``query``.
        query: Current search text.

    Returns:
        HTML page.
    """

    rows = "".join(render_item_row(item) for item in items)
    if not rows:
        rows = (
            "<tr><td colspan='5'>"
            "No rules found matching your search.</td></tr>"
        )

    parts = [
        "<html><head><title>XCCDF Tailoring Editor</title></head><body>",
        f"<h1>{html.escape(doc.profile_title)}</h1>",
        "<p>Base Profile ID: "
        f"<code>{html.escape(doc.profile_extends)}</code></p>",
        f"<p>Benchmark: {html.escape(doc.benchmark_href)}</p>",
        f"<p>Version: {html.escape(doc.version_text)}</p>",
        f"<p id='description'>{html.escape(doc.profile_description)}</p>",
        "<form method='post' action='/import?redirect=true' "
        "enctype='multipart/form-data'>"
        "<input type='file' name='file' accept='.xml'/>"
        "<button type='submit'>Import XML</button></form>",
        "<a href='/export'>Export XML</a>",
        "<form method='get' action='/'>"
        "<input name='q' type='text' "
        f"value=\"{html.escape(query, quote=True)}\" "
        "placeholder='Search rules by ID or description...'/>"
        "<button type='submit'>Search</button></form>",
        "<form onsubmit='return addItem(this)'>"
        "<select name='kind'><option value='rule'>Rule</option>"
        "<option value='variable'>Variable</option></select>"
        "<input name='idref' "
        "placeholder='xccdf_org.ssgproject.content_rule_...'/>"
        "<input name='comment' placeholder='Description (comment)'/>"
        "<input name='value' value='true'/>"
        f"<select name='severity'>{_options(SEVERITY_CHOICES, 'default')}"
        "</select><button type='submit'>Add New Rule</button></form>",
        "<table><tr><th>Type</th><th>Rule Description &amp; ID</th>"
        "<th>Severity</th><th>Value</th><th>Actions</th></tr>",
        rows,
        "</table>",
        _SCRIPT,
        "</body></html>",
    ]
    return "".join(parts)
