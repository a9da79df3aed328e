"""The single document being edited, with its edit operations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from xtailor import mutators
from xtailor.exceptions import NoDocumentError, ParseError
from xtailor.parser import (
    SAMPLE_XML,
    TailoringDocument,
    parse_xml,
    read_text,
)
from xtailor.parser.types import SEVERITY_DEFAULT, TailoringItem
from xtailor.serializer import serialize

logger = logging.getLogger(__name__)


class EditingSession:
    """Hold at most one tailoring document and apply edits to it.

    A successful load replaces the document wholesale. A failed load leaves
    the previous document in place and re-raises the parse error.
    """

    def __init__(self, document: TailoringDocument | None = None) -> None:
        self._document = document

    @property
    def document(self) -> TailoringDocument | None:
        """Return the current document, if one was loaded."""

        return self._document

    def require_document(self) -> TailoringDocument:
        """Return the current document or raise ``NoDocumentError``."""

        if self._document is None:
            raise NoDocumentError("No tailoring document loaded")
        return self._document

    def load(self, text: str) -> TailoringDocument:
        """Parse ``text`` and make it the current document.

        Args:
            text: Raw tailoring XML.

        Returns:
            The newly loaded document.
        """

        try:
            document = parse_xml(text)
        except ParseError as exc:
            logger.error("Failed to parse XML: %s", exc)
            raise

        self._document = document
        logger.info(
            "Loaded profile %s (%d items)",
            document.profile_id,
            len(document.items),
        )
        return document

    def load_file(self, path: Path) -> TailoringDocument:
        """Read ``path`` as UTF-8 and load it."""

        try:
            text = read_text(path)
        except ParseError as exc:
            logger.error("Failed to read %s: %s", path, exc)
            raise
        return self.load(text)

    def load_sample(self) -> TailoringDocument:
        """Load the embedded sample document."""

        return self.load(SAMPLE_XML)

    def update_field(self, item_id: int, field: str, value: str) -> bool:
        """Replace a field of an item; see ``mutators.update_field``."""

        items = self.require_document().items
        return mutators.update_field(items, item_id, field, value)

    def delete_item(self, item_id: int) -> bool:
        """Remove an item; see ``mutators.delete_item``."""

        return mutators.delete_item(self.require_document().items, item_id)

    def add_item(
        self,
        kind: str,
        idref: str,
        value: str | None = None,
        severity: str = SEVERITY_DEFAULT,
        comment: str = "",
    ) -> TailoringItem:
        """Prepend a new item; see ``mutators.add_item``."""

        return mutators.add_item(
            self.require_document().items,
            kind,
            idref,
            value=value,
            severity=severity,
            comment=comment,
        )

    def search(self, query: str) -> mutators.FilteredItems:
        """Return the items matching ``query``."""

        return mutators.filter_items(self.require_document().items, query)

    def export(self, **kwargs: Any) -> str:
        """Serialize the current document; keyword arguments go to
        ``serialize``."""

        return serialize(self.require_document(), **kwargs)
