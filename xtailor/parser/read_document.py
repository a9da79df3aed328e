"""Read a tailoring file from disk."""

from __future__ import annotations

import logging
from pathlib import Path

from xtailor.exceptions import MalformedDocumentError

from .parse_xml import parse_xml
from .tailoring_document import TailoringDocument

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    """Return the content of ``path`` decoded as UTF-8.

    Raises:
        MalformedDocumentError: the file is not valid UTF-8.
    """

    logger.debug("Reading tailoring file %s", path)
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedDocumentError(
            "File is not valid UTF-8 text", {"path": path}
        ) from exc


def read_document(path: Path) -> TailoringDocument:
    """Read a tailoring file as UTF-8 and parse it.

    Args:
        path: Location of the XML file.

    Returns:
        Parsed document structure.
    """

    return parse_xml(read_text(path))
