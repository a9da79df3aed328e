"""Tests for the editing session holding the current document."""

from pathlib import Path

import pytest

from conftest import CRAMFS, tailoring
from xtailor.exceptions import (
    MalformedDocumentError,
    MissingIdrefError,
    MissingProfileError,
    NoDocumentError,
)
from xtailor.parser import SAMPLE_XML
from xtailor.session import EditingSession


def test_new_session_has_no_document() -> None:
    """Operations before the first load report the missing document."""

    session = EditingSession()

    assert session.document is None
    with pytest.raises(NoDocumentError):
        session.export()
    with pytest.raises(NoDocumentError):
        session.search("x")


def test_failed_first_load_leaves_no_document() -> None:
    """A failed first load keeps the session empty."""

    session = EditingSession()

    with pytest.raises(MalformedDocumentError):
        session.load("<not-xml")

    assert session.document is None


def test_failed_reimport_keeps_prior_document() -> None:
    """A failed parse never discards the loaded document."""

    session = EditingSession()
    original = session.load_sample()

    with pytest.raises(MalformedDocumentError):
        session.load("<Tailoring>")
    with pytest.raises(MissingProfileError):
        session.load("<Tailoring/>")

    assert session.document is original


def test_load_replaces_document_wholesale() -> None:
    """Every successful load installs a new document."""

    session = EditingSession()
    first = session.load_sample()
    session.add_item("rule", "extra")

    second = session.load(tailoring('<select idref="only" selected="true"/>'))

    assert second is not first
    assert session.document is second
    assert [item.idref for item in second.items] == ["only"]


def test_load_file(tmp_path: Path) -> None:
    """Documents can be loaded from disk."""

    path = tmp_path / "upload.xml"
    path.write_text(SAMPLE_XML, encoding="utf-8")

    doc = EditingSession().load_file(path)

    assert len(doc.items) == 3


def test_edit_operations_and_export() -> None:
    """Session edits flow through to the exported XML."""

    session = EditingSession()
    doc = session.load_sample()
    rule = doc.items[0]

    assert session.update_field(rule.item_id, "severity", "low")
    added = session.add_item("variable", "var_x", value="10", comment="X")
    assert session.delete_item(doc.items[2].item_id)

    with pytest.raises(MissingIdrefError):
        session.add_item("rule", "")

    xml = session.export()
    assert f'<refine-rule idref="{CRAMFS}" severity="low"/>' in xml
    assert '<!--X-->\n    <set-value idref="var_x">10</set-value>' in xml
    assert "squashfs" not in xml
    assert doc.items[0] is added
    assert [item.idref for item in session.search("VAR_X")] == ["var_x"]


def test_load_file_rejects_non_utf8_and_keeps_document(
    tmp_path: Path,
) -> None:
    """An unreadable file leaves the loaded document untouched."""

    path = tmp_path / "latin1.xml"
    path.write_bytes("<Tailoring>\xe9</Tailoring>".encode("latin-1"))
    session = EditingSession()
    original = session.load_sample()

    with pytest.raises(MalformedDocumentError):
        session.load_file(path)

    assert session.document is original
