"""Write a ``TailoringDocument`` back to tailoring XML."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable
from xml.sax.saxutils import escape as xml_escape

from xtailor.parser import RuleItem, TailoringDocument, VariableItem
from xtailor.parser.types import SELECTION_UNSET, SEVERITY_DEFAULT

XCCDF_NS = "http://checklists.nist.gov/xccdf/1.2"
XHTML_NS = "http://www.w3.org/1999/xhtml"
TAILORING_ID = "xccdf_scap-workbench_tailoring_default"

# Download metadata for exported documents.
EXPORT_FILENAME = "tailoring_custom.xml"
EXPORT_MEDIA_TYPE = "application/xml"

# Characters a parser would otherwise normalize away on re-import.
_TEXT_ENTITIES = {"\r": "&#13;"}
_ATTR_ENTITIES = {
    '"': "&quot;",
    "\n": "&#10;",
    "\r": "&#13;",
    "\t": "&#9;",
}


def _escape_text(value: str) -> str:
    """Escape markup characters and carriage returns in element text."""

    return xml_escape(value, _TEXT_ENTITIES)


def _escape_attr(value: str) -> str:
    """Escape markup characters, quotes and whitespace in attributes."""

    return xml_escape(value, _ATTR_ENTITIES)


def _raw(value: str) -> str:
    return value


def format_timestamp(moment: datetime | None = None) -> str:
    """Return ``moment`` (default: now) as UTC ISO-8601 with milliseconds.

    Example: ``2025-10-10T08:37:35.000Z``.
    """

    moment = moment or datetime.now(timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _rule_lines(item: RuleItem, attr: Callable[[str], str]) -> list[str]:
    """Return the markup for a rule item, possibly empty."""

    lines: list[str] = []
    idref = attr(item.idref)

    # An unset selection only carries the refinement, if any.
    if item.selected != SELECTION_UNSET:
        lines.append(
            f'    <select idref="{idref}" selected="{attr(item.selected)}"/>'
        )
    if item.severity != SEVERITY_DEFAULT:
        lines.append(
            f'    <refine-rule idref="{idref}" '
            f'severity="{attr(item.severity)}"/>'
        )
    return lines


def _variable_lines(
    item: VariableItem,
    attr: Callable[[str], str],
    text: Callable[[str], str],
) -> list[str]:
    """Return the markup for a variable item."""

    return [
        f'    <set-value idref="{attr(item.idref)}">'
        f"{text(item.value)}</set-value>"
    ]


def serialize(
    doc: TailoringDocument,
    *,
    timestamp: datetime | None = None,
    escape: bool = True,
) -> str:
    """Render ``doc`` as tailoring XML.

    The ``version`` element is always stamped with a fresh time. Rule items
    with neither a selection nor a severity override produce no markup, but
    their comment is still written and attaches to the next item when the
    output is parsed again.

    Args:
        doc: Document to render.
        timestamp: Time written to ``version/@time``; defaults to now.
        escape: Escape ``&``, ``<``, ``>`` and ``"`` in values, writing
            whitespace that XML would normalize as character references.
            Passing ``False`` writes values verbatim, which yields
            malformed XML for values containing markup characters.

    Returns:
        The XML text, without a trailing newline.
    """

    attr = _escape_attr if escape else _raw
    text = _escape_text if escape else _raw
    xhtml = f'xmlns:xhtml="{XHTML_NS}" xml:lang="en-US" override="true"'

    lines = [
        "<?xml version='1.0' encoding='UTF-8'?>",
        f'<Tailoring xmlns="{XCCDF_NS}" id="{TAILORING_ID}">',
        f'  <benchmark href="{attr(doc.benchmark_href)}"/>',
        f'  <version time="{format_timestamp(timestamp)}">'
        f"{text(doc.version_text)}</version>",
        f'  <Profile id="{attr(doc.profile_id)}" '
        f'extends="{attr(doc.profile_extends)}">',
        f"    <title {xhtml}>{text(doc.profile_title)}</title>",
        f"    <description {xhtml}>"
        f"{text(doc.profile_description)}</description>",
    ]

    for item in doc.items:
        if isinstance(item, RuleItem):
            markup = _rule_lines(item, attr)
        else:
            markup = _variable_lines(item, attr, text)

        # Comments are written verbatim; they cannot be escaped. A rule
        # without markup still leaves its comment behind.
        if item.comment:
            lines.append(f"    <!--{item.comment}-->")
        lines.extend(markup)

    lines.append("  </Profile>")
    lines.append("</Tailoring>")
    return "\n".join(lines)
