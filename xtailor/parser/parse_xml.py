"""Parse tailoring XML into a ``TailoringDocument``."""

from __future__ import annotations

import logging
from typing import Any

from lxml import etree

from xtailor.exceptions import MalformedDocumentError, MissingProfileError

from .rule_item import RuleItem
from .tailoring_document import TailoringDocument
from .types import ItemList, RuleIndex
from .utils import (
    _find_first,
    _local_name,
    _normalize_selected,
    _normalize_severity,
    _text_content,
)
from .variable_item import VariableItem

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_TITLE = "Unknown Profile"


def _xml_parser() -> etree.XMLParser:
    """Return a parser that keeps comments and never fetches entities."""

    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=False,
    )


def _upsert_rule(
    rules: RuleIndex, items: ItemList, idref: str, comment: str | None
) -> RuleItem:
    """Return the rule item for ``idref``, creating it when missing.

    A new item is appended to ``items`` and receives ``comment``; an existing
    item keeps both its position and its comment.
    """

    rule = rules.get(idref)
    if rule is None:
        rule = RuleItem(idref=idref, comment=comment or "")
        rules[idref] = rule
        items.append(rule)
    return rule


def _parse_items(profile: Any) -> ItemList:
    """Collect rule and variable items from the children of ``profile``.

    Args:
        profile: The ``Profile`` element.

    Returns:
        Items in order of first occurrence.
    """

    items: ItemList = []
    rules: RuleIndex = {}

    # A comment describes the next recognized item, not the next node.
    pending_comment: str | None = None

    for node in profile:
        if node.tag is etree.Comment:
            pending_comment = (node.text or "").strip()
            continue

        name = _local_name(node)
        idref = node.get("idref") if name is not None else None
        if not idref:
            continue

        if name == "select":
            rule = _upsert_rule(rules, items, idref, pending_comment)
            rule.selected = _normalize_selected(node.get("selected"), idref)
            pending_comment = None
        elif name == "refine-rule":
            # Creates an unset selection when no select preceded it.
            rule = _upsert_rule(rules, items, idref, pending_comment)
            rule.severity = _normalize_severity(node.get("severity"), idref)
            pending_comment = None
        elif name == "set-value":
            # Variables are never merged, even when the idref repeats.
            items.append(
                VariableItem(
                    idref=idref,
                    value=_text_content(node),
                    comment=pending_comment or "",
                )
            )
            pending_comment = None

    return items


def parse_xml(text: str) -> TailoringDocument:
    """Parse tailoring XML into structured data.

    Args:
        text: Raw XML content of the tailoring file.

    Returns:
        The parsed document.

    Raises:
        MalformedDocumentError: ``text`` is not well-formed XML.
        MissingProfileError: the document has no ``Profile`` element.
    """

    try:
        # lxml rejects str input that carries an encoding declaration.
        root = etree.fromstring(text.encode("utf-8"), _xml_parser())
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise MalformedDocumentError(
            "Failed to parse XML", {"reason": exc}
        ) from exc

    # Document level metadata; missing elements are not an error.
    benchmark = _find_first(root, "benchmark")
    version = _find_first(root, "version")
    benchmark_href = benchmark.get("href", "") if benchmark is not None else ""
    version_text = _text_content(version) if version is not None else ""

    profile = _find_first(root, "Profile")
    if profile is None:
        raise MissingProfileError("No Profile found in XML")

    title = _find_first(profile, "title")
    description = _find_first(profile, "description")
    title_text = (
        _text_content(title) if title is not None else DEFAULT_PROFILE_TITLE
    )

    document = TailoringDocument(
        benchmark_href=benchmark_href,
        version_text=version_text,
        profile_id=profile.get("id", ""),
        profile_extends=profile.get("extends", ""),
        profile_title=title_text,
        profile_description=(
            _text_content(description) if description is not None else ""
        ),
        items=_parse_items(profile),
    )

    logger.debug(
        "Parsed profile %s with %d items",
        document.profile_id,
        len(document.items),
    )
    return document
