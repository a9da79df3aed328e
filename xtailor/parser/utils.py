"""Helpers shared by the XML parser and the item classes."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Iterator

from lxml import etree

from .types import SEVERITY_CHOICES, SEVERITY_DEFAULT

logger = logging.getLogger(__name__)

# Process-wide source of item identities.
_ITEM_IDS: Iterator[int] = itertools.count(1)

# Accepted spellings of xsd:boolean in ``select/@selected``.
_BOOLEAN_VALUES = {"true": "true", "1": "true", "false": "false", "0": "false"}


def next_item_id() -> int:
    """Return a fresh session-local item identity."""

    return next(_ITEM_IDS)


def _local_name(node: Any) -> str | None:
    """Return the tag of ``node`` without its namespace.

    Comments and processing instructions yield ``None``.
    """

    if not isinstance(node.tag, str):
        return None
    return etree.QName(node).localname


def _find_first(root: Any, name: str) -> Any | None:
    """Return the first element named ``name`` in document order.

    The search includes ``root`` itself and matches on the local name, so
    both ``<title>`` and ``<xccdf:title>`` are found.
    """

    for element in root.iter(tag=etree.Element):
        if _local_name(element) == name:
            return element
    return None


def _text_content(element: Any) -> str:
    """Return all text inside ``element``, like the DOM ``textContent``."""

    # XPath string value skips comments and processing instructions.
    return str(element.xpath("string()"))


def _normalize_selected(raw: str | None, idref: str) -> str:
    """Map a ``selected`` attribute onto the model's selection choices."""

    # A select without the attribute deselects the rule.
    if raw is None:
        return "false"

    value = _BOOLEAN_VALUES.get(raw.strip().lower())
    if value is None:
        logger.warning(
            "Unrecognized selected=%r for %s; treating as false", raw, idref
        )
        return "false"
    return value


def _normalize_severity(raw: str | None, idref: str) -> str:
    """Map a ``severity`` attribute onto the model's severity choices."""

    if raw is None:
        logger.warning("refine-rule for %s has no severity", idref)
        return SEVERITY_DEFAULT

    value = raw.strip().lower()
    if value not in SEVERITY_CHOICES:
        logger.warning(
            "Unsupported severity=%r for %s; using default", raw, idref
        )
        return SEVERITY_DEFAULT
    return value
