"""In-memory edits over the item list of a tailoring document."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from xtailor.exceptions import (
    DuplicateRuleError,
    InvalidFieldError,
    MissingIdrefError,
)
from xtailor.parser import RuleItem, VariableItem
from xtailor.parser.types import (
    KINDS,
    RULE,
    SEVERITY_DEFAULT,
    VARIABLE,
    ItemList,
    TailoringItem,
)

logger = logging.getLogger(__name__)

# Fields a user may replace, per item kind.
EDITABLE_FIELDS = {
    RULE: ("idref", "selected", "severity", "comment"),
    VARIABLE: ("idref", "value", "comment"),
}


def _find(items: ItemList, item_id: int) -> TailoringItem | None:
    """Return the item whose identity is ``item_id``."""

    return next((item for item in items if item.item_id == item_id), None)


def _require_idref(idref: str | None) -> str:
    """Return ``idref`` or raise when it is empty."""

    if not idref or not idref.strip():
        raise MissingIdrefError("Rule ID (idref) is required")
    return idref


def _has_rule(
    items: ItemList, idref: str, exclude: TailoringItem | None = None
) -> bool:
    """Return whether a rule item other than ``exclude`` uses ``idref``."""

    return any(
        isinstance(item, RuleItem) and item.idref == idref
        for item in items
        if item is not exclude
    )


def check_items(items: ItemList) -> None:
    """Ensure ``items`` holds non-empty idrefs and one rule per idref.

    Raises:
        MissingIdrefError: an item has an empty idref.
        DuplicateRuleError: two rule items share an idref.
    """

    seen: set[str] = set()
    for item in items:
        _require_idref(item.idref)
        if not isinstance(item, RuleItem):
            continue
        if item.idref in seen:
            raise DuplicateRuleError(
                "Rule already present", {"idref": item.idref}
            )
        seen.add(item.idref)


def update_field(
    items: ItemList, item_id: int, field: str, value: str
) -> bool:
    """Replace one field of the item identified by ``item_id``.

    Args:
        items: Items of the current document.
        item_id: Identity of the item to edit.
        field: Name of the field to replace.
        value: New value for the field.

    Returns:
        ``True`` when the item was found, ``False`` otherwise.

    Raises:
        InvalidFieldError: unknown field or a value outside its choices.
        MissingIdrefError: ``field`` is ``idref`` and ``value`` is empty.
    """

    item = _find(items, item_id)
    if item is None:
        logger.debug("No item with id %s; nothing to update", item_id)
        return False

    if field not in EDITABLE_FIELDS[item.kind]:
        raise InvalidFieldError(
            "Field cannot be edited", {"kind": item.kind, "field": field}
        )
    if field == "idref":
        _require_idref(value)
        if isinstance(item, RuleItem) and _has_rule(items, value, item):
            raise DuplicateRuleError("Rule already present", {"idref": value})

    try:
        # attrs validators reject selections and severities off the list.
        setattr(item, field, value)
    except ValueError as exc:
        raise InvalidFieldError(
            "Invalid value", {"field": field, "value": value}
        ) from exc
    return True


def delete_item(items: ItemList, item_id: int) -> bool:
    """Remove the item identified by ``item_id``.

    Returns:
        ``True`` when an item was removed.
    """

    item = _find(items, item_id)
    if item is None:
        return False
    items.remove(item)
    return True


def add_item(
    items: ItemList,
    kind: str,
    idref: str,
    value: str | None = None,
    severity: str = SEVERITY_DEFAULT,
    comment: str = "",
) -> TailoringItem:
    """Create a new item and put it at the front of ``items``.

    Args:
        items: Items of the current document.
        kind: ``"rule"`` or ``"variable"``.
        idref: Identifier of the referenced rule or value.
        value: Selection (``"true"``/``"false"``) for rules, defaulting to
            ``"true"``; assigned text for variables.
        severity: Severity override for rules, ignored for variables.
        comment: Annotation written before the item on export.

    Returns:
        The newly created item.

    Raises:
        MissingIdrefError: ``idref`` is empty.
        DuplicateRuleError: a rule for ``idref`` already exists.
        InvalidFieldError: unknown kind, selection or severity.
    """

    idref = _require_idref(idref)
    if kind not in KINDS:
        raise InvalidFieldError("Unknown item kind", {"kind": kind})

    new_item: TailoringItem
    try:
        if kind == RULE:
            if _has_rule(items, idref):
                raise DuplicateRuleError(
                    "Rule already present", {"idref": idref}
                )
            new_item = RuleItem(
                idref=idref,
                selected=value if value is not None else "true",
                severity=severity,
                comment=comment,
            )
        else:
            new_item = VariableItem(
                idref=idref, value=value or "", comment=comment
            )
    except ValueError as exc:
        raise InvalidFieldError(str(exc), {"idref": idref}) from exc

    items.insert(0, new_item)
    logger.info("Added %s item %s", kind, idref)
    return new_item


class FilteredItems:
    """Lazy view of items matching a case-insensitive query.

    Iterating twice re-evaluates the filter, so the view reflects edits made
    to the underlying list in between.
    """

    def __init__(self, items: Iterable[TailoringItem], query: str) -> None:
        self._items = items
        self._needle = query.lower()

    def _matches(self, item: TailoringItem) -> bool:
        return (
            self._needle in item.idref.lower()
            or self._needle in (item.comment or "").lower()
        )

    def __iter__(self) -> Iterator[TailoringItem]:
        return (item for item in self._items if self._matches(item))


def filter_items(items: Iterable[TailoringItem], query: str) -> FilteredItems:
    """Return items whose ``idref`` or ``comment`` contains ``query``.

    Matching ignores case and keeps the original relative order. The
    underlying sequence is not modified.
    """

    return FilteredItems(items, query)
