"""JSON helpers and plain-data conversion for tailoring documents."""

from __future__ import annotations

try:
    import orjson  # type: ignore[import-not-found]
except ImportError:  # pragma: no cover - optional dependency
    orjson = None  # type: ignore[assignment]

import json
from typing import Any

from attrs import asdict, fields, filters

from xtailor import mutators
from xtailor.parser import RuleItem, TailoringDocument, VariableItem
from xtailor.parser.types import RULE, VARIABLE, ItemList, TailoringItem

JSONDict = dict[str, Any]

# Identities are session-local and stay out of document dumps.
_SKIP_ITEM_IDS = filters.exclude(
    fields(RuleItem).item_id, fields(VariableItem).item_id
)


def json_dumps(data: object) -> str:
    """Serialize data to a JSON string.

    Args:
        data: Data structure to serialize.

    Returns:
        JSON representation of ``data``.
    """

    if orjson is not None:
        return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode()
    return json.dumps(data, ensure_ascii=False, indent=2)


def json_loads(data: str | bytes) -> object:
    """Deserialize JSON data from a string or bytes.

    Args:
        data: JSON content as ``str`` or ``bytes``.

    Returns:
        Parsed JSON object.
    """

    if orjson is not None:
        return orjson.loads(data)
    if isinstance(data, (bytes, bytearray)):
        return json.loads(data.decode())
    return json.loads(data)


def item_to_dict(item: TailoringItem) -> JSONDict:
    """Return ``item`` as a plain mapping including its ``item_id``."""

    return asdict(item)


def document_to_dict(doc: TailoringDocument) -> JSONDict:
    """Return ``doc`` as plain data suitable for JSON or YAML dumps.

    Item identities are left out; ``item_to_dict`` keeps them for clients
    editing the current session.
    """

    return asdict(doc, filter=_SKIP_ITEM_IDS)


def _item_from_dict(data: JSONDict) -> TailoringItem:
    """Build an item from a mapping produced by ``item_to_dict``.

    Stored ``item_id`` values are ignored; identities are session-local.
    """

    kind = data.get("kind", RULE)
    if kind == VARIABLE:
        return VariableItem(
            idref=data["idref"],
            value=data.get("value") or "",
            comment=data.get("comment") or "",
        )
    return RuleItem(
        idref=data["idref"],
        selected=data.get("selected") or "unset",
        severity=data.get("severity") or "default",
        comment=data.get("comment") or "",
    )


def document_from_dict(data: JSONDict) -> TailoringDocument:
    """Rebuild a document from a mapping produced by ``document_to_dict``.

    Raises:
        KeyError: an item lacks ``idref``.
        ValueError: an item carries an unsupported selection or severity.
        MissingIdrefError: an item has an empty ``idref``.
        DuplicateRuleError: two rules share an ``idref``.
    """

    items: ItemList = [_item_from_dict(item) for item in data.get("items", [])]
    mutators.check_items(items)
    return TailoringDocument(
        benchmark_href=data.get("benchmark_href") or "",
        version_text=data.get("version_text") or "",
        profile_id=data.get("profile_id") or "",
        profile_extends=data.get("profile_extends") or "",
        profile_title=data.get("profile_title") or "",
        profile_description=data.get("profile_description") or "",
        items=items,
    )
