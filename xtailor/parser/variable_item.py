"""A variable assignment read from a ``set-value`` element."""

from __future__ import annotations

from attrs import define, field

from .types import VARIABLE
from .utils import next_item_id


@define(slots=True)
class VariableItem:
    """Represents a value assigned to a benchmark variable.

    Attributes:
        idref: Identifier of the referenced XCCDF value.
        value: Text assigned to the variable.
        comment: Annotation written as an XML comment before the element.
        item_id: Session-local identity, never written to XML.
        kind: Discriminator shared with ``RuleItem``.
    """

    idref: str
    value: str = ""
    comment: str = ""
    item_id: int = field(factory=next_item_id, eq=False)
    kind: str = field(default=VARIABLE, init=False)
