"""A rule selection merged from ``select`` and ``refine-rule`` elements."""

from __future__ import annotations

from attrs import define, field
from attrs.validators import in_

from .types import (
    RULE,
    SELECTION_CHOICES,
    SELECTION_UNSET,
    SEVERITY_CHOICES,
    SEVERITY_DEFAULT,
)
from .utils import next_item_id


@define(slots=True)
class RuleItem:
    """Represents the tailoring of a single benchmark rule.

    Attributes:
        idref: Identifier of the referenced XCCDF rule.
        selected: ``"true"``, ``"false"`` or ``"unset"`` when the source
            carried no ``select`` element for the rule.
        severity: Severity override or ``"default"`` for none.
        comment: Annotation written as an XML comment before the rule.
        item_id: Session-local identity, never written to XML.
        kind: Discriminator shared with ``VariableItem``.
    """

    idref: str
    selected: str = field(
        default=SELECTION_UNSET, validator=in_(SELECTION_CHOICES)
    )
    severity: str = field(
        default=SEVERITY_DEFAULT, validator=in_(SEVERITY_CHOICES)
    )
    comment: str = ""
    item_id: int = field(factory=next_item_id, eq=False)
    kind: str = field(default=RULE, init=False)
