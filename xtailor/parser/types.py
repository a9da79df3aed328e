"""Common type aliases and value choices for the tailoring model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .rule_item import RuleItem  # noqa: F401
    from .variable_item import VariableItem  # noqa: F401


# Discriminator values stored in ``kind``.
RULE = "rule"
VARIABLE = "variable"
KINDS = (RULE, VARIABLE)

# ``unset`` means the source had no ``select`` for the rule.
SELECTION_UNSET = "unset"
SELECTION_CHOICES = ("true", "false", SELECTION_UNSET)

# ``default`` means no ``refine-rule`` override.
SEVERITY_DEFAULT = "default"
SEVERITY_CHOICES = (SEVERITY_DEFAULT, "high", "medium", "low", "info")

TailoringItem = Union["RuleItem", "VariableItem"]
ItemList = list[TailoringItem]
RuleIndex = dict[str, "RuleItem"]
