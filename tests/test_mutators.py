"""Tests for the item list edit operations."""

import pytest

from conftest import APPARMOR, CRAMFS, SQUASHFS
from xtailor import mutators, parser
from xtailor.exceptions import (
    DuplicateRuleError,
    InvalidFieldError,
    MissingIdrefError,
    ValidationError,
)
from xtailor.parser import RuleItem, VariableItem
from xtailor.parser.types import ItemList


@pytest.fixture
def items(sample_xml: str) -> ItemList:
    """Return the items of the sample document."""

    return parser.parse_xml(sample_xml).items


def test_update_field_replaces_value(items: ItemList) -> None:
    """Fields are replaced on the item with the matching identity."""

    rule, _, variable = items

    assert mutators.update_field(items, rule.item_id, "severity", "low")
    assert mutators.update_field(items, rule.item_id, "selected", "false")
    assert mutators.update_field(items, variable.item_id, "value", "complain")
    assert mutators.update_field(items, variable.item_id, "comment", "note")

    assert rule.severity == "low"
    assert rule.selected == "false"
    assert variable.value == "complain"
    assert variable.comment == "note"


def test_update_field_unknown_id_is_noop(items: ItemList) -> None:
    """Editing an identity that does not exist changes nothing."""

    before = list(items)

    assert not mutators.update_field(items, -1, "severity", "low")
    assert items == before


def test_update_field_rejects_invalid_values(items: ItemList) -> None:
    """Selections and severities must come from the allowed choices."""

    rule, _, variable = items

    with pytest.raises(InvalidFieldError):
        mutators.update_field(items, rule.item_id, "severity", "critical")
    with pytest.raises(InvalidFieldError):
        mutators.update_field(items, rule.item_id, "selected", "yes")
    with pytest.raises(InvalidFieldError):
        mutators.update_field(items, variable.item_id, "severity", "low")
    with pytest.raises(InvalidFieldError):
        mutators.update_field(items, rule.item_id, "item_id", "5")

    assert rule.severity == "high"
    assert rule.selected == "true"


def test_update_idref_checks_invariants(items: ItemList) -> None:
    """An idref cannot be emptied or collide with another rule."""

    rule, other_rule, variable = items

    with pytest.raises(MissingIdrefError):
        mutators.update_field(items, rule.item_id, "idref", "")
    with pytest.raises(DuplicateRuleError):
        mutators.update_field(items, rule.item_id, "idref", SQUASHFS)

    # Variables may share idrefs and rules may keep their own.
    assert mutators.update_field(items, variable.item_id, "idref", CRAMFS)
    assert mutators.update_field(items, other_rule.item_id, "idref", SQUASHFS)


def test_delete_item(items: ItemList) -> None:
    """Deleting removes exactly the matching item."""

    squashfs = items[1]

    assert mutators.delete_item(items, squashfs.item_id)
    assert [item.idref for item in items] == [CRAMFS, APPARMOR]
    assert not mutators.delete_item(items, squashfs.item_id)
    assert len(items) == 2


def test_add_item_prepends_with_fresh_identity(items: ItemList) -> None:
    """New items go to the front and get a new identity."""

    existing = {item.item_id for item in items}

    rule = mutators.add_item(
        items, "rule", "new_rule", severity="medium", comment="added"
    )
    variable = mutators.add_item(items, "variable", "new_var", value="42")

    assert items[0] is variable
    assert items[1] is rule
    assert rule == RuleItem(
        idref="new_rule", selected="true", severity="medium", comment="added"
    )
    assert variable == VariableItem(idref="new_var", value="42")
    assert rule.item_id not in existing
    assert variable.item_id > rule.item_id


def test_add_item_requires_idref(items: ItemList) -> None:
    """Adding without an idref fails and leaves the list alone."""

    before = list(items)

    for idref in ("", "   "):
        with pytest.raises(MissingIdrefError) as excinfo:
            mutators.add_item(items, "rule", idref)
        assert isinstance(excinfo.value, ValidationError)

    assert items == before


def test_add_item_validates_kind_and_choices(items: ItemList) -> None:
    """Unknown kinds and values outside the choices are rejected."""

    with pytest.raises(InvalidFieldError):
        mutators.add_item(items, "profile", "x")
    with pytest.raises(InvalidFieldError):
        mutators.add_item(items, "rule", "x", severity="urgent")
    with pytest.raises(DuplicateRuleError):
        mutators.add_item(items, "rule", CRAMFS)

    assert len(items) == 3


def test_add_variable_with_repeated_idref(items: ItemList) -> None:
    """Variables are never merged, so a repeated idref is accepted."""

    mutators.add_item(items, "variable", APPARMOR, value="complain")

    assert [item.idref for item in items].count(APPARMOR) == 2


def test_check_items(items: ItemList) -> None:
    """Whole item lists are checked for empty idrefs and duplicate rules."""

    mutators.check_items(items)

    with pytest.raises(DuplicateRuleError):
        mutators.check_items(items + [RuleItem(idref=CRAMFS)])
    with pytest.raises(MissingIdrefError):
        mutators.check_items([VariableItem(idref=" ")])

    # Repeated variables are allowed.
    mutators.check_items(items + [VariableItem(idref=APPARMOR)])


def test_filter_matches_idref_and_comment(items: ItemList) -> None:
    """Filtering is case-insensitive over idref and comment."""

    assert [item.idref for item in mutators.filter_items(items, "CRAMFS")] == [
        CRAMFS
    ]
    assert [
        item.idref for item in mutators.filter_items(items, "apparmor prof")
    ] == [APPARMOR]
    assert list(mutators.filter_items(items, "")) == items
    assert list(mutators.filter_items(items, "nothing-like-this")) == []


def test_filter_preserves_order_and_is_restartable(items: ItemList) -> None:
    """The filtered view keeps order, can be iterated twice and is lazy."""

    view = mutators.filter_items(items, "kernel_module")

    assert [item.idref for item in view] == [CRAMFS, SQUASHFS]
    assert [item.idref for item in view] == [CRAMFS, SQUASHFS]

    # Later edits show up on the next iteration.
    mutators.delete_item(items, items[0].item_id)
    assert [item.idref for item in view] == [SQUASHFS]
    assert len(items) == 2
