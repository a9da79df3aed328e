"""Tests for writing tailoring documents back to XML."""

from datetime import datetime, timezone

import pytest

from conftest import APPARMOR, CRAMFS, SQUASHFS, tailoring
from xtailor import parser
from xtailor.exceptions import MalformedDocumentError
from xtailor.parser import RuleItem, TailoringDocument, VariableItem
from xtailor.serializer import format_timestamp, serialize

MOMENT = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _doc(*items: object) -> TailoringDocument:
    """Return a document holding ``items``."""

    return TailoringDocument(
        benchmark_href="/bench.xml",
        version_text="3",
        profile_id="p_custom",
        profile_extends="p_base",
        profile_title="Title",
        profile_description="Description",
        items=list(items),
    )


def test_sample_export_markup(sample_xml: str) -> None:
    """The sample exports select+refine, select only, then set-value."""

    xml = serialize(parser.parse_xml(sample_xml), timestamp=MOMENT)
    lines = xml.splitlines()

    assert lines[0] == "<?xml version='1.0' encoding='UTF-8'?>"
    assert lines[1] == (
        '<Tailoring xmlns="http://checklists.nist.gov/xccdf/1.2" '
        'id="xccdf_scap-workbench_tailoring_default">'
    )
    assert lines[2] == (
        '  <benchmark href="/usr/share/usg-benchmarks/ubuntu2204_CIS_1"/>'
    )
    assert lines[3] == '  <version time="2025-01-02T03:04:05.000Z">1</version>'

    body = lines[7:-2]
    assert body == [
        "    <!--1.1.1.1: Ensure mounting of cramfs filesystems is disabled "
        "(Automated)-->",
        f'    <select idref="{CRAMFS}" selected="true"/>',
        f'    <refine-rule idref="{CRAMFS}" severity="high"/>',
        "    <!--1.1.1.2: Ensure mounting of squashfs filesystems is disabled "
        "(Automated)-->",
        f'    <select idref="{SQUASHFS}" selected="true"/>',
        "    <!--1.6.1.3: Ensure all AppArmor Profiles are in enforce or "
        "complain mode (Automated)-->",
        f'    <set-value idref="{APPARMOR}">enforce</set-value>',
    ]
    assert lines[-2:] == ["  </Profile>", "</Tailoring>"]
    assert not xml.endswith("\n")


def test_profile_header_attributes() -> None:
    """Title and description carry the fixed namespace and locale."""

    xml = serialize(_doc(), timestamp=MOMENT)

    assert '  <Profile id="p_custom" extends="p_base">' in xml
    assert (
        '    <title xmlns:xhtml="http://www.w3.org/1999/xhtml" '
        'xml:lang="en-US" override="true">Title</title>'
    ) in xml
    assert (
        '    <description xmlns:xhtml="http://www.w3.org/1999/xhtml" '
        'xml:lang="en-US" override="true">Description</description>'
    ) in xml


def test_round_trip_preserves_items(sample_xml: str) -> None:
    """Parsing the export reproduces an equivalent document."""

    doc = parser.parse_xml(sample_xml)

    assert parser.parse_xml(serialize(doc)) == doc


def test_unset_selection_writes_only_refinement() -> None:
    """A rule without selection exports just its refine-rule."""

    xml = serialize(_doc(RuleItem(idref="A", severity="low")))

    assert '<refine-rule idref="A" severity="low"/>' in xml
    assert "<select" not in xml


def test_rule_without_state_keeps_comment() -> None:
    """An unset, default rule drops its markup but still writes its comment."""

    doc = _doc(
        RuleItem(idref="A", comment="metadata only"),
        VariableItem(idref="V", value="x"),
    )

    xml = serialize(doc)
    reparsed = parser.parse_xml(xml)

    assert 'idref="A"' not in xml
    expected = '<!--metadata only-->\n    <set-value idref="V">x</set-value>'
    assert expected in xml
    assert reparsed.items == [
        VariableItem(idref="V", value="x", comment="metadata only")
    ]


def test_repeated_variables_are_all_written() -> None:
    """Variables sharing an idref are each exported."""

    doc = parser.parse_xml(
        tailoring(
            '<set-value idref="V">one</set-value>'
            '<set-value idref="V">two</set-value>'
        )
    )

    xml = serialize(doc)

    assert xml.count('<set-value idref="V">') == 2


def test_escaping_round_trips_markup_characters() -> None:
    """Values containing markup characters survive export and import."""

    doc = _doc(VariableItem(idref='V"1', value="a < b & c > d"))
    doc.profile_title = "Tom & Jerry"

    xml = serialize(doc)

    assert "a &lt; b &amp; c &gt; d" in xml
    assert 'idref="V&quot;1"' in xml
    assert parser.parse_xml(xml) == doc


def test_raw_mode_reproduces_unescaped_output() -> None:
    """Without escaping, markup characters break the exported XML."""

    doc = _doc(VariableItem(idref="V", value="a < b & c"))

    xml = serialize(doc, escape=False)

    assert '<set-value idref="V">a < b & c</set-value>' in xml
    with pytest.raises(MalformedDocumentError):
        parser.parse_xml(xml)


def test_export_stamps_fresh_time() -> None:
    """The original version time is replaced on export."""

    xml = serialize(parser.parse_xml(tailoring("")))

    assert "2025-01-01T00:00:00Z" not in xml
    assert 'time="' in xml


def test_format_timestamp() -> None:
    """Timestamps use UTC with milliseconds and a Z suffix."""

    assert format_timestamp(MOMENT) == "2025-01-02T03:04:05.000Z"
    assert format_timestamp().endswith("Z")


def test_escaping_round_trips_whitespace() -> None:
    """Whitespace in attributes and carriage returns survive re-import."""

    doc = _doc(
        RuleItem(idref="A\nB\tC\rD", selected="true"),
        VariableItem(idref="V", value="line one\r\nline two\ttab"),
    )

    xml = serialize(doc)
    reparsed = parser.parse_xml(xml)

    assert 'idref="A&#10;B&#9;C&#13;D"' in xml
    assert "line one&#13;\nline two\ttab" in xml
    assert reparsed.items[0].idref == "A\nB\tC\rD"
    assert reparsed.items[1].value == "line one\r\nline two\ttab"
    assert reparsed == doc
