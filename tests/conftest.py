"""Shared fixtures for the tailoring editor tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from xtailor.parser import SAMPLE_XML

CRAMFS = "xccdf_org.ssgproject.content_rule_kernel_module_cramfs_disabled"
SQUASHFS = "xccdf_org.ssgproject.content_rule_kernel_module_squashfs_disabled"
APPARMOR = "xccdf_org.ssgproject.content_value_var_apparmor_mode"


def tailoring(body: str, title: str = "<title>T</title>") -> str:
    """Wrap profile children ``body`` in a minimal tailoring document."""

    return (
        "<?xml version='1.0' encoding='UTF-8'?>"
        '<Tailoring xmlns="http://checklists.nist.gov/xccdf/1.2" id="t">'
        '<benchmark href="/bench.xml"/>'
        '<version time="2025-01-01T00:00:00Z">7</version>'
        '<Profile id="p_custom" extends="p_base">'
        f"{title}{body}"
        "</Profile></Tailoring>"
    )


@pytest.fixture
def sample_xml() -> str:
    """Return the embedded sample document."""

    return SAMPLE_XML


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Write the sample document to a temporary file."""

    path = tmp_path / "tailoring.xml"
    path.write_text(SAMPLE_XML, encoding="utf-8")
    return path
