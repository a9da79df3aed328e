"""Parser package for XCCDF tailoring documents."""

from .parse_xml import parse_xml
from .read_document import read_document, read_text
from .rule_item import RuleItem
from .sample import SAMPLE_XML
from .tailoring_document import TailoringDocument
from .variable_item import VariableItem

__all__ = [
    "SAMPLE_XML",
    "RuleItem",
    "TailoringDocument",
    "VariableItem",
    "parse_xml",
    "read_document",
    "read_text",
]
