"""The whole parsed tailoring file."""

from __future__ import annotations

from attrs import define, field

from .types import ItemList


@define(slots=True)
class TailoringDocument:
    """Profile metadata and the ordered tailoring items.

    Attributes:
        benchmark_href: Reference to the tailored benchmark, copied verbatim.
        version_text: Free-form version marker, copied verbatim.
        profile_id: Identifier of the customized profile.
        profile_extends: Identifier of the base profile.
        profile_title: Display title of the profile.
        profile_description: Display description of the profile.
        items: Rules and variables in document order.
    """

    benchmark_href: str = ""
    version_text: str = ""
    profile_id: str = ""
    profile_extends: str = ""
    profile_title: str = ""
    profile_description: str = ""
    items: ItemList = field(factory=list, repr=False)
