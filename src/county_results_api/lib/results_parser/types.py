"""Parse-method enumeration, county identifiers, and the raw row model."""

import re
from dataclasses import dataclass, field
from enum import StrEnum


class ParseMethod(StrEnum):
    """Named ingestion strategy configured per county."""

    ZIP = "zip"
    HTML = "html"


def validate_parse_method(method: str) -> ParseMethod:
    """Return the ParseMethod for ``method`` or raise.

    Raises:
        ValueError: If ``method`` is not a recognized parse method.
    """
    try:
        return ParseMethod(method)
    except ValueError:
        msg = f"invalid parse method: {method}"
        raise ValueError(msg) from None


def normalize_county_id(county_name: str) -> str:
    """Derive the county identifier used to name a results collection.

    Lower-cases the name and collapses every run of characters outside
    ``[a-z0-9]`` into a single underscore (``"San Luis Obispo"`` becomes
    ``"san_luis_obispo"``).

    Raises:
        ValueError: If the name contains no usable characters.
    """
    county_id = re.sub(r"[^a-z0-9]+", "_", county_name.strip().lower()).strip("_")
    if not county_id:
        msg = f"County name {county_name!r} does not produce a valid identifier"
        raise ValueError(msg)
    return county_id


@dataclass
class RawEntry:
    """One parsed row of election data before classification.

    ``raw_data`` maps every lower-cased header of the source table to the
    row's cell text.
    """

    county_id: str
    title: str
    choice_name: str
    votes: int = 0
    percentage: float = 0.0
    raw_data: dict[str, str] = field(default_factory=dict)
