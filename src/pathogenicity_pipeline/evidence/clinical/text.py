"""Text normalization shared by the clinical database parsers."""

import re
from typing import Iterable, Optional
from urllib.parse import unquote

_NON_DIGITS = re.compile(r"\D+")


def unique(values: Iterable[str]) -> tuple[str, ...]:
    """Order-preserving de-duplication, dropping empty strings."""
    return tuple(dict.fromkeys(v for v in values if v))


def parse_pmids(raw: Optional[str]) -> tuple[str, ...]:
    """Extract PubMed IDs from free text: every run of digits is one ID.

    Leading/trailing punctuation, whitespace and separators are noise.
    """
    if not raw:
        return ()
    return unique(_NON_DIGITS.split(unquote(raw)))


def is_missing(value: Optional[str]) -> bool:
    """Absent, empty, or the '.' missing-value marker."""
    return value is None or value == "" or value == "."
