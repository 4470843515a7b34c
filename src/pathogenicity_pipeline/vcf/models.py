"""Variant record and INFO field multimap.

A data row is parsed once into a VariantRecord. After that every evidence
lookup is an exact key lookup on InfoFields; nothing re-scans the raw INFO
text. Lookups never raise: an absent field is an empty result.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

# Fixed VCF columns preceding any sample columns
VCF_COLUMNS = ["CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"]
INFO_COLUMN = 7
MISSING = "."

# Sub-list separators inside a single INFO value
_SUBVALUE_SPLIT = re.compile(r"[,|]")


class MalformedRecordError(ValueError):
    """A data row violates the fixed column contract.

    Record-scoped: the runner drops the row, reports it, and continues
    with the next one.
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        self.reason = message
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class InfoFields:
    """Ordered multimap of INFO entries.

    Keys may repeat; every occurrence is kept in input order. Flag entries
    (no ``=``) are stored with value None.
    """

    def __init__(self, entries: Optional[list[tuple[str, Optional[str]]]] = None):
        self._entries: list[tuple[str, Optional[str]]] = list(entries or [])

    @classmethod
    def parse(cls, info: str, line_number: Optional[int] = None) -> "InfoFields":
        """Parse a semicolon-separated INFO column.

        ``.`` is the empty INFO column. Empty segments (``A=1;;B=2``) are
        skipped; an entry with an empty key is malformed.
        """
        if info == MISSING:
            return cls()

        entries = []
        for segment in info.split(";"):
            if not segment:
                continue
            key, sep, value = segment.partition("=")
            if not key:
                raise MalformedRecordError(
                    f"INFO entry without a key: {segment!r}", line_number
                )
            entries.append((key, value if sep else None))
        return cls(entries)

    def get_all(self, key: str) -> list[str]:
        """All values recorded for ``key``, in order (flags excluded)."""
        return [v for k, v in self._entries if k == key and v is not None]

    def first(self, key: str) -> Optional[str]:
        """First value recorded for ``key``, or None when absent."""
        for k, v in self._entries:
            if k == key and v is not None:
                return v
        return None

    def values(self, key: str) -> list[str]:
        """All sub-values of ``key`` across occurrences, split on ``,`` and ``|``."""
        result = []
        for value in self.get_all(key):
            result.extend(_SUBVALUE_SPLIT.split(value))
        return result

    def keys(self) -> list[str]:
        """Distinct keys in first-seen order."""
        return list(dict.fromkeys(k for k, _ in self._entries))

    def items(self) -> Iterator[tuple[str, Optional[str]]]:
        return iter(self._entries)

    def append(self, key: str, value: Optional[str]) -> None:
        self._entries.append((key, value))

    def without(self, *keys: str) -> "InfoFields":
        """Copy of these fields with every occurrence of ``keys`` removed."""
        drop = set(keys)
        return InfoFields([(k, v) for k, v in self._entries if k not in drop])

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InfoFields):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"InfoFields({self._entries!r})"


@dataclass
class VariantRecord:
    """One VCF data row.

    ``columns`` holds the row exactly as read. New fields are appended to
    ``info`` (so later stages see them) and tracked in ``appended``; the
    original INFO text is never rewritten.
    """

    columns: list[str]
    info: InfoFields
    line_number: Optional[int] = None
    appended: list[tuple[str, str]] = field(default_factory=list)

    @property
    def chrom(self) -> str:
        return self.columns[0]

    @property
    def pos(self) -> int:
        return int(self.columns[1])

    @property
    def ref(self) -> str:
        return self.columns[3]

    @property
    def alt(self) -> str:
        return self.columns[4]

    @property
    def key(self) -> str:
        """chrom:pos:ref:alt identity used in logs and summaries."""
        return f"{self.chrom}:{self.columns[1]}:{self.ref}:{self.alt}"

    def original_info(self) -> InfoFields:
        """INFO fields as read, without anything appended in this run."""
        return InfoFields(list(self.info.items())[: len(self.info) - len(self.appended)])

    def to_line(self) -> str:
        """Serialize back to a tab-separated row (no trailing newline)."""
        columns = list(self.columns)
        if self.appended:
            new_info = ";".join(f"{tag}={value}" for tag, value in self.appended)
            original = columns[INFO_COLUMN]
            columns[INFO_COLUMN] = new_info if original == MISSING else f"{original};{new_info}"
        return "\t".join(columns)


def parse_record(line: str, line_number: Optional[int] = None) -> VariantRecord:
    """
    Parse one VCF data line into a VariantRecord.

    Args:
        line: Raw data line (trailing newline is stripped)
        line_number: 1-based line number in the input, used in error messages

    Returns:
        VariantRecord with parsed INFO fields

    Raises:
        MalformedRecordError: Bytes that are not UTF-8, fewer than 8 columns,
            non-integer POS, empty INFO column, or an INFO entry without a key
    """
    try:
        line.encode("utf-8")
    except UnicodeEncodeError as e:
        raise MalformedRecordError(
            f"row is not valid UTF-8 at character {e.start}", line_number
        ) from e

    columns = line.rstrip("\r\n").split("\t")

    if len(columns) < len(VCF_COLUMNS):
        raise MalformedRecordError(
            f"expected at least {len(VCF_COLUMNS)} tab-separated columns, got {len(columns)}",
            line_number,
        )

    if not (columns[1].isascii() and columns[1].isdigit()):
        raise MalformedRecordError(f"POS is not an integer: {columns[1]!r}", line_number)

    if not columns[INFO_COLUMN]:
        raise MalformedRecordError("INFO column is empty", line_number)

    info = InfoFields.parse(columns[INFO_COLUMN], line_number)
    return VariantRecord(columns=columns, info=info, line_number=line_number)
