"""Record emitter: append new INFO fields to a record without touching existing ones."""

from urllib.parse import quote

from pathogenicity_pipeline.vcf.models import MalformedRecordError, VariantRecord

# Characters left as-is in emitted values. '%' is kept so values copied from an
# already-encoded input are not double-encoded; '|' and ',' are list separators.
# Whitespace, ';', '=', tabs, quotes and non-ASCII are percent-encoded.
SAFE_CHARACTERS = "%|,/:()[]!*'~.-_+@&$?#<>^"


class FieldCollisionError(MalformedRecordError):
    """An emitted tag already exists on the record or repeats within one batch."""


def encode_info_value(value: str) -> str:
    """Percent-encode an INFO value so it cannot break the INFO column."""
    return quote(value, safe=SAFE_CHARACTERS)


def emit_fields(record: VariantRecord, fields: list[tuple[str, str]]) -> None:
    """
    Append fields to a record's INFO column.

    Existing fields are neither reordered nor modified. The whole batch is
    validated before anything is appended, so a collision leaves the record
    unchanged.

    Args:
        record: Record to extend
        fields: Ordered (tag, value) pairs; values are encoded here

    Raises:
        FieldCollisionError: If a tag is already on the record or appears
            twice in ``fields``
        ValueError: If a tag is not a valid INFO key
    """
    seen = set()
    for tag, _ in fields:
        if not tag or any(c in tag for c in ";=\t ,"):
            raise ValueError(f"Invalid INFO tag: {tag!r}")
        if tag in seen:
            raise FieldCollisionError(f"tag {tag} emitted twice", record.line_number)
        if tag in record.info:
            raise FieldCollisionError(f"tag {tag} already present on record", record.line_number)
        seen.add(tag)

    for tag, value in fields:
        encoded = encode_info_value(value)
        record.info.append(tag, encoded)
        record.appended.append((tag, encoded))
