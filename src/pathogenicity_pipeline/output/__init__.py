"""Output generation: record emission and verdict summary files."""

from pathogenicity_pipeline.output.emitter import (
    FieldCollisionError,
    emit_fields,
    encode_info_value,
)
from pathogenicity_pipeline.output.summary import (
    VERDICT_SCHEMA,
    VerdictRow,
    build_verdict_table,
    summarize_verdicts,
)
from pathogenicity_pipeline.output.writers import write_verdict_summary

__all__ = [
    "FieldCollisionError",
    "emit_fields",
    "encode_info_value",
    "VERDICT_SCHEMA",
    "VerdictRow",
    "build_verdict_table",
    "summarize_verdicts",
    "write_verdict_summary",
]
