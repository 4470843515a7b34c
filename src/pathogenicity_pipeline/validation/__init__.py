"""Assertion-tag checks against finalized VCFs."""

from pathogenicity_pipeline.validation.assertions import (
    ASSERTION_SCHEMA,
    check_assertions,
    summarize_assertions,
)

__all__ = ["ASSERTION_SCHEMA", "check_assertions", "summarize_assertions"]
