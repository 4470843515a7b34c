"""Compare expected-value INFO tags against the classifier's output tags.

A curated test VCF carries, per record, the verdict it should receive (for
example ``ASSERT_PATHOGENICITY=Benign``). After finalization each expected tag
is checked against its mapped output tag (``FINAL_PATHOGENICITY``).
"""

from pathlib import Path
from urllib.parse import unquote

import polars as pl
import structlog

from pathogenicity_pipeline.vcf.io import iter_data_lines, numbered, open_vcf, read_header
from pathogenicity_pipeline.vcf.models import MISSING, parse_record

logger = structlog.get_logger()

ASSERTION_SCHEMA = {
    "chrom": pl.Utf8,
    "pos": pl.Int64,
    "ref": pl.Utf8,
    "alt": pl.Utf8,
    "assertion_tag": pl.Utf8,
    "expected": pl.Utf8,
    "observed": pl.Utf8,
    "passed": pl.Boolean,
}


def check_assertions(vcf_path: Path, assertion_tags: dict[str, str]) -> pl.DataFrame:
    """
    Check every assertion tag found in a finalized VCF.

    Values are percent-decoded before comparison. A record missing the output
    tag is observed as ".", which fails unless "." was expected.

    Args:
        vcf_path: Finalized VCF (plain or .gz)
        assertion_tags: Mapping of expected-value tag -> output tag

    Returns:
        DataFrame with ASSERTION_SCHEMA columns, one row per (record, tag)

    Raises:
        MalformedRecordError: If the file has no header or a row cannot be parsed
    """
    rows = []
    with open_vcf(vcf_path) as f:
        lines = numbered(f)
        read_header(lines)
        for line_number, line in iter_data_lines(lines):
            record = parse_record(line, line_number)
            for assertion_tag, output_tag in assertion_tags.items():
                expected = record.info.first(assertion_tag)
                if expected is None:
                    continue
                observed = record.info.first(output_tag)
                expected = unquote(expected)
                observed = MISSING if observed is None else unquote(observed)
                rows.append({
                    "chrom": record.chrom,
                    "pos": record.pos,
                    "ref": record.ref,
                    "alt": record.alt,
                    "assertion_tag": assertion_tag,
                    "expected": expected,
                    "observed": observed,
                    "passed": expected == observed,
                })

    df = pl.DataFrame(rows, schema=ASSERTION_SCHEMA)
    logger.info(
        "assertions_checked",
        vcf=str(vcf_path),
        checked=df.height,
        failed=df.filter(~pl.col("passed")).height,
    )
    return df


def summarize_assertions(df: pl.DataFrame) -> dict:
    """Pass/fail counts overall and per assertion tag."""
    per_tag = {}
    if df.height > 0:
        grouped = (
            df.group_by("assertion_tag")
            .agg(
                pl.col("passed").sum().alias("passed"),
                (~pl.col("passed")).sum().alias("failed"),
            )
            .sort("assertion_tag")
        )
        per_tag = {
            row["assertion_tag"]: {"passed": row["passed"], "failed": row["failed"]}
            for row in grouped.to_dicts()
        }

    failed = df.filter(~pl.col("passed")).height
    return {
        "checked": df.height,
        "passed": df.height - failed,
        "failed": failed,
        "by_tag": per_tag,
    }
