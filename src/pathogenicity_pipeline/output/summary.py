"""Per-variant verdict table and run-level tallies."""

from dataclasses import asdict, dataclass
from typing import Optional

import polars as pl

VERDICT_SCHEMA = {
    "chrom": pl.Utf8,
    "pos": pl.Int64,
    "ref": pl.Utf8,
    "alt": pl.Utf8,
    "branch": pl.Utf8,
    "pathogenicity": pl.Utf8,
    "source": pl.Utf8,
    "reason": pl.Utf8,
    "clinvar_hgmd_conflict": pl.Utf8,
    "num_path_preds": pl.Int64,
    "total_num_preds": pl.Int64,
}


@dataclass
class VerdictRow:
    """One classified variant as it appears in the summary table."""

    chrom: str
    pos: int
    ref: str
    alt: str
    branch: str
    pathogenicity: str
    source: str
    reason: str
    clinvar_hgmd_conflict: str
    num_path_preds: Optional[int] = None
    total_num_preds: Optional[int] = None


def build_verdict_table(rows: list[VerdictRow]) -> pl.DataFrame:
    """
    Collect verdict rows into a DataFrame.

    Rows keep input order. Missing predictor counts stay NULL: a variant
    without predictions is not a variant with zero pathogenic predictions.

    Args:
        rows: VerdictRow per successfully classified record

    Returns:
        DataFrame with VERDICT_SCHEMA columns (empty but typed when no rows)
    """
    return pl.DataFrame([asdict(r) for r in rows], schema=VERDICT_SCHEMA)


def summarize_verdicts(df: pl.DataFrame) -> dict:
    """
    Tally verdicts by final pathogenicity, source and cascade branch.

    Returns:
        Dictionary with:
        - total_variants (int)
        - by_pathogenicity, by_source, by_branch: {value: count}, sorted by value
        - conflicts (int): records with clinvar_hgmd_conflict == "1"
    """
    def counts(column: str) -> dict:
        if df.height == 0:
            return {}
        tally = df.group_by(column).agg(pl.len().alias("count")).sort(column)
        return {row[column]: row["count"] for row in tally.to_dicts()}

    return {
        "total_variants": df.height,
        "by_pathogenicity": counts("pathogenicity"),
        "by_source": counts("source"),
        "by_branch": counts("branch"),
        "conflicts": df.filter(pl.col("clinvar_hgmd_conflict") == "1").height,
    }
