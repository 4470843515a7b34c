"""Dual-format TSV+Parquet verdict writer with provenance sidecar."""

from datetime import datetime, timezone
from pathlib import Path

import polars as pl
import yaml

from pathogenicity_pipeline.output.summary import summarize_verdicts


def write_verdict_summary(
    df: pl.DataFrame,
    output_dir: Path,
    filename_base: str = "verdicts",
) -> dict:
    """
    Write the per-variant verdict table to TSV and Parquet with a YAML sidecar.

    Args:
        df: Verdict table from build_verdict_table()
        output_dir: Directory to write output files (created if doesn't exist)
        filename_base: Base filename without extension (default: "verdicts")

    Returns:
        Dictionary with output file paths:
        {
            "tsv": Path to TSV file,
            "parquet": Path to Parquet file,
            "provenance": Path to YAML provenance sidecar
        }

    Notes:
        - Row order is the input VCF order (not re-sorted)
        - Sidecar holds generation time, file names and verdict tallies
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    tsv_path = output_dir / f"{filename_base}.tsv"
    parquet_path = output_dir / f"{filename_base}.parquet"
    provenance_path = output_dir / f"{filename_base}.provenance.yaml"

    df.write_csv(tsv_path, separator="\t", include_header=True)
    df.write_parquet(parquet_path, compression="snappy", use_pyarrow=True)

    summary = summarize_verdicts(df)
    provenance = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "output_files": [tsv_path.name, parquet_path.name],
        "statistics": summary,
        "column_count": len(df.columns),
        "column_names": df.columns,
    }

    with open(provenance_path, "w") as f:
        yaml.dump(provenance, f, default_flow_style=False, sort_keys=False)

    return {
        "tsv": tsv_path,
        "parquet": parquet_path,
        "provenance": provenance_path,
    }
