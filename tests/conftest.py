"""Shared fixtures: configuration and small VCF builders."""

import pytest

from pathogenicity_pipeline.config.schema import ClinicalLabels, PipelineConfig
from pathogenicity_pipeline.vcf.models import parse_record

HEADER = [
    "##fileformat=VCFv4.2",
    '##INFO=<ID=SIFT_PRED,Number=.,Type=String,Description="SIFT prediction">',
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO",
]


def vcf_line(info: str, chrom: str = "1", pos: int = 1000, ref: str = "A", alt: str = "G") -> str:
    return "\t".join([chrom, str(pos), ".", ref, alt, "50", "PASS", info])


def write_vcf(path, infos, header=None):
    """Write a VCF with one data row per INFO string (positions 1000, 1001, ...)."""
    lines = list(header if header is not None else HEADER)
    lines += [vcf_line(info, pos=1000 + i) for i, info in enumerate(infos)]
    path.write_text("\n".join(lines) + "\n")
    return path


def record(info: str, line_number: int = 1):
    return parse_record(vcf_line(info), line_number)


@pytest.fixture
def labels():
    return ClinicalLabels(
        pathogenic="Pathogenic",
        likely_pathogenic="Likely_pathogenic",
        likely_benign="Likely_benign",
        benign="Benign",
        unknown="Unknown_significance",
    )


@pytest.fixture
def config(tmp_path, labels):
    return PipelineConfig(clinical_labels=labels, data_dir=tmp_path / "data")


@pytest.fixture
def config_file(tmp_path):
    """Minimal YAML config with a DuckDB store under tmp_path."""
    path = tmp_path / "test_config.yaml"
    path.write_text(f"""
clinical_labels:
  pathogenic: Pathogenic
  likely_pathogenic: Likely_pathogenic
  likely_benign: Likely_benign
  benign: Benign
  unknown: Unknown_significance

data_dir: {tmp_path / "data"}
duckdb_path: {tmp_path / "test.duckdb"}

test:
  assertion_tags:
    ASSERT_PATHOGENICITY: FINAL_PATHOGENICITY
""")
    return path
