"""Integration tests for the CLI using CliRunner.

Tests:
- info
- run / predict / finalize
- --summary-dir outputs and DuckDB persistence
- malformed rows exit with status 1
- validate pass/fail
- report from the DuckDB store
"""

import gzip
import json

import polars as pl
import pytest
from click.testing import CliRunner

from pathogenicity_pipeline.cli.main import cli

from conftest import HEADER, vcf_line, write_vcf


@pytest.fixture
def input_vcf(tmp_path):
    return write_vcf(tmp_path / "input.vcf", [
        "SIFT_PRED=D;POLYPHEN2_HDIV_PRED=D;LRT_PRED=D;MUTATIONTASTER_PRED=D;GERP_RS=2.1;"
        "ASSERT_PATHOGENICITY=Pathogenic",
        "POP1_AF=0.01;ASSERT_PATHOGENICITY=Benign",
        "CLINVAR_CLINICAL_SIGNIFICANCE=Pathogenic;VARIANTTYPE=DP;ASSERT_PATHOGENICITY=Unknown_significance",
    ])


def invoke(config_file, *args):
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(config_file), *[str(a) for a in args]])


def test_help():
    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ["info", "predict", "finalize", "run", "validate", "report"]:
        assert command in result.output


def test_info(config_file):
    result = invoke(config_file, "info")

    assert result.exit_code == 0
    assert "Config Hash:" in result.output
    assert "likely_pathogenic: Likely_pathogenic" in result.output
    assert "MAF threshold: 0.005" in result.output
    assert "Pathogenic fraction: >= 0.6" in result.output
    assert "Benign fraction:     <= 0.4" in result.output


def test_run_writes_vcf_summary_and_store(config_file, input_vcf, tmp_path):
    output_vcf = tmp_path / "out" / "final.vcf.gz"
    summary_dir = tmp_path / "summary"

    result = invoke(config_file, "run", input_vcf, output_vcf, "--summary-dir", summary_dir)

    assert result.exit_code == 0, result.output
    assert "Classified 3 of 3 records" in result.output

    with gzip.open(output_vcf, "rt") as f:
        data = [line for line in f.read().splitlines() if not line.startswith("#")]
    assert len(data) == 3
    assert "FINAL_PATHOGENICITY=Pathogenic" in data[0]
    assert "FINAL_PATHOGENICITY_SOURCE=MAF" in data[1]
    assert "CLINVAR_HGMD_CONFLICTED=1" in data[2]

    verdicts = pl.read_parquet(summary_dir / "verdicts.parquet")
    assert verdicts["branch"].to_list() == ["dbnsfp", "maf", "clinvar_hgmd_conflict"]

    provenance = json.loads((tmp_path / "out" / "final.provenance.json").read_text())
    steps = [s["step_name"] for s in provenance["processing_steps"]]
    assert steps == ["classify_records", "summarize_verdicts"]

    assert (tmp_path / "test.duckdb").exists()


def test_predict_then_finalize(config_file, input_vcf, tmp_path):
    predicted = tmp_path / "predicted.vcf"
    final = tmp_path / "final.vcf"

    result = invoke(config_file, "predict", input_vcf, predicted)
    assert result.exit_code == 0, result.output
    assert "FINAL_PRED=Pathogenic" in predicted.read_text()
    assert "FINAL_PATHOGENICITY" not in predicted.read_text()

    result = invoke(config_file, "finalize", predicted, final)
    assert result.exit_code == 0, result.output
    assert "FINAL_PATHOGENICITY_SOURCE=dbNSFP" in final.read_text()


def test_run_with_workers(config_file, input_vcf, tmp_path):
    serial = tmp_path / "serial.vcf"
    parallel = tmp_path / "parallel.vcf"

    assert invoke(config_file, "run", input_vcf, serial).exit_code == 0
    result = invoke(config_file, "run", input_vcf, parallel, "--workers", "2")

    assert result.exit_code == 0, result.output
    assert "Workers: 2" in result.output
    assert parallel.read_text() == serial.read_text()


def test_malformed_rows_exit_nonzero(config_file, tmp_path):
    input_vcf = tmp_path / "bad.vcf"
    input_vcf.write_text("\n".join(HEADER + [vcf_line("DP=1"), "1\tnot_a_pos\t.\tA\tG\t.\t.\tDP=2"]) + "\n")
    output_vcf = tmp_path / "out.vcf"

    result = invoke(config_file, "run", input_vcf, output_vcf)

    assert result.exit_code == 1
    assert "line 5" in result.output
    # the good row is still written
    assert sum(1 for line in output_vcf.read_text().splitlines() if not line.startswith("#")) == 1


def test_missing_header_exits_nonzero(config_file, tmp_path):
    input_vcf = tmp_path / "bad.vcf"
    input_vcf.write_text(vcf_line("DP=1") + "\n")

    result = invoke(config_file, "run", input_vcf, tmp_path / "out.vcf")

    assert result.exit_code == 1
    assert "Error reading VCF" in result.output


def test_invalid_config_exits_nonzero(tmp_path, input_vcf):
    bad_config = tmp_path / "bad.yaml"
    bad_config.write_text(f"data_dir: {tmp_path / 'data'}\nclinical_labels:\n  pathogenic: P\n")

    result = invoke(bad_config, "run", input_vcf, tmp_path / "out.vcf")

    assert result.exit_code == 1
    assert "failed" in result.output


def test_validate_reports_failures(config_file, input_vcf, tmp_path):
    final = tmp_path / "final.vcf"
    assert invoke(config_file, "run", input_vcf, final).exit_code == 0

    result = invoke(config_file, "validate", final, "--output", tmp_path / "assertions.tsv")

    assert result.exit_code == 0, result.output
    assert "Checked: 3" in result.output
    assert "ALL ASSERTIONS PASSED" in result.output
    assert pl.read_csv(tmp_path / "assertions.tsv", separator="\t").height == 3


def test_validate_exits_nonzero_on_failure(config_file, tmp_path):
    vcf = write_vcf(tmp_path / "in.vcf", ["ASSERT_PATHOGENICITY=Benign;FINAL_PATHOGENICITY=Pathogenic"])

    result = invoke(config_file, "validate", vcf)

    assert result.exit_code == 1
    assert "Failed:  1" in result.output
    assert "expected Benign, got Pathogenic" in result.output


def test_report_requires_stored_run(config_file):
    result = invoke(config_file, "report")

    assert result.exit_code == 1
    assert "classified_variants table not found" in result.output


def test_report_after_run(config_file, input_vcf, tmp_path):
    assert invoke(config_file, "run", input_vcf, tmp_path / "final.vcf").exit_code == 0

    result = invoke(config_file, "report", "--output-dir", tmp_path / "report")

    assert result.exit_code == 0, result.output
    assert "Total variants: 3" in result.output
    assert "ClinVar/HGMD conflicts: 1" in result.output
    assert "dbNSFP: 1" in result.output
    assert (tmp_path / "report" / "verdicts.tsv").exists()
