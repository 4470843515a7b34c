"""Tests for assertion-tag checks."""

import pytest

from pathogenicity_pipeline.processing import process_vcf
from pathogenicity_pipeline.validation import check_assertions, summarize_assertions
from pathogenicity_pipeline.vcf.models import MalformedRecordError

from conftest import write_vcf

TAGS = {"ASSERT_PATHOGENICITY": "FINAL_PATHOGENICITY"}


def test_assertions_against_finalized_output(tmp_path, config):
    input_path = write_vcf(tmp_path / "in.vcf", [
        "POP1_AF=0.2;ASSERT_PATHOGENICITY=Benign",
        "VARIANTTYPE=DM;ASSERT_PATHOGENICITY=Benign",
        "DP=10",
        "ASSERT_PATHOGENICITY=Unknown_significance",
    ])
    output_path = tmp_path / "out.vcf"
    process_vcf(input_path, output_path, config)

    results = check_assertions(output_path, TAGS)

    assert results.height == 3
    assert results["pos"].to_list() == [1000, 1001, 1003]
    assert results["passed"].to_list() == [True, False, True]
    assert results.row(1, named=True)["observed"] == "Pathogenic"

    summary = summarize_assertions(results)
    assert summary["checked"] == 3
    assert summary["passed"] == 2
    assert summary["failed"] == 1
    assert summary["by_tag"] == {"ASSERT_PATHOGENICITY": {"passed": 2, "failed": 1}}


def test_missing_output_tag_observed_as_missing(tmp_path):
    vcf = write_vcf(tmp_path / "in.vcf", ["ASSERT_PATHOGENICITY=Benign"])

    results = check_assertions(vcf, TAGS)

    assert results["observed"].to_list() == ["."]
    assert results["passed"].to_list() == [False]


def test_encoded_values_compared_decoded(tmp_path):
    vcf = write_vcf(tmp_path / "in.vcf", [
        "ASSERT_COMMENT=Not enough information;FINAL_PATHOGENICITY_REASON=Not%20enough%20information",
    ])

    results = check_assertions(vcf, {"ASSERT_COMMENT": "FINAL_PATHOGENICITY_REASON"})

    assert results["passed"].to_list() == [True]


def test_no_assertions(tmp_path):
    results = check_assertions(write_vcf(tmp_path / "in.vcf", ["DP=1"]), TAGS)

    assert results.height == 0
    assert summarize_assertions(results) == {"checked": 0, "passed": 0, "failed": 0, "by_tag": {}}


def test_malformed_row_raises(tmp_path):
    vcf = write_vcf(tmp_path / "in.vcf", ["ASSERT_PATHOGENICITY=Benign;=x"])

    with pytest.raises(MalformedRecordError):
        check_assertions(vcf, TAGS)
