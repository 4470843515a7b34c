"""Tests for ClinVar and HGMD evidence resolution."""

import itertools

import pytest

from pathogenicity_pipeline.evidence.clinical import (
    ClinicalLabel,
    parse_pmids,
    resolve_clinvar,
    resolve_hgmd,
)
from pathogenicity_pipeline.evidence.clinical.clinvar import parse_traits, worst_significance
from pathogenicity_pipeline.vcf.models import InfoFields


# ============================================================================
# ClinVar significance
# ============================================================================

@pytest.mark.parametrize("raw,expected", [
    ("Pathogenic", ClinicalLabel.PATHOGENIC),
    ("Likely pathogenic", ClinicalLabel.LIKELY_PATHOGENIC),
    ("likely-pathogenic", ClinicalLabel.LIKELY_PATHOGENIC),
    ("LIKELY_BENIGN", ClinicalLabel.LIKELY_BENIGN),
    ("non-pathogenic", ClinicalLabel.BENIGN),
    ("Benign", ClinicalLabel.BENIGN),
    ("Uncertain significance", ClinicalLabel.UNKNOWN),
    ("5", ClinicalLabel.PATHOGENIC),
    ("2", ClinicalLabel.BENIGN),
])
def test_single_significance(raw, expected):
    assert worst_significance([raw]) is expected


def test_worst_label_wins():
    assert worst_significance(["Benign,Likely pathogenic|Likely benign"]) is ClinicalLabel.LIKELY_PATHOGENIC
    assert worst_significance(["Benign;Pathogenic"]) is ClinicalLabel.PATHOGENIC


def test_worst_label_is_order_independent():
    labels = ["Benign", "Likely benign", "Likely pathogenic", "Uncertain significance"]
    results = {worst_significance(list(p)) for p in itertools.permutations(labels)}
    assert results == {ClinicalLabel.LIKELY_PATHOGENIC}


def test_encoded_significance_decoded():
    assert worst_significance(["Likely%20pathogenic"]) is ClinicalLabel.LIKELY_PATHOGENIC


def test_resolve_clinvar_fields():
    info = InfoFields.parse(
        "CLINVAR_CLINICAL_SIGNIFICANCE=Pathogenic|Likely_pathogenic;"
        "CLINVAR_ALL_TRAITS=Usher syndrome|not specified|Usher syndrome|AllHighlyPenetrant;"
        "CLINVAR_ALL_PMIDS=12345,67890|12345;"
        "CLINVAR_CONFLICTED=1"
    )

    evidence = resolve_clinvar(info)

    assert evidence.database == "ClinVar"
    assert evidence.worst_label is ClinicalLabel.PATHOGENIC
    assert evidence.diseases == ("Usher syndrome",)
    assert evidence.pmids == ("12345", "67890")
    assert evidence.conflicted


@pytest.mark.parametrize("flag,expected", [("0", False), (".", False), ("1", True), ("2", True)])
def test_clinvar_conflicted_flag(flag, expected):
    info = InfoFields.parse(f"CLINVAR_CLINICAL_SIGNIFICANCE=Benign;CLINVAR_CONFLICTED={flag}")
    assert resolve_clinvar(info).conflicted is expected


def test_clinvar_absent_or_missing():
    assert resolve_clinvar(InfoFields.parse("AF=0.1")) is None
    assert resolve_clinvar(InfoFields.parse("CLINVAR_CLINICAL_SIGNIFICANCE=.")) is None


def test_unrecognized_significance_is_unknown():
    evidence = resolve_clinvar(InfoFields.parse("CLINVAR_CLINICAL_SIGNIFICANCE=drug_response"))
    assert evidence.worst_label is ClinicalLabel.UNKNOWN


def test_sentinel_traits_dropped():
    assert parse_traits("not_specified|Highly penetrant") == ()
    assert parse_traits(".") == ()


# ============================================================================
# HGMD
# ============================================================================

@pytest.mark.parametrize("code,expected", [
    ("DM", ClinicalLabel.PATHOGENIC),
    ("DM?", ClinicalLabel.UNKNOWN),
    ("DP", ClinicalLabel.BENIGN),
    ("DFP", ClinicalLabel.BENIGN),
    ("FP", ClinicalLabel.BENIGN),
    ("FTV", ClinicalLabel.BENIGN),
    ("CNV", ClinicalLabel.BENIGN),
    ("R", ClinicalLabel.UNKNOWN),
])
def test_hgmd_variant_types(code, expected):
    evidence = resolve_hgmd(InfoFields.parse(f"VARIANTTYPE={code}"))
    assert evidence.worst_label is expected


def test_hgmd_prefixed_fields():
    info = InfoFields.parse(
        "HGMD_VARIANTTYPE=DM;HGMD_DISEASE=Usher syndrome 1B;HGMD_PMID=PMID:9382091;HGMD_CONFIDENCE=High"
    )

    evidence = resolve_hgmd(info)

    assert evidence.database == "HGMD"
    assert evidence.diseases == ("Usher syndrome 1B",)
    assert evidence.pmids == ("9382091",)
    assert evidence.confidence == "High"


def test_hgmd_unrecognized_code_is_absent():
    assert resolve_hgmd(InfoFields.parse("VARIANTTYPE=XYZ")) is None
    assert resolve_hgmd(InfoFields.parse("VARIANTTYPE=.")) is None


# ============================================================================
# Shared parsing
# ============================================================================

def test_pmids_strip_non_digit_noise():
    assert parse_pmids("[PMID:123], 456;456") == ("123", "456")
    assert parse_pmids(None) == ()
    assert parse_pmids("") == ()


def test_label_families():
    assert ClinicalLabel.LIKELY_PATHOGENIC.family == ClinicalLabel.PATHOGENIC.family
    assert ClinicalLabel.LIKELY_BENIGN.family == ClinicalLabel.BENIGN.family
    assert ClinicalLabel.UNKNOWN.family != ClinicalLabel.BENIGN.family
