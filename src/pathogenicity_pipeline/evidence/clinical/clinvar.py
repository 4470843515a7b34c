"""ClinVar evidence: worst reported significance, traits and PMIDs."""

import re
from typing import Optional
from urllib.parse import unquote

import structlog

from pathogenicity_pipeline.evidence.clinical.models import ClinicalEvidence, ClinicalLabel
from pathogenicity_pipeline.evidence.clinical.text import is_missing, parse_pmids, unique
from pathogenicity_pipeline.vcf.models import InfoFields

logger = structlog.get_logger()

CLINVAR_SIGNIFICANCE_TAG = "CLINVAR_CLINICAL_SIGNIFICANCE"
CLINVAR_TRAITS_TAG = "CLINVAR_ALL_TRAITS"
CLINVAR_PMIDS_TAG = "CLINVAR_ALL_PMIDS"
CLINVAR_CONFLICTED_TAG = "CLINVAR_CONFLICTED"

# Multiple submitters' calls are listed with any of these separators
_LABEL_SEPARATOR = re.compile(r"[,|;]")
_TRAIT_SEPARATOR = re.compile(r"[,|]")
# '-', '_' and ' ' are interchangeable inside a label ("Likely-pathogenic")
_WORD_SEPARATOR = re.compile(r"[-_ ]")

# Normalized significance token -> category. Numeric entries are the ClinVar
# CLNSIG review codes.
SIGNIFICANCE_TOKENS = {
    "pathogenic": ClinicalLabel.PATHOGENIC,
    "5": ClinicalLabel.PATHOGENIC,
    "likely_pathogenic": ClinicalLabel.LIKELY_PATHOGENIC,
    "4": ClinicalLabel.LIKELY_PATHOGENIC,
    "likely_benign": ClinicalLabel.LIKELY_BENIGN,
    "likely_nonpathogenic": ClinicalLabel.LIKELY_BENIGN,
    "likely_non_pathogenic": ClinicalLabel.LIKELY_BENIGN,
    "3": ClinicalLabel.LIKELY_BENIGN,
    "benign": ClinicalLabel.BENIGN,
    "nonpathogenic": ClinicalLabel.BENIGN,
    "non_pathogenic": ClinicalLabel.BENIGN,
    "2": ClinicalLabel.BENIGN,
}

# Placeholder traits that carry no disease information (compared with
# separators removed, case-insensitively)
SENTINEL_TRAITS = frozenset({"notspecified", "allhighlypenetrant", "highlypenetrant"})


def normalize_significance(token: str) -> str:
    return _WORD_SEPARATOR.sub("_", token.strip().lower())


def worst_significance(raw_labels: list[str]) -> ClinicalLabel:
    """
    Most severe recognized label among all submitted significances.

    Severity order: pathogenic > likely pathogenic > likely benign > benign.
    Matching is case-insensitive and tolerant of '-', '_' and ' ' inside a
    label. The result does not depend on the order of ``raw_labels``.

    Returns:
        Worst ClinicalLabel, or UNKNOWN when nothing is recognized
    """
    worst = ClinicalLabel.UNKNOWN
    for raw in raw_labels:
        for token in _LABEL_SEPARATOR.split(unquote(raw)):
            label = SIGNIFICANCE_TOKENS.get(normalize_significance(token))
            if label is not None and label.severity > worst.severity:
                worst = label
    return worst


def parse_traits(raw: Optional[str]) -> tuple[str, ...]:
    """Split the trait list, de-duplicate, and drop placeholder traits."""
    if is_missing(raw):
        return ()
    traits = _TRAIT_SEPARATOR.split(raw)
    return unique(
        t for t in traits
        if _WORD_SEPARATOR.sub("", unquote(t).strip().lower()) not in SENTINEL_TRAITS
    )


def resolve_clinvar(info: InfoFields) -> Optional[ClinicalEvidence]:
    """
    Normalize a record's ClinVar fields.

    Args:
        info: Parsed INFO fields

    Returns:
        ClinicalEvidence, or None when the record has no (non-empty)
        clinical significance value
    """
    significance = [v for v in info.get_all(CLINVAR_SIGNIFICANCE_TAG) if not is_missing(v)]
    if not significance:
        return None

    conflicted_raw = info.first(CLINVAR_CONFLICTED_TAG)

    evidence = ClinicalEvidence(
        database="ClinVar",
        raw_labels=tuple(significance),
        worst_label=worst_significance(significance),
        diseases=parse_traits(info.first(CLINVAR_TRAITS_TAG)),
        pmids=parse_pmids(info.first(CLINVAR_PMIDS_TAG)),
        conflicted=not is_missing(conflicted_raw) and conflicted_raw != "0",
    )

    logger.debug(
        "clinvar_resolved",
        worst_label=evidence.worst_label.value,
        n_labels=len(significance),
        conflicted=evidence.conflicted,
    )
    return evidence
