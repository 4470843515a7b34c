"""HGMD evidence: variant-type code, disease and PMIDs."""

from typing import Optional

import structlog

from pathogenicity_pipeline.evidence.clinical.models import ClinicalEvidence, ClinicalLabel
from pathogenicity_pipeline.evidence.clinical.text import is_missing, parse_pmids
from pathogenicity_pipeline.vcf.models import InfoFields

logger = structlog.get_logger()

# HGMD fields appear either bare or with an HGMD_ prefix, depending on how the
# annotation source was prepared
HGMD_PREFIXES = ("", "HGMD_")

# HGMD variant class -> category
VARIANT_TYPE_LABELS = {
    "DM": ClinicalLabel.PATHOGENIC,   # Disease-causing mutation
    "DM?": ClinicalLabel.UNKNOWN,     # Possible disease-causing mutation
    "DP": ClinicalLabel.BENIGN,       # Disease-associated polymorphism
    "DFP": ClinicalLabel.BENIGN,      # Disease-associated polymorphism with functional evidence
    "FP": ClinicalLabel.BENIGN,       # Functional polymorphism
    "FTV": ClinicalLabel.BENIGN,      # Frameshift or truncating variant
    "CNV": ClinicalLabel.BENIGN,      # Copy number variation
    "R": ClinicalLabel.UNKNOWN,       # Retired record
}


def hgmd_field(info: InfoFields, name: str) -> Optional[str]:
    """First value of ``name`` or ``HGMD_<name>``."""
    for prefix in HGMD_PREFIXES:
        value = info.first(prefix + name)
        if value is not None:
            return value
    return None


def has_hgmd_variant_type(info: InfoFields) -> bool:
    return any(prefix + "VARIANTTYPE" in info for prefix in HGMD_PREFIXES)


def resolve_hgmd(info: InfoFields) -> Optional[ClinicalEvidence]:
    """
    Normalize a record's HGMD fields.

    HGMD reports a single call per variant, so no multi-label resolution is
    needed: the variant-type code maps directly to a category.

    Returns:
        ClinicalEvidence, or None when the variant type is absent or not in
        the HGMD vocabulary
    """
    variant_type = hgmd_field(info, "VARIANTTYPE")
    if is_missing(variant_type):
        return None

    label = VARIANT_TYPE_LABELS.get(variant_type)
    if label is None:
        logger.debug("hgmd_variant_type_unrecognized", variant_type=variant_type)
        return None

    disease = hgmd_field(info, "DISEASE")
    confidence = hgmd_field(info, "CONFIDENCE")

    return ClinicalEvidence(
        database="HGMD",
        raw_labels=(variant_type,),
        worst_label=label,
        diseases=() if is_missing(disease) else (disease,),
        pmids=parse_pmids(hgmd_field(info, "PMID")),
        confidence=None if is_missing(confidence) else confidence,
    )
