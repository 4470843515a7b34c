"""Clinical database evidence layer: ClinVar and HGMD."""

from pathogenicity_pipeline.evidence.clinical.models import ClinicalEvidence, ClinicalLabel
from pathogenicity_pipeline.evidence.clinical.clinvar import (
    CLINVAR_SIGNIFICANCE_TAG,
    parse_traits,
    resolve_clinvar,
    worst_significance,
)
from pathogenicity_pipeline.evidence.clinical.hgmd import (
    VARIANT_TYPE_LABELS,
    has_hgmd_variant_type,
    resolve_hgmd,
)
from pathogenicity_pipeline.evidence.clinical.text import parse_pmids, unique

__all__ = [
    "ClinicalEvidence",
    "ClinicalLabel",
    "CLINVAR_SIGNIFICANCE_TAG",
    "VARIANT_TYPE_LABELS",
    "has_hgmd_variant_type",
    "parse_pmids",
    "parse_traits",
    "resolve_clinvar",
    "resolve_hgmd",
    "unique",
    "worst_significance",
]
