"""Data models for clinical database evidence (ClinVar, HGMD)."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from pathogenicity_pipeline.config.schema import ClinicalLabels


class ClinicalLabel(str, Enum):
    """Pathogenicity categories reported by clinical databases."""

    PATHOGENIC = "pathogenic"
    LIKELY_PATHOGENIC = "likely_pathogenic"
    LIKELY_BENIGN = "likely_benign"
    BENIGN = "benign"
    UNKNOWN = "unknown"

    @property
    def severity(self) -> int:
        """Rank for worst-label resolution (higher = more severe)."""
        return _SEVERITY[self]

    @property
    def family(self) -> str:
        """Agreement class: pathogenic-family, benign-family, or unknown."""
        if self in (ClinicalLabel.PATHOGENIC, ClinicalLabel.LIKELY_PATHOGENIC):
            return "pathogenic"
        if self in (ClinicalLabel.BENIGN, ClinicalLabel.LIKELY_BENIGN):
            return "benign"
        return "unknown"

    def to_output(self, labels: ClinicalLabels) -> str:
        """Vocabulary string for this category."""
        return getattr(labels, self.value)


_SEVERITY = {
    ClinicalLabel.UNKNOWN: 0,
    ClinicalLabel.BENIGN: 1,
    ClinicalLabel.LIKELY_BENIGN: 2,
    ClinicalLabel.LIKELY_PATHOGENIC: 3,
    ClinicalLabel.PATHOGENIC: 4,
}


class ClinicalEvidence(BaseModel):
    """Normalized evidence from one clinical database for one record.

    Attributes:
        database: "ClinVar" or "HGMD"
        raw_labels: Significance/variant-type strings as reported
        worst_label: Most severe recognized label (UNKNOWN when none recognized)
        diseases: De-duplicated disease names, in reported order
        pmids: De-duplicated PubMed IDs (digits only), in reported order
        conflicted: Submitters disagree (ClinVar only)
        confidence: Database confidence/review annotation, if reported
    """

    model_config = ConfigDict(frozen=True)

    database: str
    raw_labels: tuple[str, ...] = ()
    worst_label: ClinicalLabel = ClinicalLabel.UNKNOWN
    diseases: tuple[str, ...] = ()
    pmids: tuple[str, ...] = ()
    conflicted: bool = False
    confidence: Optional[str] = None

    def agrees_with(self, other: "ClinicalEvidence") -> bool:
        """Same label family (e.g. likely pathogenic agrees with pathogenic)."""
        return self.worst_label.family == other.worst_label.family
