"""Evidence sources selected by the finalization cascade.

Each cascade branch yields exactly one of these, carrying only the data that
branch needs. They are flattened to a FinalVerdict with ``to_verdict`` at the
emission boundary.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from pathogenicity_pipeline.config.schema import ClinicalLabels
from pathogenicity_pipeline.classification.models import MISSING, FinalVerdict
from pathogenicity_pipeline.evidence.clinical.models import ClinicalEvidence

NOT_ENOUGH_INFORMATION = "Not enough information"


def join(values) -> str:
    return "|".join(values) if values else MISSING


@dataclass(frozen=True)
class ExpertCuration:
    branch: ClassVar[str] = "expert_curation"

    pathogenicity: str
    diseases: tuple[str, ...] = ()
    pmids: tuple[str, ...] = ()
    comments: Optional[str] = None

    def to_verdict(self, labels: ClinicalLabels) -> FinalVerdict:
        return FinalVerdict(
            pathogenicity=self.pathogenicity,
            source="Expert-curated",
            reason="This variant has been expertly curated.",
            diseases=join(self.diseases),
            pmids=join(self.pmids),
            comments=self.comments or MISSING,
        )


@dataclass(frozen=True)
class PopulationFrequency:
    branch: ClassVar[str] = "maf"

    field: str
    allele_frequency: float
    threshold: float

    def to_verdict(self, labels: ClinicalLabels) -> FinalVerdict:
        benign = labels.benign.replace("_", " ")
        return FinalVerdict(
            pathogenicity=labels.benign,
            source="MAF",
            reason=f"MAF_gte_{self.threshold:g}",
            comments=(
                f"This variant has a MAF greater than or equal to {self.threshold:g} "
                f"in at least one population and is therefore labeled as \"{benign}\""
            ),
        )


@dataclass(frozen=True)
class ClinicalConcordance:
    branch: ClassVar[str] = "clinvar_hgmd"

    clinvar: ClinicalEvidence
    hgmd: ClinicalEvidence

    def to_verdict(self, labels: ClinicalLabels) -> FinalVerdict:
        return FinalVerdict(
            pathogenicity=self.clinvar.worst_label.to_output(labels),
            source="ClinVar/HGMD",
            reason="Found in ClinVar and HGMD",
            diseases=join(tuple(dict.fromkeys(self.hgmd.diseases + self.clinvar.diseases))),
            pmids=join(tuple(dict.fromkeys(self.clinvar.pmids + self.hgmd.pmids))),
            comments="Pathogenicity is based on ClinVar submissions and the literature provided in PubMed.",
            clinvar_hgmd_conflict="0",
        )


@dataclass(frozen=True)
class ClinicalConflict:
    branch: ClassVar[str] = "clinvar_hgmd_conflict"

    clinvar: ClinicalEvidence
    hgmd: ClinicalEvidence

    def to_verdict(self, labels: ClinicalLabels) -> FinalVerdict:
        clinvar_label = self.clinvar.worst_label.to_output(labels)
        hgmd_label = self.hgmd.worst_label.to_output(labels)
        return FinalVerdict(
            pathogenicity=labels.unknown,
            source="ClinVar/HGMD_conflict",
            reason="ClinVar/HGMD_conflict",
            comments=(
                f"ClinVar reports {clinvar_label} while HGMD reports {hgmd_label}. "
                "No pathogenicity is inferred from conflicting databases."
            ),
            clinvar_hgmd_conflict="1",
        )


@dataclass(frozen=True)
class ClinVarOnly:
    branch: ClassVar[str] = "clinvar"

    clinvar: ClinicalEvidence

    def to_verdict(self, labels: ClinicalLabels) -> FinalVerdict:
        if self.clinvar.conflicted:
            agreement = "Please note that not all submitters agree with this pathogenicity."
        else:
            agreement = "All submitters agree with this pathogenicity."
        return FinalVerdict(
            pathogenicity=self.clinvar.worst_label.to_output(labels),
            source="ClinVar",
            reason="Found in ClinVar but not in HGMD",
            diseases=join(self.clinvar.diseases),
            pmids=join(self.clinvar.pmids),
            comments=f"Pathogenicity is based on ClinVar submissions. {agreement}",
        )


@dataclass(frozen=True)
class HgmdOnly:
    branch: ClassVar[str] = "hgmd"

    hgmd: ClinicalEvidence

    def to_verdict(self, labels: ClinicalLabels) -> FinalVerdict:
        return FinalVerdict(
            pathogenicity=self.hgmd.worst_label.to_output(labels),
            source="HGMD",
            reason="Found in HGMD but not in ClinVar",
            diseases=join(self.hgmd.diseases),
            pmids=join(self.hgmd.pmids),
            comments="Pathogenicity is based on the literature provided in PubMed.",
        )


@dataclass(frozen=True)
class UnresolvedClinical:
    """ClinVar/HGMD tags are present but neither resolved to a label.

    Indicates inconsistent upstream annotation; logged as a warning.
    """

    branch: ClassVar[str] = "clinical_unresolved"

    def to_verdict(self, labels: ClinicalLabels) -> FinalVerdict:
        return FinalVerdict(
            pathogenicity=labels.unknown,
            reason=NOT_ENOUGH_INFORMATION,
        )


@dataclass(frozen=True)
class PredictorConsensus:
    branch: ClassVar[str] = "dbnsfp"

    label: str
    pathogenic_count: Optional[int] = None
    total_count: Optional[int] = None

    def to_verdict(self, labels: ClinicalLabels) -> FinalVerdict:
        if self.pathogenic_count is None or self.total_count is None:
            reason = comments = "Pathogenicity is based on prediction data only."
        else:
            reason = f"{self.pathogenic_count}/{self.total_count} pathogenic"
            comments = (
                "Pathogenicity is based on prediction data only. "
                f"{self.pathogenic_count} out of {self.total_count} predictions were pathogenic."
            )
        return FinalVerdict(
            pathogenicity=self.label,
            source="dbNSFP",
            reason=reason,
            comments=comments,
        )


@dataclass(frozen=True)
class InsufficientPredictions:
    branch: ClassVar[str] = "dbnsfp_insufficient"

    def to_verdict(self, labels: ClinicalLabels) -> FinalVerdict:
        return FinalVerdict(
            pathogenicity=labels.unknown,
            reason=NOT_ENOUGH_INFORMATION,
        )


@dataclass(frozen=True)
class NoEvidence:
    branch: ClassVar[str] = "no_evidence"

    def to_verdict(self, labels: ClinicalLabels) -> FinalVerdict:
        return FinalVerdict(
            pathogenicity=labels.unknown,
            reason=NOT_ENOUGH_INFORMATION,
            comments=(
                "This variant is classified as a VUS because there is not enough "
                "evidence to determine its pathogenicity."
            ),
        )


EvidenceSource = Union[
    ExpertCuration,
    PopulationFrequency,
    ClinicalConcordance,
    ClinicalConflict,
    ClinVarOnly,
    HgmdOnly,
    UnresolvedClinical,
    PredictorConsensus,
    InsufficientPredictions,
    NoEvidence,
]
