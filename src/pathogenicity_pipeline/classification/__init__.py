"""Finalization engine: priority cascade producing one verdict per variant."""

from pathogenicity_pipeline.classification.models import (
    FINAL_DECLARATIONS,
    FINAL_TAGS,
    FinalVerdict,
)
from pathogenicity_pipeline.classification.sources import (
    ClinicalConcordance,
    ClinicalConflict,
    ClinVarOnly,
    EvidenceSource,
    ExpertCuration,
    HgmdOnly,
    InsufficientPredictions,
    NoEvidence,
    PopulationFrequency,
    PredictorConsensus,
    UnresolvedClinical,
)
from pathogenicity_pipeline.classification.cascade import (
    expert_curation,
    finalize_pathogenicity,
    population_frequency,
    select_evidence,
)

__all__ = [
    "FINAL_DECLARATIONS",
    "FINAL_TAGS",
    "FinalVerdict",
    "EvidenceSource",
    "ExpertCuration",
    "PopulationFrequency",
    "ClinicalConcordance",
    "ClinicalConflict",
    "ClinVarOnly",
    "HgmdOnly",
    "UnresolvedClinical",
    "PredictorConsensus",
    "InsufficientPredictions",
    "NoEvidence",
    "expert_curation",
    "finalize_pathogenicity",
    "population_frequency",
    "select_evidence",
]
