"""Record-at-a-time processing: stages and the VCF runner."""

from pathogenicity_pipeline.processing.stages import (
    ALL_STAGES,
    Stage,
    classify_record,
    stage_declarations,
)
from pathogenicity_pipeline.processing.runner import (
    ClassifiedLine,
    RecordFailure,
    RunSummary,
    classify_line,
    process_vcf,
)

__all__ = [
    "ALL_STAGES",
    "Stage",
    "classify_record",
    "stage_declarations",
    "ClassifiedLine",
    "RecordFailure",
    "RunSummary",
    "classify_line",
    "process_vcf",
]
