"""Classification stages applied to each record."""

from enum import Enum
from typing import Optional

from pathogenicity_pipeline.config.schema import PipelineConfig
from pathogenicity_pipeline.classification import FINAL_DECLARATIONS, finalize_pathogenicity
from pathogenicity_pipeline.evidence.predictions import (
    NUM_PATH_PREDS_TAG,
    TOTAL_NUM_PREDS_TAG,
    build_consensus,
    collect_predictor_evidence,
    consensus_fields,
    predictor_declarations,
)
from pathogenicity_pipeline.output.emitter import emit_fields
from pathogenicity_pipeline.output.summary import VerdictRow
from pathogenicity_pipeline.vcf.header import InfoDeclaration
from pathogenicity_pipeline.vcf.models import VariantRecord


class Stage(str, Enum):
    """Record-level stages, applied in declaration order."""

    PREDICT = "predict"
    FINALIZE = "finalize"


ALL_STAGES = (Stage.PREDICT, Stage.FINALIZE)


def stage_declarations(stages: tuple[Stage, ...], config: PipelineConfig) -> list[InfoDeclaration]:
    """Header declarations for every tag the given stages may write."""
    declarations = []
    if Stage.PREDICT in stages:
        declarations.extend(predictor_declarations(config.predictors.info_tags))
    if Stage.FINALIZE in stages:
        declarations.extend(FINAL_DECLARATIONS)
    return declarations


def apply_prediction_stage(record: VariantRecord, config: PipelineConfig) -> None:
    """Tally predictor evidence and append consensus fields."""
    evidence = collect_predictor_evidence(record.info, config.predictors.info_tags)
    result = build_consensus(evidence, config.predictors)
    emit_fields(record, consensus_fields(evidence, result, config.clinical_labels))


def _count(record: VariantRecord, tag: str) -> Optional[int]:
    value = record.info.first(tag)
    return int(value) if value is not None and value.isdigit() else None


def apply_finalization_stage(record: VariantRecord, config: PipelineConfig) -> VerdictRow:
    """Run the cascade, append the final verdict fields, and return a summary row."""
    source, verdict = finalize_pathogenicity(record.info, config, record_key=record.key)
    emit_fields(record, verdict.to_fields())

    return VerdictRow(
        chrom=record.chrom,
        pos=record.pos,
        ref=record.ref,
        alt=record.alt,
        branch=source.branch,
        pathogenicity=verdict.pathogenicity,
        source=verdict.source,
        reason=verdict.reason,
        clinvar_hgmd_conflict=verdict.clinvar_hgmd_conflict,
        num_path_preds=_count(record, NUM_PATH_PREDS_TAG),
        total_num_preds=_count(record, TOTAL_NUM_PREDS_TAG),
    )


def classify_record(
    record: VariantRecord,
    config: PipelineConfig,
    stages: tuple[Stage, ...] = ALL_STAGES,
) -> Optional[VerdictRow]:
    """
    Apply stages to one record in place.

    Returns:
        VerdictRow when the finalization stage ran, else None

    Raises:
        MalformedRecordError: If emitting would corrupt the record
    """
    row = None
    if Stage.PREDICT in stages:
        apply_prediction_stage(record, config)
    if Stage.FINALIZE in stages:
        row = apply_finalization_stage(record, config)
    return row
