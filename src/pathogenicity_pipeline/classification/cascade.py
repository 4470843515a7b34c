"""Priority cascade reconciling all evidence into one final verdict.

Branches, first match wins:

1. Expert curation
2. Allele frequency >= threshold in any population
3. ClinVar and/or HGMD
4. Predictor consensus (FINAL_PRED)
5. No evidence (VUS)
"""

from typing import Optional
from urllib.parse import unquote

import structlog

from pathogenicity_pipeline.config.schema import PipelineConfig
from pathogenicity_pipeline.classification.models import FinalVerdict
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
from pathogenicity_pipeline.evidence.clinical import (
    CLINVAR_SIGNIFICANCE_TAG,
    has_hgmd_variant_type,
    parse_pmids,
    resolve_clinvar,
    resolve_hgmd,
    unique,
)
from pathogenicity_pipeline.evidence.clinical.text import is_missing
from pathogenicity_pipeline.evidence.predictions.models import (
    FINAL_PRED_TAG,
    NUM_PATH_PREDS_TAG,
    TOTAL_NUM_PREDS_TAG,
)
from pathogenicity_pipeline.vcf.models import InfoFields

logger = structlog.get_logger()

CURATION_PREFIXES = ("CURATED_", "MORL_")
# Any INFO key ending in AF is a population allele frequency
ALLELE_FREQUENCY_SUFFIX = "AF"


def _curated_values(info: InfoFields, suffix: str) -> list[str]:
    tags = {prefix + suffix for prefix in CURATION_PREFIXES}
    return [v for k, v in info.items() if k in tags and not is_missing(v)]


def expert_curation(info: InfoFields) -> Optional[ExpertCuration]:
    """Curated pathogenicity, if any curated value is not '.'."""
    pathogenicities = _curated_values(info, "PATHOGENICITY")
    if not pathogenicities:
        return None

    diseases = []
    for value in _curated_values(info, "DISEASE"):
        diseases.extend(value.split("|"))

    pmids = []
    for value in _curated_values(info, "PMID"):
        pmids.extend(parse_pmids(value))

    comments = _curated_values(info, "COMMENTS")

    return ExpertCuration(
        pathogenicity=pathogenicities[0],
        diseases=unique(diseases),
        pmids=unique(pmids),
        comments=comments[0] if comments else None,
    )


def population_frequency(info: InfoFields, threshold: float) -> Optional[PopulationFrequency]:
    """First allele frequency at or above ``threshold`` across all *AF fields."""
    for key in info.keys():
        if not key.endswith(ALLELE_FREQUENCY_SUFFIX):
            continue
        for raw in info.values(key):
            try:
                frequency = float(raw)
            except ValueError:
                continue
            if frequency >= threshold:
                return PopulationFrequency(field=key, allele_frequency=frequency, threshold=threshold)
    return None


def has_clinical_fields(info: InfoFields) -> bool:
    return CLINVAR_SIGNIFICANCE_TAG in info or has_hgmd_variant_type(info)


def clinical_evidence(info: InfoFields) -> EvidenceSource:
    """Combine ClinVar and HGMD into one of the clinical branches."""
    clinvar = resolve_clinvar(info)
    hgmd = resolve_hgmd(info)

    if clinvar is not None and hgmd is not None:
        if clinvar.agrees_with(hgmd):
            return ClinicalConcordance(clinvar=clinvar, hgmd=hgmd)
        return ClinicalConflict(clinvar=clinvar, hgmd=hgmd)
    if clinvar is not None:
        return ClinVarOnly(clinvar=clinvar)
    if hgmd is not None:
        return HgmdOnly(hgmd=hgmd)
    return UnresolvedClinical()


def _parse_count(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def predictor_evidence(info: InfoFields, unknown_label: str) -> Optional[EvidenceSource]:
    """Predictor consensus recorded in FINAL_PRED, if present and not '.'."""
    final_pred = info.first(FINAL_PRED_TAG)
    if is_missing(final_pred):
        return None

    label = unquote(final_pred)
    if label == unknown_label:
        return InsufficientPredictions()

    return PredictorConsensus(
        label=label,
        pathogenic_count=_parse_count(info.first(NUM_PATH_PREDS_TAG)),
        total_count=_parse_count(info.first(TOTAL_NUM_PREDS_TAG)),
    )


def select_evidence(info: InfoFields, config: PipelineConfig) -> EvidenceSource:
    """
    Run the priority cascade and return the winning evidence source.

    Later branches are never consulted once an earlier one matches, so e.g.
    expert curation overrides any frequency, database, or predictor data.

    Args:
        info: Parsed INFO fields of the record
        config: Pipeline configuration (labels and thresholds)

    Returns:
        Exactly one EvidenceSource variant
    """
    curated = expert_curation(info)
    if curated is not None:
        return curated

    frequent = population_frequency(info, config.maf_threshold)
    if frequent is not None:
        return frequent

    if has_clinical_fields(info):
        return clinical_evidence(info)

    predicted = predictor_evidence(info, config.clinical_labels.unknown)
    if predicted is not None:
        return predicted

    return NoEvidence()


def finalize_pathogenicity(
    info: InfoFields,
    config: PipelineConfig,
    record_key: Optional[str] = None,
) -> tuple[EvidenceSource, FinalVerdict]:
    """
    Classify one record.

    Args:
        info: Parsed INFO fields of the record
        config: Pipeline configuration
        record_key: chrom:pos:ref:alt, used only for log context

    Returns:
        (winning evidence source, flattened final verdict)
    """
    source = select_evidence(info, config)
    log = logger.bind(record=record_key, branch=source.branch)

    if isinstance(source, UnresolvedClinical):
        log.warning(
            "clinical_evidence_unresolved",
            msg="ClinVar/HGMD tags present but neither resolved to a label",
        )
    elif isinstance(source, PredictorConsensus) and source.total_count is None:
        log.warning("prediction_counts_missing", final_pred=source.label)

    verdict = source.to_verdict(config.clinical_labels)
    log.debug("pathogenicity_finalized", pathogenicity=verdict.pathogenicity, source=verdict.source)
    return source, verdict
