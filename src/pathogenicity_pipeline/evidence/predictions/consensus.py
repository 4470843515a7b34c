"""Predictor consensus: per-algorithm calls and majority vote."""

import re

import structlog

from pathogenicity_pipeline.config.schema import ClinicalLabels, PredictorSettings
from pathogenicity_pipeline.evidence.predictions.models import (
    CONSERVED,
    FINAL_PRED_TAG,
    NO_DATA_TOKENS,
    NOT_CONSERVED,
    NUM_PATH_PREDS_TAG,
    PREDICTOR_RULES,
    TOTAL_NUM_PREDS_TAG,
    ConsensusResult,
    Prediction,
    PredictorEvidence,
    PredictorRule,
)
from pathogenicity_pipeline.vcf.header import InfoDeclaration
from pathogenicity_pipeline.vcf.models import InfoFields

logger = structlog.get_logger()

# Anything other than letters, digits, '.' and '-' separates prediction tokens
_TOKEN_SEPARATOR = re.compile(r"[^a-zA-Z0-9.\-]+")


def tokenize(raw_values: list[str]) -> list[str]:
    """Split raw INFO values into prediction tokens, dropping empty tokens."""
    tokens = []
    for raw in raw_values:
        tokens.extend(t for t in _TOKEN_SEPARATOR.split(raw) if t)
    return tokens


def evaluate_predictor(rule: PredictorRule, raw_values: list[str]) -> PredictorEvidence:
    """
    Classify one algorithm from all of its raw values in a record.

    Args:
        rule: Interpretation rule for the algorithm
        raw_values: Every value recorded under the algorithm's INFO tag

    Returns:
        PredictorEvidence with classification NO_DATA (no tokens, or only
        '.'/'U'), PATHOGENIC (any token meets the rule), or BENIGN
    """
    tokens = tokenize(raw_values)

    if all(token in NO_DATA_TOKENS for token in tokens):
        classification = Prediction.NO_DATA
    elif rule.is_pathogenic(tokens):
        classification = Prediction.PATHOGENIC
    else:
        classification = Prediction.BENIGN

    return PredictorEvidence(rule=rule, tokens=tuple(tokens), classification=classification)


def collect_predictor_evidence(info: InfoFields, info_tags: list[str]) -> list[PredictorEvidence]:
    """
    Evaluate every configured algorithm present in the record.

    Tags without a rule are ignored; tags absent from the record produce no
    evidence at all.

    Args:
        info: Parsed INFO fields of the record
        info_tags: Configured predictor INFO tags

    Returns:
        One PredictorEvidence per recognized tag present in the record
        (including NO_DATA entries), in configured order
    """
    evidence = []
    for tag in info_tags:
        rule = PREDICTOR_RULES.get(tag)
        if rule is None:
            logger.debug("predictor_rule_missing", tag=tag)
            continue
        raw_values = info.get_all(tag)
        if not raw_values:
            continue
        result = evaluate_predictor(rule, raw_values)
        logger.debug(
            "predictor_evaluated",
            tag=tag,
            tokens=list(result.tokens),
            classification=result.classification.value,
        )
        evidence.append(result)
    return evidence


def majority_verdict(
    pathogenic_count: int,
    total_count: int,
    settings: PredictorSettings,
) -> Prediction:
    """
    Majority vote as a pure function of the two counts.

    - total_count == 0 -> NO_DATA
    - total_count < min_predictions -> UNKNOWN, however lopsided the vote
    - pathogenic fraction >= pathogenic_fraction -> PATHOGENIC
    - pathogenic fraction <= benign_fraction -> BENIGN
    - otherwise (the neutral band) -> UNKNOWN
    """
    if total_count == 0:
        return Prediction.NO_DATA
    if total_count < settings.min_predictions:
        return Prediction.UNKNOWN

    path_score = pathogenic_count / total_count
    if path_score >= settings.pathogenic_fraction:
        return Prediction.PATHOGENIC
    if path_score <= settings.benign_fraction:
        return Prediction.BENIGN
    return Prediction.UNKNOWN


def build_consensus(
    evidence: list[PredictorEvidence],
    settings: PredictorSettings,
) -> ConsensusResult:
    """Tally algorithms with usable data and apply the majority vote."""
    usable = [e for e in evidence if e.has_data]
    total_count = len(usable)
    pathogenic_count = sum(1 for e in usable if e.classification is Prediction.PATHOGENIC)

    return ConsensusResult(
        pathogenic_count=pathogenic_count,
        total_count=total_count,
        verdict=majority_verdict(pathogenic_count, total_count, settings),
    )


def prediction_label(verdict: Prediction, labels: ClinicalLabels) -> str:
    """Vocabulary label written to FINAL_PRED for a consensus verdict."""
    if verdict is Prediction.PATHOGENIC:
        return labels.pred_pathogenic
    if verdict is Prediction.BENIGN:
        return labels.pred_benign
    if verdict is Prediction.UNKNOWN:
        return labels.unknown
    raise ValueError("no-data consensus has no output label")


def consensus_fields(
    evidence: list[PredictorEvidence],
    result: ConsensusResult,
    labels: ClinicalLabels,
) -> list[tuple[str, str]]:
    """
    INFO fields produced by the consensus stage for one record.

    Conservation algorithms with usable data always report C/N, whatever the
    overall verdict. Count and verdict tags are omitted when no algorithm had
    usable data.

    Returns:
        Ordered (tag, value) pairs ready for the emitter
    """
    fields = []
    for item in evidence:
        if item.rule.conservation_tag and item.has_data:
            call = CONSERVED if item.classification is Prediction.PATHOGENIC else NOT_CONSERVED
            fields.append((item.rule.conservation_tag, call))

    if result.verdict is not Prediction.NO_DATA:
        fields.extend([
            (NUM_PATH_PREDS_TAG, str(result.pathogenic_count)),
            (TOTAL_NUM_PREDS_TAG, str(result.total_count)),
            (FINAL_PRED_TAG, prediction_label(result.verdict, labels)),
        ])
    return fields


def predictor_declarations(info_tags: list[str]) -> list[InfoDeclaration]:
    """Header declarations for every tag the consensus stage may write."""
    declarations = [
        InfoDeclaration(NUM_PATH_PREDS_TAG, "Number of pathogenic predictions from dbNSFP"),
        InfoDeclaration(TOTAL_NUM_PREDS_TAG, "Total number of prediction scores available from dbNSFP"),
        InfoDeclaration(FINAL_PRED_TAG, "Final prediction consensus based on majority vote of prediction scores"),
    ]
    for tag in info_tags:
        rule = PREDICTOR_RULES.get(tag)
        if rule is not None and rule.conservation_tag:
            declarations.append(InfoDeclaration(
                rule.conservation_tag,
                f"{rule.name} conservation call (C - conserved, N - non-conserved)",
            ))
    return declarations
