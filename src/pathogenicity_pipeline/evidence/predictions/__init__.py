"""In-silico predictor consensus evidence layer (dbNSFP scores)."""

from pathogenicity_pipeline.evidence.predictions.models import (
    FINAL_PRED_TAG,
    NUM_PATH_PREDS_TAG,
    PREDICTOR_RULES,
    TOTAL_NUM_PREDS_TAG,
    ConsensusResult,
    Prediction,
    PredictorEvidence,
    PredictorRule,
)
from pathogenicity_pipeline.evidence.predictions.consensus import (
    build_consensus,
    collect_predictor_evidence,
    consensus_fields,
    evaluate_predictor,
    majority_verdict,
    prediction_label,
    predictor_declarations,
    tokenize,
)

__all__ = [
    "FINAL_PRED_TAG",
    "NUM_PATH_PREDS_TAG",
    "TOTAL_NUM_PREDS_TAG",
    "PREDICTOR_RULES",
    "ConsensusResult",
    "Prediction",
    "PredictorEvidence",
    "PredictorRule",
    "build_consensus",
    "collect_predictor_evidence",
    "consensus_fields",
    "evaluate_predictor",
    "majority_verdict",
    "prediction_label",
    "predictor_declarations",
    "tokenize",
]
