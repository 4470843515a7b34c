"""Data models for in-silico predictor evidence and consensus."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

# INFO tags written by the consensus stage
NUM_PATH_PREDS_TAG = "NUM_PATH_PREDS"
TOTAL_NUM_PREDS_TAG = "TOTAL_NUM_PREDS"
FINAL_PRED_TAG = "FINAL_PRED"
GERP_PRED_TAG = "GERP_PRED"
PHYLOP20WAY_MAMMALIAN_PRED_TAG = "PHYLOP20WAY_MAMMALIAN_PRED"

# Raw tokens meaning "no prediction for this algorithm"
NO_DATA_TOKENS = frozenset({".", "U"})

CONSERVED = "C"
NOT_CONSERVED = "N"


class Prediction(str, Enum):
    """Classification of a single algorithm or of the consensus."""

    PATHOGENIC = "pathogenic"
    BENIGN = "benign"
    UNKNOWN = "unknown"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class PredictorRule:
    """How to read one algorithm's raw scores.

    Token rules list the categorical calls that count as pathogenic.
    Numeric (conservation) rules compare each value against ``threshold``;
    they also emit a conserved/non-conserved call under ``conservation_tag``.
    """

    tag: str
    name: str
    pathogenic_tokens: frozenset = frozenset()
    threshold: Optional[float] = None
    inclusive: bool = False
    conservation_tag: Optional[str] = None

    @property
    def is_numeric(self) -> bool:
        return self.threshold is not None

    def is_pathogenic(self, tokens: list[str]) -> bool:
        """True if ANY token meets the rule (one vote per algorithm)."""
        if not self.is_numeric:
            return any(token in self.pathogenic_tokens for token in tokens)

        for token in tokens:
            try:
                score = float(token)
            except ValueError:
                continue
            if math.isnan(score):
                continue
            if score > self.threshold or (self.inclusive and score == self.threshold):
                return True
        return False


PREDICTOR_RULES: dict[str, PredictorRule] = {
    rule.tag: rule
    for rule in [
        PredictorRule("SIFT_PRED", "SIFT", pathogenic_tokens=frozenset({"D"})),
        PredictorRule("POLYPHEN2_HDIV_PRED", "PolyPhen2 (HDIV)", pathogenic_tokens=frozenset({"D", "P"})),
        PredictorRule("LRT_PRED", "LRT", pathogenic_tokens=frozenset({"D"})),
        PredictorRule("MUTATIONTASTER_PRED", "MutationTaster", pathogenic_tokens=frozenset({"D", "A"})),
        PredictorRule(
            "GERP_RS",
            "GERP++",
            threshold=0.0,
            inclusive=False,
            conservation_tag=GERP_PRED_TAG,
        ),
        PredictorRule(
            "PHYLOP20WAY_MAMMALIAN",
            "phyloP20way mammalian",
            threshold=0.95,
            inclusive=True,
            conservation_tag=PHYLOP20WAY_MAMMALIAN_PRED_TAG,
        ),
    ]
}


@dataclass(frozen=True)
class PredictorEvidence:
    """Raw tokens and derived call for one algorithm in one record.

    classification is PATHOGENIC, BENIGN, or NO_DATA (all tokens in
    {'.', 'U'} or no tokens at all).
    """

    rule: PredictorRule
    tokens: tuple[str, ...]
    classification: Prediction

    @property
    def has_data(self) -> bool:
        return self.classification is not Prediction.NO_DATA


class ConsensusResult(BaseModel):
    """Majority vote over algorithms with usable data.

    Attributes:
        pathogenic_count: Algorithms classified pathogenic
        total_count: Algorithms with usable (non-no-data) evidence
        verdict: NO_DATA iff total_count == 0; otherwise PATHOGENIC, BENIGN or UNKNOWN
    """

    pathogenic_count: int = Field(..., ge=0)
    total_count: int = Field(..., ge=0)
    verdict: Prediction

    @model_validator(mode="after")
    def check_counts(self) -> "ConsensusResult":
        if self.pathogenic_count > self.total_count:
            raise ValueError(
                f"pathogenic_count ({self.pathogenic_count}) exceeds total_count ({self.total_count})"
            )
        if (self.verdict is Prediction.NO_DATA) != (self.total_count == 0):
            raise ValueError("verdict must be no_data exactly when total_count is 0")
        return self

    @property
    def path_score(self) -> Optional[float]:
        if self.total_count == 0:
            return None
        return self.pathogenic_count / self.total_count
