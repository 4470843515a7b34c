"""Pydantic models for pipeline configuration."""

import hashlib
import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Predictor INFO tags with a classification rule (see evidence.predictions)
DEFAULT_PREDICTOR_FIELDS = [
    "SIFT_PRED",
    "POLYPHEN2_HDIV_PRED",
    "LRT_PRED",
    "MUTATIONTASTER_PRED",
    "GERP_RS",
    "PHYLOP20WAY_MAMMALIAN",
]


class ClinicalLabels(BaseModel):
    """Label vocabulary written to FINAL_PATHOGENICITY and FINAL_PRED.

    The five clinical categories are required. Unrecognized keys are
    rejected so a typo in the YAML fails at startup rather than silently
    falling back to a default label.
    """

    model_config = ConfigDict(extra="forbid")

    pathogenic: str = Field(..., min_length=1, description="Label for pathogenic variants")
    likely_pathogenic: str = Field(..., min_length=1, description="Label for likely pathogenic variants")
    likely_benign: str = Field(..., min_length=1, description="Label for likely benign variants")
    benign: str = Field(..., min_length=1, description="Label for benign variants")
    unknown: str = Field(..., min_length=1, description="Label for variants of uncertain significance")
    pred_pathogenic: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Label for a pathogenic predictor consensus (defaults to 'pathogenic')",
    )
    pred_benign: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Label for a benign predictor consensus (defaults to 'benign')",
    )

    @model_validator(mode="after")
    def fill_and_check_labels(self) -> "ClinicalLabels":
        """Default prediction labels and require distinct clinical labels."""
        if self.pred_pathogenic is None:
            self.pred_pathogenic = self.pathogenic
        if self.pred_benign is None:
            self.pred_benign = self.benign

        clinical = [
            self.pathogenic,
            self.likely_pathogenic,
            self.likely_benign,
            self.benign,
            self.unknown,
        ]
        if len(set(clinical)) != len(clinical):
            raise ValueError(f"Clinical labels must be distinct, got {clinical}")
        if self.unknown in (self.pred_pathogenic, self.pred_benign):
            raise ValueError("Prediction labels must differ from the 'unknown' label")
        return self


class PredictorSettings(BaseModel):
    """Predictor consensus inputs and majority-vote thresholds."""

    info_tags: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PREDICTOR_FIELDS),
        description="dbNSFP INFO tags to read predictions from",
    )
    min_predictions: int = Field(
        default=5,
        ge=1,
        description="Minimum contributing algorithms before a verdict is called",
    )
    pathogenic_fraction: float = Field(
        default=0.6,
        gt=0.0,
        le=1.0,
        description="Pathogenic fraction at or above which the consensus is pathogenic",
    )
    benign_fraction: float = Field(
        default=0.4,
        ge=0.0,
        lt=1.0,
        description="Pathogenic fraction at or below which the consensus is benign",
    )

    @model_validator(mode="after")
    def check_neutral_band(self) -> "PredictorSettings":
        """Benign cutoff must sit strictly below the pathogenic cutoff."""
        if self.benign_fraction >= self.pathogenic_fraction:
            raise ValueError(
                f"benign_fraction ({self.benign_fraction}) must be lower than "
                f"pathogenic_fraction ({self.pathogenic_fraction})"
            )
        return self


class AssertionSettings(BaseModel):
    """Assertion tags checked by the validate command."""

    assertion_tags: dict[str, str] = Field(
        default_factory=dict,
        description="Expected-value INFO tag -> output INFO tag it must match",
    )


class PipelineConfig(BaseModel):
    """Main pipeline configuration."""

    clinical_labels: ClinicalLabels = Field(
        ...,
        description="Label vocabulary used in output records",
    )
    predictors: PredictorSettings = Field(
        default_factory=PredictorSettings,
        description="Predictor consensus settings",
    )
    maf_threshold: float = Field(
        default=0.005,
        gt=0.0,
        le=1.0,
        description="Allele frequency at or above which a variant is benign",
    )
    enable_benign_star: bool = Field(
        default=False,
        description="Extra benign-star annotation flag (recorded in provenance)",
    )
    workers: int = Field(
        default=1,
        ge=1,
        description="Worker processes used to classify records",
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory for summaries and provenance output",
    )
    duckdb_path: Optional[Path] = Field(
        default=None,
        description="DuckDB database for verdict summaries (disabled when unset)",
    )
    test: AssertionSettings = Field(
        default_factory=AssertionSettings,
        description="Assertion settings for the validate command",
    )

    @field_validator("data_dir")
    @classmethod
    def create_directory(cls, v: Path) -> Path:
        """Create directory if it doesn't exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values,
        recorded in provenance sidecars to tie outputs to a vocabulary.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
