from .loader import load_config, load_config_with_overrides
from .schema import ClinicalLabels, PipelineConfig, PredictorSettings, AssertionSettings

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "PipelineConfig",
    "ClinicalLabels",
    "PredictorSettings",
    "AssertionSettings",
]
