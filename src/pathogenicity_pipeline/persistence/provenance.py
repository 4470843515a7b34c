"""Provenance tracking for classification runs."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class ProvenanceTracker:
    """
    Tracks provenance metadata for a classification run.

    Records pipeline version, config hash, the label vocabulary in force and
    the processing steps, so an output VCF can be traced back to the exact
    vocabulary and thresholds that produced its verdicts.
    """

    def __init__(self, pipeline_version: str, config: "PipelineConfig"):
        self.pipeline_version = pipeline_version
        self.config_hash = config.config_hash()
        self.clinical_labels = config.clinical_labels.model_dump()
        self.settings = {
            "maf_threshold": config.maf_threshold,
            "enable_benign_star": config.enable_benign_star,
            "predictors": config.predictors.model_dump(),
        }
        self.processing_steps = []
        self.created_at = datetime.now(timezone.utc)

    def record_step(self, step_name: str, details: Optional[dict] = None) -> None:
        """
        Record a processing step.

        Args:
            step_name: Name of the processing step
            details: Optional dictionary of additional details
        """
        step = {
            "step_name": step_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            step["details"] = details
        self.processing_steps.append(step)

    def create_metadata(self) -> dict:
        """
        Create full provenance metadata dictionary.

        Returns:
            Dictionary with all provenance information
        """
        return {
            "pipeline_version": self.pipeline_version,
            "config_hash": self.config_hash,
            "clinical_labels": self.clinical_labels,
            "settings": self.settings,
            "created_at": self.created_at.isoformat(),
            "processing_steps": self.processing_steps,
        }

    def save_sidecar(self, output_path: Path) -> Path:
        """
        Save provenance metadata as a JSON sidecar file.

        Args:
            output_path: Path to the main output file. The sidecar is written
                         next to it as {name without .gz/.vcf}.provenance.json

        Returns:
            Path of the sidecar file
        """
        output_path = Path(output_path)
        name = output_path.name
        for suffix in (".gz", ".vcf"):
            if name.endswith(suffix):
                name = name[: -len(suffix)]
        sidecar_path = output_path.parent / f"{name}.provenance.json"
        sidecar_path.parent.mkdir(parents=True, exist_ok=True)

        with open(sidecar_path, "w") as f:
            json.dump(self.create_metadata(), f, indent=2, default=str)
        return sidecar_path

    @staticmethod
    def load_sidecar(sidecar_path: Path) -> dict:
        with open(sidecar_path) as f:
            return json.load(f)

    @classmethod
    def from_config(
        cls,
        config: "PipelineConfig",
        version: Optional[str] = None
    ) -> "ProvenanceTracker":
        """
        Create ProvenanceTracker from a PipelineConfig.

        Args:
            config: PipelineConfig instance
            version: Pipeline version string. If None, uses pathogenicity_pipeline.__version__
        """
        if version is None:
            from pathogenicity_pipeline import __version__
            version = __version__

        return cls(version, config)
