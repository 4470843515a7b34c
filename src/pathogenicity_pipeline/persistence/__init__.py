"""Persistence layer: DuckDB verdict store and provenance tracking."""

from pathogenicity_pipeline.persistence.duckdb_store import PipelineStore
from pathogenicity_pipeline.persistence.provenance import ProvenanceTracker

__all__ = ["PipelineStore", "ProvenanceTracker"]
