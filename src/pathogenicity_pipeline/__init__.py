"""Pathogenicity pipeline: predictor consensus and final clinical classification of annotated variants."""

__version__ = "0.1.0"
