"""Command-line interface for pathogenicity-pipeline."""
