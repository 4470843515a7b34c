"""Configuration loading with YAML parsing and validation."""

from pathlib import Path
from typing import Any

import pydantic_yaml
import structlog

from .schema import PipelineConfig

logger = structlog.get_logger()

# Repository-relative default used by the CLI when --config is not given
DEFAULT_CONFIG_PATH = Path("config/default.yaml")


def load_config(config_path: Path | str) -> PipelineConfig:
    """
    Load and validate pipeline configuration from a YAML file.

    The label vocabulary is process-wide configuration: it is validated once
    here, and every record classified afterwards relies on it. Any problem is
    therefore raised immediately instead of being deferred to classification.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated PipelineConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If a label is missing or unrecognized, or any
            threshold is out of range
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        yaml_content = f.read()

    config = pydantic_yaml.parse_yaml_raw_as(PipelineConfig, yaml_content)

    logger.debug(
        "config_loaded",
        config_path=str(config_path),
        config_hash=config.config_hash()[:16],
    )

    return config


def load_config_with_overrides(
    config_path: Path | str,
    overrides: dict[str, Any],
) -> PipelineConfig:
    """
    Load config from YAML and apply dictionary overrides.

    Keys may be dotted to reach nested settings (``predictors.min_predictions``).
    Overrides whose value is None are skipped, so unset CLI options can be
    passed through unchanged.

    Args:
        config_path: Path to YAML configuration file
        overrides: Mapping of (possibly dotted) keys to replacement values

    Returns:
        Validated PipelineConfig with overrides applied

    Raises:
        FileNotFoundError: If config file doesn't exist
        KeyError: If a dotted key names a section that doesn't exist
        pydantic.ValidationError: If final config is invalid
    """
    config = load_config(config_path)
    config_dict = config.model_dump()

    applied = {}
    for key, value in overrides.items():
        if value is None:
            continue
        *sections, leaf = key.split(".")
        target = config_dict
        for section in sections:
            target = target[section]
        target[leaf] = value
        applied[key] = value

    if not applied:
        return config

    logger.debug("config_overrides_applied", overrides=applied)
    return PipelineConfig.model_validate(config_dict)
