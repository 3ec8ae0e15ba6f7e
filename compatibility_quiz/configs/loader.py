"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that the scoring settings are usable.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is empty
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    if "scoring" not in config:
        issues.append("Missing required section: scoring")
        return issues

    scoring = config["scoring"] or {}

    min_length = scoring.get("min_token_length")
    if min_length is not None and (not isinstance(min_length, int) or min_length < 1):
        issues.append(f"scoring.min_token_length must be a positive integer, got {min_length}")

    stop_words = scoring.get("stop_words")
    if stop_words is not None and not isinstance(stop_words, list):
        issues.append("scoring.stop_words must be a list")

    # Tiers must be ordered high to low with thresholds in [0, 100]
    tiers = scoring.get("tiers")
    if tiers is not None:
        if not isinstance(tiers, list) or not tiers:
            issues.append("scoring.tiers must be a non-empty list")
        else:
            thresholds = []
            for i, tier in enumerate(tiers):
                if not isinstance(tier, dict) or "threshold" not in tier or "message" not in tier:
                    issues.append(f"scoring.tiers[{i}] needs 'threshold' and 'message'")
                    continue
                threshold = tier["threshold"]
                if not isinstance(threshold, (int, float)) or not 0 <= threshold <= 100:
                    issues.append(f"scoring.tiers[{i}].threshold must be in [0, 100], got {threshold}")
                    continue
                thresholds.append(threshold)
            if len(set(thresholds)) != len(thresholds):
                issues.append("scoring.tiers thresholds must be unique")

    quantiles = config.get("evaluation", {}).get("quantiles", [])
    for q in quantiles:
        if not 0 <= q <= 1:
            issues.append(f"evaluation.quantiles values must be in [0, 1], got {q}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "scoring.min_token_length")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
