"""
Configuration loader with deep merge.

Precedence (lowest to highest):
1. Defaults (defined in the Pydantic schemas)
2. YAML file
3. Environment variables
4. CLI arguments

The merge is recursive so every key survives at every level.
"""

import os
from pathlib import Path
from typing import Any

import yaml

from .schema import AppConfig


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary whose values win over base

    Returns:
        New merged dictionary. Override wins on leaf conflicts.

    Example:
        >>> deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"b": 99}, "d": 4})
        {'a': {'b': 99, 'c': 2}, 'd': 4}
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_config(config_path: Path | None) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file, or None to skip

    Returns:
        Configuration dict, or an empty dict when there is no file

    Raises:
        FileNotFoundError: If config_path does not exist
    """
    if not config_path:
        return {}

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
        return data if data else {}


def load_env_overrides() -> dict[str, Any]:
    """Load overrides from environment variables.

    Supported variables:
        SKILLBOOK_ROOT: overrides store.root
        SKILLBOOK_MIN_OVERLAP: overrides matcher.min_token_overlap
        SKILLBOOK_LOG_LEVEL: overrides logging.level

    Returns:
        Dict with the overrides found in the environment
    """
    overrides: dict[str, Any] = {}

    if root := os.environ.get("SKILLBOOK_ROOT"):
        overrides.setdefault("store", {})["root"] = root

    if min_overlap := os.environ.get("SKILLBOOK_MIN_OVERLAP"):
        # Pydantic coerces and validates the string
        overrides.setdefault("matcher", {})["min_token_overlap"] = min_overlap

    if log_level := os.environ.get("SKILLBOOK_LOG_LEVEL"):
        overrides.setdefault("logging", {})["level"] = log_level.lower()

    return overrides


def apply_cli_overrides(config_dict: dict[str, Any], cli_args: dict[str, Any]) -> dict[str, Any]:
    """Apply overrides coming from CLI arguments.

    Args:
        config_dict: Base configuration (already merged with YAML and env)
        cli_args: Dict with CLI arguments

    Returns:
        Configuration with the CLI overrides applied
    """
    overrides: dict[str, Any] = {}

    if cli_args.get("root"):
        overrides.setdefault("store", {})["root"] = cli_args["root"]

    if cli_args.get("min_overlap") is not None:
        overrides.setdefault("matcher", {})["min_token_overlap"] = cli_args["min_overlap"]

    if cli_args.get("limit") is not None:
        overrides.setdefault("matcher", {})["limit"] = cli_args["limit"]

    if cli_args.get("log_level"):
        overrides.setdefault("logging", {})["level"] = cli_args["log_level"]

    if cli_args.get("log_file"):
        overrides.setdefault("logging", {})["file"] = cli_args["log_file"]

    if cli_args.get("verbose"):
        overrides.setdefault("logging", {})["verbose"] = cli_args["verbose"]

    return deep_merge(config_dict, overrides)


def load_config(
    config_path: Path | None = None,
    cli_args: dict[str, Any] | None = None,
) -> AppConfig:
    """Load and validate the full application configuration.

    Args:
        config_path: Path to the YAML configuration file
        cli_args: Dict with CLI arguments

    Returns:
        Validated AppConfig

    Raises:
        FileNotFoundError: If config_path does not exist
        ValidationError: If the final configuration is not valid
    """
    cli_args = cli_args or {}

    yaml_config = load_yaml_config(config_path)
    merged = deep_merge(yaml_config, load_env_overrides())
    merged = apply_cli_overrides(merged, cli_args)

    # Pydantic fills in the defaults
    return AppConfig(**merged)
