"""
Suite loader for assertion suites.

This module provides the public API for loading and validating suite
files from disk or YAML strings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Collection

import yaml

from .models import Suite
from .parser import SchemaParser
from .validation import SchemaValidator, ValidationResult

logger = logging.getLogger(__name__)


def load_suite(
    path: str | Path,
    phrases: Collection[str] | None = None,
) -> tuple[Suite | None, ValidationResult]:
    """
    Load and validate a suite from a YAML file.

    Args:
        path: Path to the YAML suite file
        phrases: Known phrases to check each check's leading phrase against

    Returns:
        Tuple of (Suite or None, ValidationResult)
        If validation fails, Suite will be None.

    Example:
        suite, result = load_suite("suites/payload.yaml")
        if not result.is_valid:
            print(result)
            sys.exit(1)
        # Use suite...
    """
    path = Path(path)

    # Check file exists
    if not path.exists():
        result = ValidationResult()
        result.add_error(
            str(path),
            "File not found",
            suggestion="Check the file path is correct"
        )
        return None, result

    logger.debug(f"Loading suite from {path}")
    return _load(path.read_text(), str(path), phrases)


def validate_suite_yaml(
    yaml_string: str,
    phrases: Collection[str] | None = None,
) -> tuple[Suite | None, ValidationResult]:
    """
    Validate a suite from a YAML string (useful for testing).

    Args:
        yaml_string: YAML content as a string
        phrases: Known phrases to check each check's leading phrase against

    Returns:
        Tuple of (Suite or None, ValidationResult)
    """
    return _load(yaml_string, "yaml", phrases)


def _load(
    content: str,
    source: str,
    phrases: Collection[str] | None,
) -> tuple[Suite | None, ValidationResult]:
    try:
        data: Any = yaml.safe_load(content)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error(
            source,
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)"
        )
        return None, result

    if not isinstance(data, dict):
        result = ValidationResult()
        result.add_error(
            source,
            "Content must be a YAML object (not a list or scalar)",
            value=type(data).__name__
        )
        return None, result

    # Validate schema
    result = SchemaValidator(data, phrases).validate()
    if not result.is_valid:
        logger.debug(f"Suite {source} has {len(result.errors)} validation error(s)")
        return None, result

    # Parse to typed structure
    return SchemaParser(data).parse(), result
