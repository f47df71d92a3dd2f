from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper for a mapping run, ensuring that the configuration
dictionary conforms to the expected schema. Handles type coercion, range
clamping and default value injection.
"""

import logging
from typing import Any, Dict, List, Tuple

from dirmap.domain.config import (
    MAX_COMPRESSION_LEVEL,
    MIN_COMPRESSION_LEVEL,
    get_default_config,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Converts untrusted inputs (CLI flags, persisted JSON) into strictly
    typed parameters and fills missing keys with domain defaults.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on invalid values instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for field in ("start_path", "output_path"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    level = _as_int(
        merged.get("compression_level"), defaults["compression_level"],
        "compression_level", warnings, strict
    )
    merged["compression_level"] = _clamp_level(level, warnings, strict)

    workers = _as_int(merged.get("max_workers"), defaults["max_workers"], "max_workers", warnings, strict)
    if workers < 0:
        msg = f"Invalid field 'max_workers': {workers} is negative."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using executor default.")
        workers = 0
    merged["max_workers"] = workers

    log_level = _as_str(merged.get("log_level"), defaults["log_level"], "log_level", warnings, strict).upper()
    if log_level not in _LOG_LEVELS:
        msg = f"Invalid field 'log_level': unknown level '{log_level}'."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        log_level = defaults["log_level"]
    merged["log_level"] = log_level

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Coerce numeric strings into native integers."""
    if value is None:
        return fallback
    if isinstance(value, int) and not isinstance(value, bool):
        return value

    if not strict and isinstance(value, str):
        try:
            converted = int(value.strip())
        except ValueError:
            pass
        else:
            warnings.append(f"Field '{field}' converted from '{value}' to {converted}.")
            return converted

    msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _clamp_level(level: int, warnings: List[str], strict: bool) -> int:
    """Keep the compression level inside the range zstandard accepts."""
    if MIN_COMPRESSION_LEVEL <= level <= MAX_COMPRESSION_LEVEL:
        return level

    msg = (
        f"Compression level {level} outside "
        f"{MIN_COMPRESSION_LEVEL}..{MAX_COMPRESSION_LEVEL}."
    )
    if strict:
        raise ValueError(msg)
    clamped = min(max(level, MIN_COMPRESSION_LEVEL), MAX_COMPRESSION_LEVEL)
    warnings.append(f"{msg} Clamped to {clamped}.")
    return clamped
