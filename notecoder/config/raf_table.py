"""RAF weight table and per-patient dollar constant.

The default table lives in raf_weights.yaml next to this module. Deployments
can point NOTECODER_RAF_TABLE at another YAML file with the same shape, or
override only the dollar constant with NOTECODER_PMPY_DOLLARS, without
touching code.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from notecoder.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

DEFAULT_RAF_TABLE_PATH = Path(__file__).parent / "raf_weights.yaml"
RAF_TABLE_ENV = "NOTECODER_RAF_TABLE"
PMPY_ENV = "NOTECODER_PMPY_DOLLARS"

DEFAULT_PMPY_DOLLARS = 13000.0


@dataclass(frozen=True)
class RafTable:
    """Code → weight mapping plus the annual per-patient dollar constant."""

    weights: Dict[str, float] = field(default_factory=dict)
    pmpy_dollars: float = DEFAULT_PMPY_DOLLARS
    source: Optional[str] = None

    def weight(self, icd10: Optional[str]) -> float:
        """Weight for a code; codes outside the table carry no weight."""
        if not icd10:
            return 0.0
        return self.weights.get(icd10.strip().upper(), 0.0)


# =============================================================================
# YAML LOADING
# =============================================================================

def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML file and return its contents as a dictionary."""
    if not path.exists():
        raise ConfigurationError(f"RAF table not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"RAF table is not valid YAML: {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"RAF table must be a mapping: {path}")
    return data


def _parse_weights(raw: Any, path: Path) -> Dict[str, float]:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"'weights' must be a mapping of code to weight: {path}")
    weights = {}
    for code, value in raw.items():
        try:
            weight = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Weight for {code} is not a number: {value!r}") from e
        if weight < 0:
            raise ConfigurationError(f"Weight for {code} is negative: {weight}")
        weights[str(code).strip().upper()] = weight
    return weights


def _pmpy_override() -> Optional[float]:
    raw = os.environ.get(PMPY_ENV)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{PMPY_ENV} must be a number, got {raw!r}") from e
    if value < 0:
        raise ConfigurationError(f"{PMPY_ENV} must not be negative, got {value}")
    return value


def load_raf_table(path: Optional[Path] = None) -> RafTable:
    """Read a RAF table from YAML, applying the PMPY environment override.

    Args:
        path: YAML file to read. Defaults to NOTECODER_RAF_TABLE when set,
              otherwise the bundled raf_weights.yaml.

    Raises:
        ConfigurationError: If the file is missing or malformed.
    """
    if path is None:
        env_path = os.environ.get(RAF_TABLE_ENV)
        path = Path(env_path) if env_path else DEFAULT_RAF_TABLE_PATH

    data = _load_yaml(path)
    weights = _parse_weights(data.get("weights", {}), path)

    pmpy = _pmpy_override()
    if pmpy is None:
        try:
            pmpy = float(data.get("pmpy_dollars", DEFAULT_PMPY_DOLLARS))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"pmpy_dollars is not a number: {path}") from e

    logger.info(f"Loaded RAF table with {len(weights)} codes from {path} (PMPY ${pmpy:,.0f})")
    return RafTable(weights=weights, pmpy_dollars=pmpy, source=str(path))


# =============================================================================
# LAZY LOADING CACHE
# =============================================================================

_raf_table_cache: Optional[RafTable] = None


def get_raf_table() -> RafTable:
    """Get the process-wide RAF table, loading it on first use."""
    global _raf_table_cache
    if _raf_table_cache is None:
        _raf_table_cache = load_raf_table()
    return _raf_table_cache


def reload_raf_table() -> RafTable:
    """Force a reload, e.g. after the rate table or environment changed."""
    global _raf_table_cache
    _raf_table_cache = None
    return get_raf_table()
