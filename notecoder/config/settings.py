"""Environment-driven settings for the engine and API."""
import logging
import os
from typing import List

logger = logging.getLogger(__name__)

ENABLED_CONDITIONS_ENV = "NOTECODER_ENABLED_CONDITIONS"

ALL_CONDITIONS = ["mdd", "chf", "copd", "ckd", "diabetes", "opioid_sud"]


def get_api_key() -> str:
    """Get API key from environment or use default.

    Returns:
        API key string
    """
    return os.environ.get("API_KEY", "notecoder-api-key-2024")


def get_enabled_conditions() -> List[str]:
    """Conditions the deployment supports, in canonical order.

    Reads NOTECODER_ENABLED_CONDITIONS (comma separated). Unknown names are
    ignored with a warning; an empty result falls back to all conditions.
    """
    raw = os.environ.get(ENABLED_CONDITIONS_ENV, "")
    if not raw.strip():
        return list(ALL_CONDITIONS)

    requested = {name.strip().lower() for name in raw.split(",") if name.strip()}
    unknown = requested.difference(ALL_CONDITIONS)
    if unknown:
        logger.warning(f"Ignoring unknown conditions in {ENABLED_CONDITIONS_ENV}: {sorted(unknown)}")

    enabled = [name for name in ALL_CONDITIONS if name in requested]
    if not enabled:
        logger.warning(f"{ENABLED_CONDITIONS_ENV} names no known condition, enabling all")
        return list(ALL_CONDITIONS)
    return enabled
