"""
Engine limits and thresholds.

Centralized constants for request size caps and symptom-count heuristics
used by the coding engine and the API layer.
"""

# Request limits
MAX_NOTE_LENGTH = 100_000
"""Maximum characters accepted in a single note by the API layer"""

# DSM-5 symptom count thresholds for severity recommendation
SEVERE_SYMPTOM_COUNT = 8
"""Symptom count at or above which severe is recommended"""

MODERATE_SYMPTOM_COUNT = 6
"""Symptom count at or above which moderate is recommended"""

MILD_SYMPTOM_COUNT = 5
"""Symptom count at or above which mild is recommended (DSM-5 minimum)"""

# Symptom extraction confidence
HIGH_CONFIDENCE_MIN_SYMPTOMS = 5
HIGH_CONFIDENCE_MIN_CHARS = 100
LOW_CONFIDENCE_MAX_SYMPTOMS = 2
LOW_CONFIDENCE_MAX_CHARS = 50
