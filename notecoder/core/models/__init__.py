"""Domain models.

Condition vocabulary and analysis result records.
"""

from notecoder.core.models.condition import (
    COMPONENT_KEYS,
    ComponentFinding,
    ComponentStatus,
    ConditionType,
    RafImpact,
    RafStatus,
)
from notecoder.core.models.result import (
    RESULT_TYPES,
    AnalysisResult,
    CHFAnalysisResult,
    MDDAnalysisResult,
    SUDAnalysisResult,
    split_components,
)

__all__ = [
    # condition.py
    "ConditionType",
    "ComponentStatus",
    "ComponentFinding",
    "RafImpact",
    "RafStatus",
    "COMPONENT_KEYS",
    # result.py
    "AnalysisResult",
    "MDDAnalysisResult",
    "CHFAnalysisResult",
    "SUDAnalysisResult",
    "RESULT_TYPES",
    "split_components",
]
