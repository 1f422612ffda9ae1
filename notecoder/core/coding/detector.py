"""
Condition auto-detection.

Cheap keyword scan used when the caller does not name a condition. Each
rule carries a priority; the lowest-numbered matching rule wins. Opioid/SUD
has no rule and is only analyzed when requested explicitly.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern

from notecoder.core.models.condition import ConditionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionRule:
    condition: ConditionType
    pattern: Pattern
    priority: int


DETECTION_RULES: List[DetectionRule] = [
    DetectionRule(
        ConditionType.MDD,
        re.compile(r"\bmdd\b|\bmajor\s+depressive\s+disorder\b|\bmajor\s+depression\b", re.IGNORECASE),
        1,
    ),
    DetectionRule(
        ConditionType.CHF,
        re.compile(r"\bchf\b|\bcongestive\s+heart\s+failure\b|\bheart\s+failure\b|\bhf[rp]ef\b", re.IGNORECASE),
        2,
    ),
    DetectionRule(
        ConditionType.COPD,
        re.compile(r"\bcopd\b|\bchronic\s+obstructive\s+pulmonary\b|\bemphysema\b|\bchronic\s+bronchitis\b", re.IGNORECASE),
        3,
    ),
    DetectionRule(
        ConditionType.CKD,
        re.compile(r"\bckd\b|\bchronic\s+kidney\s+disease\b|\besrd\b|\bend[\s-]+stage\s+renal\b", re.IGNORECASE),
        4,
    ),
    DetectionRule(
        ConditionType.DIABETES,
        re.compile(r"\btype\s*(?:2|ii)\s+diabetes\b|\bt2dm\b|\bdiabetes\s+mellitus\b|\bdiabetic\b|\bdm2\b", re.IGNORECASE),
        5,
    ),
]


class ConditionDetector:
    """Pick the most likely condition for a note."""

    def __init__(
        self,
        enabled: Optional[Iterable[ConditionType]] = None,
        rules: Optional[List[DetectionRule]] = None,
    ):
        """
        Args:
            enabled: Conditions allowed as candidates; None means all
            rules: Detection rules; defaults to DETECTION_RULES
        """
        rules = rules if rules is not None else DETECTION_RULES
        allowed = set(enabled) if enabled is not None else None
        self._rules = sorted(
            (r for r in rules if allowed is None or r.condition in allowed),
            key=lambda r: r.priority,
        )

    def detect(self, text: str) -> Optional[ConditionType]:
        """Highest-priority matching condition, or None when nothing matches."""
        for rule in self._rules:
            if rule.pattern.search(text or ""):
                logger.debug(f"Auto-detected {rule.condition.value} (priority {rule.priority})")
                return rule.condition
        return None
