"""
Condition and component vocabulary.

Closed enumerations shared by every extractor, the resolver and the
RAF calculator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from notecoder.core.exceptions import ValidationError


class ConditionType(Enum):
    """Supported clinical conditions. AUTO is a request-time value only."""

    MDD = "mdd"
    CHF = "chf"
    COPD = "copd"
    CKD = "ckd"
    DIABETES = "diabetes"
    OPIOID_SUD = "opioid_sud"
    AUTO = "auto"

    @classmethod
    def parse(cls, value) -> "ConditionType":
        """Parse a request value into a ConditionType.

        Raises:
            ValidationError: If the value names no known condition.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        valid = ", ".join(c.value for c in cls)
        raise ValidationError(f"conditionType must be one of: {valid} (got {value!r})")


class ComponentStatus(Enum):
    """How a required component was resolved."""

    EXPLICIT = "explicit"
    INFERRED = "inferred"
    ABSENT = "absent"


class RafImpact(Enum):
    """Coarse documentation-gap rating."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_missing_count(cls, missing: int) -> "RafImpact":
        if missing >= 2:
            return cls.HIGH
        if missing == 1:
            return cls.MEDIUM
        return cls.LOW


class RafStatus(Enum):
    """Documentation completeness against risk-adjustment value."""

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    MISSING = "missing"


# Ordered component keys per condition; present/missing always partition these
COMPONENT_KEYS: Dict[ConditionType, Tuple[str, ...]] = {
    ConditionType.MDD: ("major_keyword", "severity", "episode_type"),
    ConditionType.CHF: ("chf_keyword", "type", "acuity"),
    ConditionType.COPD: ("severity", "exacerbation_status"),
    ConditionType.CKD: ("stage",),
    ConditionType.DIABETES: ("type", "complication"),
    ConditionType.OPIOID_SUD: ("substance", "severity", "remission_status"),
}


@dataclass(frozen=True)
class ComponentFinding:
    """Resolution of one required component."""

    key: str
    status: ComponentStatus = ComponentStatus.ABSENT
    value: Optional[str] = None

    @property
    def present(self) -> bool:
        return self.status is not ComponentStatus.ABSENT

    @property
    def inferred(self) -> bool:
        return self.status is ComponentStatus.INFERRED


def explicit(key: str, value: str) -> ComponentFinding:
    return ComponentFinding(key, ComponentStatus.EXPLICIT, value)


def inferred(key: str, value: str) -> ComponentFinding:
    return ComponentFinding(key, ComponentStatus.INFERRED, value)


def absent(key: str) -> ComponentFinding:
    return ComponentFinding(key, ComponentStatus.ABSENT, None)
