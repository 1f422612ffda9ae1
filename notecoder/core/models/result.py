"""
Analysis result records.

One immutable record per analyzed note. The shared base carries the fields
every condition reports; MDD, CHF and SUD results extend it with their own
derived fields. Consumers key condition-specific fields off condition_type.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple, Type

from notecoder.core.models.condition import (
    ComponentFinding,
    ConditionType,
    RafImpact,
    RafStatus,
)


@dataclass(frozen=True)
class AnalysisResult:
    """Validation outcome for one condition in one note."""

    condition_type: ConditionType
    detected: bool
    valid: bool
    present_components: Tuple[str, ...]
    missing_components: Tuple[str, ...]
    suggested_text: str
    icd10: str
    explanation: str
    raf_impact: RafImpact

    # Present components resolved by inference or clinical default
    inferred_components: Tuple[str, ...] = ()

    # Best-achievable code for a fully documented note of this condition
    potential_icd10: Optional[str] = None

    # RAF enrichment (filled by RafCalculator)
    current_raf_weight: Optional[float] = None
    potential_raf_weight: Optional[float] = None
    raf_dollar_impact: Optional[float] = None
    raf_status: Optional[RafStatus] = None

    @property
    def has_raf(self) -> bool:
        return None not in (
            self.current_raf_weight,
            self.potential_raf_weight,
            self.raf_dollar_impact,
            self.raf_status,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view: enums as values, tuples as lists."""
        data = {}
        for f in fields(self):
            data[f.name] = _plain(getattr(self, f.name))
        return data


@dataclass(frozen=True)
class MDDAnalysisResult(AnalysisResult):
    """MDD result with episode inference and DSM-5 symptom extraction."""

    episode_type_inferred: bool = False
    documentation_tip: Optional[str] = None
    symptoms_extracted: Tuple[str, ...] = ()
    symptoms_found: Tuple[str, ...] = ()
    symptom_count: int = 0
    has_si: bool = False
    has_psychotic_features: bool = False
    has_functional_impairment: bool = False
    severity_recommendation: Optional[str] = None
    severity_explicit: bool = False
    symptom_confidence: Optional[str] = None


@dataclass(frozen=True)
class CHFAnalysisResult(AnalysisResult):
    """CHF result with resolved type/acuity and contextual flags."""

    chf_type: Optional[str] = None
    chf_acuity: Optional[str] = None
    chf_contextual_flags: Tuple[str, ...] = ()
    chf_hcc_insight: Optional[str] = None


@dataclass(frozen=True)
class SUDAnalysisResult(AnalysisResult):
    """Opioid/SUD result with substance, severity and remission status."""

    sud_substance: Optional[str] = None
    sud_severity: Optional[str] = None
    sud_remission_status: Optional[str] = None
    sud_contextual_flags: Tuple[str, ...] = ()


RESULT_TYPES: Dict[ConditionType, Type[AnalysisResult]] = {
    ConditionType.MDD: MDDAnalysisResult,
    ConditionType.CHF: CHFAnalysisResult,
    ConditionType.COPD: AnalysisResult,
    ConditionType.CKD: AnalysisResult,
    ConditionType.DIABETES: AnalysisResult,
    ConditionType.OPIOID_SUD: SUDAnalysisResult,
}


def split_components(
    findings: Iterable[ComponentFinding],
) -> Tuple[Tuple[str, ...], Tuple[str, ...], Tuple[str, ...]]:
    """Split findings into (present, missing, inferred) key tuples, order kept."""
    present, missing, inferred = [], [], []
    for finding in findings:
        if finding.present:
            present.append(finding.key)
            if finding.inferred:
                inferred.append(finding.key)
        else:
            missing.append(finding.key)
    return tuple(present), tuple(missing), tuple(inferred)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [_plain(v) for v in value]
    return value
