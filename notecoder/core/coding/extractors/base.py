"""
Base class for per-condition extractors.

An extractor resolves each required component of its condition from
normalized note text, then assembles the condition's AnalysisResult:
component partition, ICD-10 code, best-achievable code, suggested
documentation text and a per-component explanation. Extractors never raise
on note content; text with no signal yields every component missing.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from notecoder.core.coding.icd10 import ICD10Resolver
from notecoder.core.coding.normalizer import normalize
from notecoder.core.models.condition import (
    COMPONENT_KEYS,
    ComponentFinding,
    ConditionType,
    RafImpact,
    absent,
)
from notecoder.core.models.result import RESULT_TYPES, AnalysisResult, split_components

logger = logging.getLogger(__name__)

Findings = Dict[str, ComponentFinding]


class ConditionExtractor(ABC):
    """Rule-based validator for one condition."""

    condition: ConditionType

    # Short name used in explanations ("MDD requires ...")
    label: str = ""

    # Component key → human description, in component order
    component_labels: Dict[str, str] = {}

    def __init__(self, resolver: Optional[ICD10Resolver] = None):
        self._resolver = resolver or ICD10Resolver()

    @property
    def component_keys(self):
        return COMPONENT_KEYS[self.condition]

    @abstractmethod
    def find_components(self, text: str) -> List[ComponentFinding]:
        """Resolve components from normalized text. Omitted keys count as absent."""

    @abstractmethod
    def is_detected(self, text: str, findings: Findings) -> bool:
        """Whether the note documents this condition at all."""

    @abstractmethod
    def suggested_text(self, findings: Findings, icd10: str, valid: bool) -> str:
        """Documentation text the clinician could paste into the note."""

    def extra_fields(self, text: str, findings: Findings) -> Dict[str, Any]:
        """Condition-specific result fields."""
        return {}

    def explanation(self, findings: Findings) -> str:
        parts = []
        for i, key in enumerate(self.component_keys, start=1):
            finding = findings[key]
            description = self.component_labels.get(key, key)
            if not finding.present:
                parts.append(f"({i}) {description} missing ❌")
            elif finding.inferred:
                parts.append(f"({i}) {description} ✅ (inferred)")
            else:
                parts.append(f"({i}) {description} ✅")
        count = len(self.component_keys)
        noun = "component" if count == 1 else "components"
        return f"{self.label} requires {count} {noun}: " + " ".join(parts)

    def extract(self, note_text: Optional[str]) -> AnalysisResult:
        """
        Validate one note for this condition.

        Args:
            note_text: Raw or normalized note text (None treated as empty)

        Returns:
            The condition's AnalysisResult variant, without RAF enrichment
        """
        text = normalize(note_text)

        found = {f.key: f for f in self.find_components(text)}
        # Key order fixed by the condition, so present/missing always partition it
        findings = {key: found.get(key) or absent(key) for key in self.component_keys}
        present, missing, inferred = split_components(findings.values())

        values = resolved_values(findings)
        icd10 = self._resolver.resolve(self.condition, values)
        potential = self._resolver.best_code(self.condition, values)
        valid = not missing

        logger.debug(
            f"{self.condition.value}: present={list(present)} missing={list(missing)} "
            f"inferred={list(inferred)} icd10={icd10}"
        )

        result_type = RESULT_TYPES[self.condition]
        return result_type(
            condition_type=self.condition,
            detected=self.is_detected(text, findings),
            valid=valid,
            present_components=present,
            missing_components=missing,
            suggested_text=self.suggested_text(findings, icd10, valid),
            icd10=icd10,
            explanation=self.explanation(findings),
            raf_impact=RafImpact.from_missing_count(len(missing)),
            inferred_components=inferred,
            potential_icd10=potential,
            **self.extra_fields(text, findings),
        )


def resolved_values(findings: Mapping[str, ComponentFinding]) -> Dict[str, str]:
    """Component key → value for present components."""
    return {key: f.value for key, f in findings.items() if f.present}


def with_code(text: str, icd10: str, valid: bool) -> str:
    """Append the code in parentheses when documentation is incomplete."""
    return text if valid else f"{text} ({icd10})"
