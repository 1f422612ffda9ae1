"""Per-condition extractors and the condition → extractor registry."""
from typing import Dict, Optional

from notecoder.core.coding.extractors.base import ConditionExtractor
from notecoder.core.coding.extractors.chf import CHFExtractor
from notecoder.core.coding.extractors.ckd import CKDExtractor
from notecoder.core.coding.extractors.copd import COPDExtractor
from notecoder.core.coding.extractors.diabetes import DiabetesExtractor
from notecoder.core.coding.extractors.mdd import MDDExtractor
from notecoder.core.coding.extractors.sud import SUDExtractor
from notecoder.core.coding.icd10 import ICD10Resolver
from notecoder.core.models.condition import ConditionType

EXTRACTOR_TYPES = {
    ConditionType.MDD: MDDExtractor,
    ConditionType.CHF: CHFExtractor,
    ConditionType.COPD: COPDExtractor,
    ConditionType.CKD: CKDExtractor,
    ConditionType.DIABETES: DiabetesExtractor,
    ConditionType.OPIOID_SUD: SUDExtractor,
}


def build_extractors(resolver: Optional[ICD10Resolver] = None) -> Dict[ConditionType, ConditionExtractor]:
    """One extractor instance per condition, sharing a resolver."""
    resolver = resolver or ICD10Resolver()
    return {condition: cls(resolver) for condition, cls in EXTRACTOR_TYPES.items()}


__all__ = [
    "ConditionExtractor",
    "MDDExtractor",
    "CHFExtractor",
    "COPDExtractor",
    "CKDExtractor",
    "DiabetesExtractor",
    "SUDExtractor",
    "EXTRACTOR_TYPES",
    "build_extractors",
]
