"""Rule-based clinical documentation coding."""
from notecoder.core.coding.engine import CodingEngine
from notecoder.core.coding.icd10 import ICD10Resolver
from notecoder.core.coding.raf import RafCalculator
from notecoder.core.coding.symptoms import extract_symptoms

__all__ = [
    "CodingEngine",
    "ICD10Resolver",
    "RafCalculator",
    "extract_symptoms",
]
