"""CKD extractor: stage 1-5 or ESRD, arabic or roman numerals."""
from typing import List

from notecoder.core.coding.extractors.base import ConditionExtractor, Findings, with_code
from notecoder.core.coding.patterns import any_match, compile_all, compile_table, first_match
from notecoder.core.models.condition import ComponentFinding, ConditionType, explicit

CKD_KEYWORD_PATTERNS = compile_all([
    r"\bckd\b",
    r"\bchronic\s+kidney\s+disease\b",
    r"\bchronic\s+renal\b",
    r"\besrd\b",
    r"\bend[\s-]+stage\s+renal\b",
])

# "stage 4", "ckd 4", "ckd stage iv"
_STAGE = r"\b(?:stage|ckd)\s*(?:stage\s*)?"

STAGE_TABLE = compile_table([
    (r"\besrd\b|\bend[\s-]+stage\s+renal\b", "esrd"),
    (_STAGE + r"(?:5|v)\b", "5"),
    (_STAGE + r"(?:4|iv)\b", "4"),
    (_STAGE + r"(?:3|iii)\s*b\b", "3b"),
    (_STAGE + r"(?:3|iii)\s*a\b", "3a"),
    (_STAGE + r"(?:3|iii)\b", "3"),
    (_STAGE + r"(?:2|ii)\b", "2"),
    (_STAGE + r"(?:1|i)\b", "1"),
])

STAGE_LABELS = {
    "esrd": "end stage renal disease",
    "3": "stage 3 unspecified",
}


class CKDExtractor(ConditionExtractor):
    condition = ConditionType.CKD
    label = "CKD"
    component_labels = {"stage": "stage (1/2/3a/3b/4/5/ESRD)"}

    def find_components(self, text: str) -> List[ComponentFinding]:
        if not any_match(CKD_KEYWORD_PATTERNS, text):
            return []

        stage = first_match(STAGE_TABLE, text)
        return [explicit("stage", stage)] if stage else []

    def is_detected(self, text: str, findings: Findings) -> bool:
        return any_match(CKD_KEYWORD_PATTERNS, text)

    def suggested_text(self, findings: Findings, icd10: str, valid: bool) -> str:
        stage = findings["stage"].value
        if stage is None:
            return with_code("Chronic kidney disease, stage unspecified", icd10, valid)
        label = STAGE_LABELS.get(stage, f"stage {stage}")
        return with_code(f"Chronic kidney disease, {label}", icd10, valid)
