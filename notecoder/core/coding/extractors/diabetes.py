"""
Type 2 diabetes extractor.

Type 2 is satisfied by explicit wording, or inferred when diabetes is
mentioned with no Type 1 marker. Complication is the first documented
complication, or an explicit with/without-complications statement.
"""
from typing import List

from notecoder.core.coding.extractors.base import ConditionExtractor, Findings, with_code
from notecoder.core.coding.patterns import any_match, compile_all, compile_table, first_match
from notecoder.core.models.condition import (
    ComponentFinding,
    ConditionType,
    explicit,
    inferred,
)

DIABETES_PATTERNS = compile_all([
    r"\bdiabetes\b",
    r"\bdiabetic\b",
    r"\bdm\d?\b",
    r"\bt[12]dm\b",
])

TYPE_2_PATTERNS = compile_all([
    r"\btype\s*(?:2|ii)\b",
    r"\bt2\b",
    r"\bt2dm\b",
    r"\bdm2\b",
])

TYPE_1_PATTERNS = compile_all([
    r"\btype\s*(?:1|i)\b",
    r"\bt1dm\b",
    r"\bdm1\b",
])

COMPLICATION_TABLE = compile_table([
    (r"\bnephropathy\b|\bdiabetic\s+kidney\s+disease\b", "nephropathy"),
    (r"\bretinopathy\b", "retinopathy"),
    (r"\bneuropathy\b", "neuropathy"),
    (r"\bperipheral\s+(?:angiopathy|vascular)\b", "peripheral_angiopathy"),
    (r"\bhyperglycemia\b", "hyperglycemia"),
    (r"\bwithout\s+complications?\b|\bno\s+complications?\b|\buncomplicated\b", "none"),
    (r"\bwith\s+complications?\b|\bcomplicated\b", "other"),
])

COMPLICATION_LABELS = {
    "none": "without complications",
    "nephropathy": "with diabetic nephropathy",
    "retinopathy": "with diabetic retinopathy",
    "neuropathy": "with diabetic neuropathy",
    "peripheral_angiopathy": "with diabetic peripheral angiopathy",
    "hyperglycemia": "with hyperglycemia",
    "other": "with other specified complications",
}


class DiabetesExtractor(ConditionExtractor):
    condition = ConditionType.DIABETES
    label = "Diabetes (T2)"
    component_labels = {
        "type": "Type 2",
        "complication": "complication (with/without; type if with)",
    }

    def find_components(self, text: str) -> List[ComponentFinding]:
        if not any_match(DIABETES_PATTERNS, text):
            return []

        findings = []
        if any_match(TYPE_2_PATTERNS, text):
            findings.append(explicit("type", "type_2"))
        elif not any_match(TYPE_1_PATTERNS, text):
            findings.append(inferred("type", "type_2"))

        complication = first_match(COMPLICATION_TABLE, text)
        if complication:
            findings.append(explicit("complication", complication))
        return findings

    def is_detected(self, text: str, findings: Findings) -> bool:
        return any_match(DIABETES_PATTERNS, text) and findings["type"].present

    def suggested_text(self, findings: Findings, icd10: str, valid: bool) -> str:
        complication = COMPLICATION_LABELS.get(
            findings["complication"].value, "complication status unspecified"
        )
        return with_code(f"Type 2 diabetes mellitus, {complication}", icd10, valid)
