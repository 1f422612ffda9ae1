"""COPD extractor: GOLD severity and exacerbation status."""
from typing import List

from notecoder.core.coding.extractors.base import ConditionExtractor, Findings, with_code
from notecoder.core.coding.patterns import any_match, compile_all, compile_table, first_match
from notecoder.core.models.condition import ComponentFinding, ConditionType, absent, explicit

COPD_KEYWORD_PATTERNS = compile_all([
    r"\bcopd\b",
    r"\bchronic\s+obstructive\s+pulmonary\b",
    r"\bemphysema\b",
    r"\bchronic\s+bronchitis\b",
])

SEVERITY_TABLE = compile_table([
    (r"\bvery\s+severe\b|\bgold\s*(?:4|iv)\b", "very severe"),
    (r"\bsevere\b|\bgold\s*(?:3|iii)\b", "severe"),
    (r"\bmoderate\b|\bgold\s*(?:2|ii)\b", "moderate"),
    (r"\bmild\b|\bgold\s*(?:1|i)\b", "mild"),
])

EXACERBATION_TABLE = compile_table([
    (r"\bacute\s+lower\s+respiratory\b|\blower\s+resp(?:iratory)?\s+infection\b", "acute_lower_resp"),
    (r"\bexacerbation\b|\bexacerbated\b", "with_exacerbation"),
    (r"\bstable\b", "stable"),
])

EXACERBATION_LABELS = {
    "acute_lower_resp": "with acute lower respiratory infection",
    "with_exacerbation": "with exacerbation",
    "stable": "stable",
}


class COPDExtractor(ConditionExtractor):
    condition = ConditionType.COPD
    label = "COPD"
    component_labels = {
        "severity": "severity (GOLD 1-4)",
        "exacerbation_status": "exacerbation status",
    }

    def find_components(self, text: str) -> List[ComponentFinding]:
        if not any_match(COPD_KEYWORD_PATTERNS, text):
            return []

        findings = []
        severity = first_match(SEVERITY_TABLE, text)
        if severity:
            findings.append(explicit("severity", severity))
        status = first_match(EXACERBATION_TABLE, text)
        if status:
            findings.append(explicit("exacerbation_status", status))
        return findings

    def is_detected(self, text: str, findings: Findings) -> bool:
        return any_match(COPD_KEYWORD_PATTERNS, text)

    def suggested_text(self, findings: Findings, icd10: str, valid: bool) -> str:
        severity = findings["severity"].value or "severity unspecified"
        status = EXACERBATION_LABELS.get(
            findings["exacerbation_status"].value, "exacerbation status unspecified"
        )
        return with_code(f"COPD, {severity}, {status}", icd10, valid)
