"""
Congestive heart failure extractor.

Type comes from a documented ejection fraction when one is present, else
from type wording. Acuity combines acute and chronic language; known CHF
with no acuity language is treated as chronic.
"""
import re
from typing import Any, Dict, List, Optional

from notecoder.core.coding.extractors.base import ConditionExtractor, Findings, with_code
from notecoder.core.coding.patterns import any_match, compile_all, compile_table, first_match, word_alternation
from notecoder.core.models.condition import (
    ComponentFinding,
    ConditionType,
    absent,
    explicit,
    inferred,
)

CHF_KEYWORD_PATTERNS = compile_all([
    r"\bchf\b",
    r"\bcongestive\s+heart\s+failure\b",
    r"\bheart\s+failure\b",
    r"\bhfref\b",
    r"\bhfpef\b",
])

EF_PATTERN = re.compile(r"\b(?:lvef|ef)\s*(?:is|of|:|=)?\s*(\d{1,2})\s*%?", re.IGNORECASE)

# Reduced ejection fraction threshold, percent
SYSTOLIC_EF_BELOW = 50

TYPE_TABLE = compile_table([
    (r"\bcombined\b.*\bchf\b|\bchf\b.*\bcombined\b|\bboth\s+systolic\s+and\s+diastolic\b", "combined"),
    (r"\bsystolic\b|\breduced\s+ef\b|\bhfref\b|\bef\s*<\s*[45]0\b|\bsystolic\s+dysfunction\b", "systolic"),
    (r"\bdiastolic\b|\bpreserved\s+ef\b|\bhfpef\b|\bef\s*>=?\s*50\b", "diastolic"),
])

ACUTE_ON_CHRONIC_PATTERNS = compile_all([
    r"\bacute[\s-]+on[\s-]+chronic\b",
])

ACUTE_PATTERNS = compile_all([
    r"\bdecompensated\b",
    r"\bacute\s+exacerbation\b",
    r"\bvolume\s+overload(?:ed)?\b",
    r"\badmitted\s+for\s+chf\b",
    r"\bpulmonary\s+edema\b",
    r"\bacute\s+(?:chf|heart\s+failure)\b",
])

CHRONIC_PATTERNS = compile_all([
    r"\bstable\b",
    r"\bcompensated\b",
    r"\bchronic\s+(?:chf|heart\s+failure)\b",
    r"\bon\s+diuretics\b",
    r"\bdiuretic\b",
])

RESOLVED_PATTERNS = compile_all([
    r"\b(?:chf|heart\s+failure)\s+resolved\b",
])

CHF_MEDICATIONS = [
    "furosemide",
    "lasix",
    "spironolactone",
    "carvedilol",
    "sacubitril",
    "entresto",
    "metolazone",
    "bumetanide",
    "torsemide",
    "eplerenone",
]
MEDICATION_PATTERN = re.compile(word_alternation(CHF_MEDICATIONS), re.IGNORECASE)

MEDICATION_FLAG = "These medications suggest CHF - consider documenting explicitly"
RESOLVED_FLAG = (
    "CHF is a chronic condition that persists even when compensated. "
    "Consider documenting as chronic CHF."
)
HCC_INSIGHT = (
    "I50.9 (unspecified) captures the same HCC as specific codes currently, but "
    "documenting type and acuity future-proofs your documentation for RAF model "
    "updates and demonstrates clinical completeness."
)

ACUITY_LABELS = {
    "acute": "acute",
    "chronic": "chronic",
    "acute_on_chronic": "acute-on-chronic",
}


class CHFExtractor(ConditionExtractor):
    condition = ConditionType.CHF
    label = "CHF"
    component_labels = {
        "chf_keyword": "CHF / heart failure documented",
        "type": "type (systolic/diastolic)",
        "acuity": "acuity (acute/chronic)",
    }

    def find_components(self, text: str) -> List[ComponentFinding]:
        if not any_match(CHF_KEYWORD_PATTERNS, text):
            return []

        chf_type = self._type(text)
        return [
            explicit("chf_keyword", "chf"),
            explicit("type", chf_type) if chf_type else absent("type"),
            self._acuity(text),
        ]

    def _type(self, text: str) -> Optional[str]:
        match = EF_PATTERN.search(text)
        if match:
            return "systolic" if int(match.group(1)) < SYSTOLIC_EF_BELOW else "diastolic"
        return first_match(TYPE_TABLE, text)

    def _acuity(self, text: str) -> ComponentFinding:
        if any_match(ACUTE_ON_CHRONIC_PATTERNS, text):
            return explicit("acuity", "acute_on_chronic")
        acute = any_match(ACUTE_PATTERNS, text)
        chronic = any_match(CHRONIC_PATTERNS, text)
        if acute and chronic:
            return explicit("acuity", "acute_on_chronic")
        if acute:
            return explicit("acuity", "acute")
        if chronic:
            return explicit("acuity", "chronic")
        # Known CHF without an acute flag is chronic
        return inferred("acuity", "chronic")

    def is_detected(self, text: str, findings: Findings) -> bool:
        return findings["chf_keyword"].present

    def suggested_text(self, findings: Findings, icd10: str, valid: bool) -> str:
        chf_type = findings["type"].value or "unspecified"
        acuity = ACUITY_LABELS.get(findings["acuity"].value, "chronic")
        return with_code(f"Congestive Heart Failure, {chf_type}, {acuity}", icd10, valid)

    def extra_fields(self, text: str, findings: Findings) -> Dict[str, Any]:
        flags = []
        documented = findings["chf_keyword"].present
        if not documented and MEDICATION_PATTERN.search(text):
            flags.append(MEDICATION_FLAG)
        if any_match(RESOLVED_PATTERNS, text):
            flags.append(RESOLVED_FLAG)

        insight = None
        if documented and not findings["type"].present:
            insight = HCC_INSIGHT

        return {
            "chf_type": findings["type"].value,
            "chf_acuity": findings["acuity"].value,
            "chf_contextual_flags": tuple(flags),
            "chf_hcc_insight": insight,
        }
