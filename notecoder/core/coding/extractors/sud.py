"""
Opioid / substance use disorder extractor.

Substance is resolved first; severity and remission wording are then read
against that substance. Chronic opioid therapy language resolves opioid
severity to physiologic dependence by inference, and always raises a
contextual flag when no explicit dependence or abuse wording is present.
"""
import re
from typing import Any, Dict, List, Optional

from notecoder.core.coding.extractors.base import ConditionExtractor, Findings
from notecoder.core.coding.patterns import (
    any_match,
    compile_all,
    compile_table,
    first_match,
    word_alternation,
)
from notecoder.core.models.condition import (
    ComponentFinding,
    ConditionType,
    absent,
    explicit,
    inferred,
)

OPIOID_AGENTS = [
    "hydrocodone",
    "oxycodone",
    "tramadol",
    "morphine",
    "fentanyl",
    "oxycontin",
    "norco",
    "vicodin",
    "percocet",
    "ms contin",
    "duragesic",
]

MAT_MEDICATIONS = [
    "buprenorphine",
    "suboxone",
    "subutex",
    "naltrexone",
    "vivitrol",
    "methadone",
]

# Regex alternation of the words that name each substance
SUBSTANCE_VOCABULARY: Dict[str, str] = {
    "opioid": r"opioids?|opiates?|oud|heroin|" + "|".join(re.escape(a).replace(r"\ ", r"\s+") for a in OPIOID_AGENTS),
    "alcohol": r"alcohol|alcoholism|alcoholic|aud|etoh",
    "cannabis": r"cannabis|marijuana|thc",
    "stimulant": r"stimulants?|meth|methamphetamine|cocaine|amphetamines?",
}

SUBSTANCE_TABLE = compile_table(
    [(rf"\b(?:{vocabulary})\b", substance) for substance, vocabulary in SUBSTANCE_VOCABULARY.items()]
)

OPIOID_THERAPY_PATTERN = re.compile(word_alternation(OPIOID_AGENTS), re.IGNORECASE)

LONG_TERM_PATTERNS = compile_all([
    r"\bstable\s+on\b",
    r"\bchronic\s+opioid\b",
    r"\blong[\s-]+term\b",
    r"\b(?:months?|years?)\s+of\b",
])

REMISSION_PATTERNS = compile_all([
    r"\bin\s+(?:early\s+|sustained\s+)?remission\b",
    word_alternation(MAT_MEDICATIONS),
    r"\bmat\b",
    r"\brecovery\b",
    r"\bsobriety\b",
    r"\bsober\b",
])

ACTIVE_PATTERNS = compile_all([
    r"\bactive(?:ly)?\s+(?:use|using|drinking)\b",
    r"\bcurrently\s+(?:using|drinking)\b",
    r"\brelapsed?\b",
])

SUBSTANCE_LABELS = {
    "opioid": "Opioid",
    "alcohol": "Alcohol",
    "cannabis": "Cannabis",
    "stimulant": "Stimulant",
}

SEVERITY_LABELS = {
    "dependence": "dependence, uncomplicated",
    "abuse": "abuse",
}

PHYSIOLOGIC_DEPENDENCE_FLAG = (
    "Physiologic dependence (F11.20) is not addiction. A patient stable on chronic "
    "opioid therapy who would experience withdrawal = opioid dependence by DSM-5 "
    "definition. Documenting this HCC reflects accurate clinical status."
)


def _severity_tables(vocabulary: str):
    dependence = compile_all([
        rf"\b(?:{vocabulary})\s+(?:dependence|use\s+disorder)\b",
        rf"\bdependent\s+on\s+(?:{vocabulary})\b",
        rf"\bdependence\b.*\b(?:{vocabulary})\b",
    ])
    abuse = compile_all([
        rf"\b(?:{vocabulary})\s+(?:abuse|misuse)\b",
        rf"\b(?:abuse|misuse)\s+of\s+(?:{vocabulary})\b",
    ])
    return dependence, abuse


SEVERITY_PATTERNS = {
    substance: _severity_tables(vocabulary) for substance, vocabulary in SUBSTANCE_VOCABULARY.items()
}

# Opioid-only wording that names dependence without the substance word
OPIOID_DEPENDENCE_PATTERNS = compile_all([
    r"\bphysiologic(?:al)?\s+dependence\b",
    r"\boud\b",
])


class SUDExtractor(ConditionExtractor):
    condition = ConditionType.OPIOID_SUD
    label = "Opioid/SUD"
    component_labels = {
        "substance": "substance specified",
        "severity": "severity (dependence/abuse)",
        "remission_status": "remission status",
    }

    def find_components(self, text: str) -> List[ComponentFinding]:
        substance = first_match(SUBSTANCE_TABLE, text)
        if substance is None:
            return []
        return [
            explicit("substance", substance),
            self._severity(text, substance),
            self._remission(text, substance),
        ]

    def _explicit_severity(self, text: str, substance: str) -> Optional[str]:
        dependence, abuse = SEVERITY_PATTERNS[substance]
        if any_match(dependence, text):
            return "dependence"
        if substance == "opioid" and any_match(OPIOID_DEPENDENCE_PATTERNS, text):
            return "dependence"
        if any_match(abuse, text):
            return "abuse"
        return None

    def _severity(self, text: str, substance: str) -> ComponentFinding:
        value = self._explicit_severity(text, substance)
        if value:
            return explicit("severity", value)
        if substance == "opioid" and self._on_chronic_opioid_therapy(text):
            return inferred("severity", "dependence")
        return absent("severity")

    def _on_chronic_opioid_therapy(self, text: str) -> bool:
        return bool(OPIOID_THERAPY_PATTERN.search(text)) and any_match(LONG_TERM_PATTERNS, text)

    def _remission(self, text: str, substance: str) -> ComponentFinding:
        if any_match(REMISSION_PATTERNS, text):
            return explicit("remission_status", "in_remission")
        history = rf"\bhistory\s+of\s+(?:{SUBSTANCE_VOCABULARY[substance]}|substance)\b"
        if re.search(history, text, re.IGNORECASE):
            return explicit("remission_status", "in_remission")
        if any_match(ACTIVE_PATTERNS, text):
            return explicit("remission_status", "active")
        return inferred("remission_status", "active")

    def is_detected(self, text: str, findings: Findings) -> bool:
        return findings["substance"].present

    def suggested_text(self, findings: Findings, icd10: str, valid: bool) -> str:
        substance = SUBSTANCE_LABELS.get(findings["substance"].value, "Substance")
        severity = SEVERITY_LABELS.get(findings["severity"].value, "use, unspecified")
        remission = ", in remission" if findings["remission_status"].value == "in_remission" else ""
        return f"{substance} {severity}{remission} ({icd10})"

    def extra_fields(self, text: str, findings: Findings) -> Dict[str, Any]:
        flags = []
        substance = findings["substance"].value
        if (
            substance == "opioid"
            and OPIOID_THERAPY_PATTERN.search(text)
            and self._explicit_severity(text, substance) is None
        ):
            flags.append(PHYSIOLOGIC_DEPENDENCE_FLAG)

        return {
            "sud_substance": substance,
            "sud_severity": findings["severity"].value,
            "sud_remission_status": findings["remission_status"].value,
            "sud_contextual_flags": tuple(flags),
        }
