"""
Major Depressive Disorder extractor.

Three components: the "major" keyword, severity and episode type. Episode
type is taken from explicit wording first, then inferred from history or
first-presentation language, and finally defaults to single when the note
already names MDD with a severity.
"""
from typing import Any, Dict, List

from notecoder.core.coding.extractors.base import ConditionExtractor, Findings, with_code
from notecoder.core.coding.patterns import any_match, compile_all, compile_table, first_match
from notecoder.core.models.condition import (
    ComponentFinding,
    ConditionType,
    absent,
    explicit,
    inferred,
)

MAJOR_KEYWORD_PATTERNS = compile_all([
    r"\bmdd\b",
    r"\bmajor\s+depressive\s+disorder\b",
    r"\bmajor\s+depression\b",
])

SEVERITY_TABLE = compile_table([
    (r"\bsevere\s+(?:with|w/)\s*(?:psychotic\s+features|psychosis)\b", "severe with psychosis"),
    (r"\bsevere\b", "severe"),
    (r"\bmoderate\b", "moderate"),
    (r"\bmild\b", "mild"),
])

EXPLICIT_EPISODE_TABLE = compile_table([
    (r"\brecurrent\b", "recurrent"),
    (r"\bsingle\s+ep(?:isode)?\b", "single"),
])

RECURRENT_PATTERNS = compile_all([
    r"\bhistory\s+of\s+depression\b",
    r"\bpast\s+depressive\s+episode\b",
    r"\bprevious\s+episode\b",
    r"\bhad\s+depression\s+before\b",
    r"\bdepression\s+in\s+the\s+past\b",
    r"\bwas\s+in\s+remission\b",
    r"\bsymptoms\s+returned\b",
    r"\bback\s+again\b",
    r"\bprior\s+(?:episode|depression)\b",
    r"\d+\s*(?:months?|years?)\s+without\s+(?:depressive\s+)?symptoms\b",
    r"\bwithout\s+symptoms\s+(?:and\s+)?now\b",
])

SINGLE_PATTERNS = compile_all([
    r"\bfirst\s+time\b",
    r"\bnever\s+had\s+depression\s+before\b",
    r"\bnew\s+onset\b",
    r"\bfirst\s+episode\b",
    r"\bfirst\s+presentation\b",
])

SEVERITY_LABELS = {
    "severe with psychosis": "severe with psychotic features",
}

EPISODE_LABELS = {
    "single": "single episode",
    "recurrent": "recurrent episode",
}


class MDDExtractor(ConditionExtractor):
    condition = ConditionType.MDD
    label = "MDD"
    component_labels = {
        "major_keyword": "'major' keyword",
        "severity": "severity",
        "episode_type": "single/recurrent",
    }

    def find_components(self, text: str) -> List[ComponentFinding]:
        if any_match(MAJOR_KEYWORD_PATTERNS, text):
            keyword = explicit("major_keyword", "major")
        else:
            keyword = absent("major_keyword")

        severity_value = first_match(SEVERITY_TABLE, text)
        severity = explicit("severity", severity_value) if severity_value else absent("severity")

        episode = self._episode(text)
        if not episode.present and keyword.present and severity.present:
            # DSM-5 default when the diagnosis is named without history
            episode = inferred("episode_type", "single")

        return [keyword, severity, episode]

    def _episode(self, text: str) -> ComponentFinding:
        value = first_match(EXPLICIT_EPISODE_TABLE, text)
        if value:
            return explicit("episode_type", value)
        if any_match(RECURRENT_PATTERNS, text):
            return inferred("episode_type", "recurrent")
        if any_match(SINGLE_PATTERNS, text):
            return inferred("episode_type", "single")
        return absent("episode_type")

    def is_detected(self, text: str, findings: Findings) -> bool:
        return findings["major_keyword"].present

    def suggested_text(self, findings: Findings, icd10: str, valid: bool) -> str:
        severity = findings["severity"].value or "unspecified"
        episode = findings["episode_type"]
        episode_label = EPISODE_LABELS.get(episode.value, "episode unspecified")
        text = (
            f"Major Depressive Disorder, {SEVERITY_LABELS.get(severity, severity)}, {episode_label}"
        )
        if episode.inferred:
            text += " (inferred from clinical context)"
        return with_code(text, icd10, valid)

    def extra_fields(self, text: str, findings: Findings) -> Dict[str, Any]:
        episode = findings["episode_type"]
        tip = None
        if episode.inferred:
            tip = (
                f'Tip: Add the word "{episode.value}" explicitly to your diagnosis '
                "for cleaner documentation."
            )
        return {
            "episode_type_inferred": episode.inferred,
            "documentation_tip": tip,
        }
