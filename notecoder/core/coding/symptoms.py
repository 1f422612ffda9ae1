"""
DSM-5 depressive symptom extraction.

Detects the nine DSM-5 MDD symptom categories plus psychotic features,
functional impairment and explicitly documented severity, then recommends a
severity when the note does not already state one.

Recommendation policy (only when severity is not documented):
1. Suicidal ideation → severe (psychotic variant if psychotic language too)
2. Psychotic features → severe with psychotic features
3. Symptom count: >=8 severe, 6-7 moderate, 5 mild, <5 none
4. Functional impairment bumps a count-based mild/moderate one tier
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

from notecoder.config.engine_limits import (
    HIGH_CONFIDENCE_MIN_CHARS,
    HIGH_CONFIDENCE_MIN_SYMPTOMS,
    LOW_CONFIDENCE_MAX_CHARS,
    LOW_CONFIDENCE_MAX_SYMPTOMS,
    MILD_SYMPTOM_COUNT,
    MODERATE_SYMPTOM_COUNT,
    SEVERE_SYMPTOM_COUNT,
)
from notecoder.core.coding.normalizer import normalize
from notecoder.core.coding.patterns import any_match, compile_all

DSM5_SYMPTOM_LABELS: Dict[str, str] = {
    "depressed_mood": "Depressed mood",
    "anhedonia": "Anhedonia",
    "weight_appetite": "Weight/appetite change",
    "sleep_disturbance": "Sleep disturbance",
    "psychomotor": "Psychomotor agitation/retardation",
    "fatigue": "Fatigue/loss of energy",
    "worthlessness_guilt": "Worthlessness/guilt",
    "concentration": "Difficulty concentrating",
    "suicidal_ideation": "Suicidal ideation",
}

# Matches straight and typographic apostrophes in contractions
_APOS = "[’']?"

SYMPTOM_PATTERNS: Dict[str, List[Pattern]] = {
    "depressed_mood": compile_all([
        r"\bsad\b",
        r"\btearful\b",
        r"\bhopeless\b",
        r"\bdepressed\b",
        r"\bempty\b",
        r"\bcries?\s+a\s+lot\b",
        r"\bdown\b",
        r"\blow\s+mood\b",
        r"\bweepy\b",
        r"\bmournful\b",
    ]),
    "anhedonia": compile_all([
        r"\banhedoni(?:a|c)\b",
        r"\bno\s+interest\b",
        rf"\bdoesn{_APOS}t\s+enjoy\b",
        r"\blost\s+interest\b",
        r"\bloss\s+of\s+interest\b",
        r"\bnothing\s+brings\s+joy\b",
        r"\bstopped\s+doing\s+things\s+they\s+love\b",
        r"\bstopped\s+enjoying\b",
        r"\benjoying\s+hobbies\b",
        r"\bpleasure\b",
        r"\bwithdrawn\s+from\s+activities\b",
    ]),
    "weight_appetite": compile_all([
        r"\bweight\s+(?:loss|gain)\b",
        r"\bnot\s+eating\b",
        r"\bovereating\b",
        r"\bappetite\s+(?:decreased|increased)\b",
        r"\b(?:decreased|increased|poor|no)\s+appetite\b",
        r"\b(?:lost|gained)\s+\d+\s*lbs?\b",
    ]),
    "sleep_disturbance": compile_all([
        r"\bnot\s+sleeping\b",
        r"\binsomnia\b",
        r"\bhypersomnia\b",
        rf"\bcan{_APOS}t\s+sleep\b",
        r"\bsleeping\s+too\s+much\b",
        r"\bearly\s+morning\s+awakening\b",
        r"\bwaking\s+up\s+at\s+3\s*am\b",
        r"\b(?:difficulty|trouble)\s+sleeping\b",
        r"\boversleeping\b",
        r"\bsleep\s+disturbance\b",
        r"\bpoor\s+sleep\b",
        r"\bsleep(?:s|ing)?\s+\d+\s*hrs?\b",
    ]),
    "psychomotor": compile_all([
        r"\brestless\b",
        r"\bagitated\b",
        r"\bslowed\s+down\b",
        r"\bmoving\s+slowly\b",
        rf"\bcan{_APOS}t\s+sit\s+still\b",
        r"\bfeels\s+slowed\b",
        r"\bpsychomotor\s+(?:agitation|retardation)\b",
        r"\bretardation\b",
    ]),
    "fatigue": compile_all([
        r"\btired\b",
        r"\bfatigued?\b",
        r"\bexhausted\b",
        r"\b(?:no|low)\s+energy\b",
        r"\bworn\s+out\b",
        r"\benergyless\b",
    ]),
    "worthlessness_guilt": compile_all([
        r"\bworthless\b",
        r"\bguilty\b",
        r"\bfeels\s+like\s+a\s+burden\b",
        r"\bblames\s+(?:himself|herself|themselves)\b",
        r"\bshame\b",
        r"\bself[-\s]?blame\b",
        r"\bexcessive\s+guilt\b",
    ]),
    "concentration": compile_all([
        rf"\bcan{_APOS}t\s+(?:concentrate|focus|make\s+decisions)\b",
        r"\bdifficulty\s+(?:focusing|concentrating)\b",
        r"\bbrain\s+fog\b",
        r"\btrouble\s+thinking\b",
        r"\bforgetful\b",
        r"\bindecisive\b",
        r"\badhd[-\s]?like\b",
        r"\b(?:concentration|focus)\s+problems?\b",
        r"\bpoor\s+concentration\b",
    ]),
    "suicidal_ideation": compile_all([
        r"\bsuicidal\b",
        r"\bwants?\s+to\s+die\b",
        r"\bthoughts?\s+of\s+(?:death|suicide|harming)\b",
        r"\bthinking\s+about\s+death\b",
        r"\bsi\b",
        rf"\bdoesn{_APOS}t\s+want\s+to\s+be\s+here\b",
        r"\bbetter\s+off\s+dead\b",
        r"\bhurting\s+(?:himself|herself|themselves)\b",
        r"\bself[-\s]?harm\b",
        r"\bsuicid(?:e|al)\s+ideation\b",
    ]),
}

PSYCHOTIC_PATTERNS: List[Pattern] = compile_all([
    r"\bhallucinations?\b",
    r"\bdelusions?\b",
    r"\bparanoid\b",
    r"\bvoices\b",
    r"\bpsychotic\s+features?\b",
    r"\bpsychosis\b",
])

FUNCTIONAL_IMPAIRMENT_PATTERNS: List[Pattern] = compile_all([
    rf"\bcan{_APOS}t\s+work\b",
    r"\bunable\s+to\s+(?:work|function|care\s+for\s+self)\b",
    r"\bstopped\s+going\s+to\s+(?:school|work)\b",
    r"\bhospitali[sz](?:ed|ation)\b",
    r"\bdisabled\s+by\b",
    r"\badls\s+(?:affected|impaired)\b",
])

SEVERITY_EXPLICIT_PATTERNS: List[Pattern] = compile_all([
    r"\b(?:mild|moderate|severe)\b",
])

_BUMPS: Dict[str, str] = {
    "mild": "moderate (functional impairment noted)",
    "moderate": "severe (functional impairment noted)",
}


@dataclass(frozen=True)
class SymptomExtractionResult:
    """DSM-5 symptom findings and severity recommendation for one note."""

    symptoms_found: Tuple[str, ...]
    symptom_count: int
    has_si: bool
    has_psychotic_features: bool
    has_functional_impairment: bool
    severity_recommendation: Optional[str]
    confidence: str
    severity_explicit: bool

    @property
    def display_labels(self) -> List[str]:
        return get_symptom_display_labels(self.symptoms_found)


def get_symptom_display_labels(symptom_keys) -> List[str]:
    """Map symptom keys to display labels, order kept."""
    return [DSM5_SYMPTOM_LABELS[key] for key in symptom_keys]


def recommend_severity(
    symptom_count: int,
    has_si: bool,
    has_psychotic_features: bool,
    has_functional_impairment: bool,
) -> Optional[str]:
    """Severity recommendation from symptom findings; None when count is too low."""
    if has_si:
        if has_psychotic_features:
            return "severe with psychotic features (SI present, overrides count)"
        return "severe (SI present, overrides count)"
    if has_psychotic_features:
        return "severe with psychotic features"

    if symptom_count >= SEVERE_SYMPTOM_COUNT:
        recommendation = "severe"
    elif symptom_count >= MODERATE_SYMPTOM_COUNT:
        recommendation = "moderate"
    elif symptom_count >= MILD_SYMPTOM_COUNT:
        recommendation = "mild"
    else:
        return None

    if has_functional_impairment:
        return _BUMPS.get(recommendation, recommendation)
    return recommendation


def _confidence(symptom_count: int, text: str) -> str:
    if symptom_count >= HIGH_CONFIDENCE_MIN_SYMPTOMS and len(text) > HIGH_CONFIDENCE_MIN_CHARS:
        return "high"
    if symptom_count <= LOW_CONFIDENCE_MAX_SYMPTOMS and len(text) < LOW_CONFIDENCE_MAX_CHARS:
        return "low"
    return "medium"


def extract_symptoms(note_text: Optional[str], severity_already_documented: bool) -> SymptomExtractionResult:
    """
    Extract DSM-5 MDD symptoms from note text.

    Args:
        note_text: Raw or normalized note text
        severity_already_documented: Skip the recommendation when True

    Returns:
        SymptomExtractionResult; symptoms_found follows DSM-5 category order
    """
    text = normalize(note_text)

    found = tuple(
        key for key, patterns in SYMPTOM_PATTERNS.items() if any_match(patterns, text)
    )
    has_si = "suicidal_ideation" in found
    has_psychotic = any_match(PSYCHOTIC_PATTERNS, text)
    has_impairment = any_match(FUNCTIONAL_IMPAIRMENT_PATTERNS, text)

    recommendation = None
    if not severity_already_documented:
        recommendation = recommend_severity(len(found), has_si, has_psychotic, has_impairment)

    return SymptomExtractionResult(
        symptoms_found=found,
        symptom_count=len(found),
        has_si=has_si,
        has_psychotic_features=has_psychotic,
        has_functional_impairment=has_impairment,
        severity_recommendation=recommendation,
        confidence=_confidence(len(found), text),
        severity_explicit=any_match(SEVERITY_EXPLICIT_PATTERNS, text),
    )
