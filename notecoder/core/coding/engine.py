"""
Coding engine.

Runs one note through the pipeline:
normalize → auto-detect (when condition is AUTO) → condition extractor →
RAF enrichment → DSM-5 symptom merge (MDD only).

The engine is synchronous and holds no per-call state, so one instance can
serve concurrent requests. The optional classifier path is async and always
falls back to the rule result.
"""
import logging
from typing import Iterable, Optional, Tuple

from notecoder.config.raf_table import RafTable
from notecoder.core.coding.detector import ConditionDetector
from notecoder.core.coding.extractors import build_extractors
from notecoder.core.coding.icd10 import ICD10Resolver
from notecoder.core.coding.merger import merge_symptoms, reconcile
from notecoder.core.coding.normalizer import normalize
from notecoder.core.coding.raf import RafCalculator
from notecoder.core.models.condition import ConditionType
from notecoder.core.models.result import AnalysisResult
from notecoder.core.ports.classifier import ClassifierPort

logger = logging.getLogger(__name__)

DEFAULT_CONDITION = ConditionType.MDD

SOURCE_RULES = "rules"
SOURCE_CLASSIFIER = "classifier"


class CodingEngine:
    """Rule-based documentation validator for all supported conditions."""

    def __init__(
        self,
        raf_table: Optional[RafTable] = None,
        enabled: Optional[Iterable[ConditionType]] = None,
    ):
        """
        Initialize engine.

        Args:
            raf_table: Weight table; defaults to the configured table
            enabled: Conditions auto-detection may pick; None means all
        """
        resolver = ICD10Resolver()
        self._extractors = build_extractors(resolver)
        self._detector = ConditionDetector(enabled)
        self._raf = RafCalculator(raf_table, resolver)

    def resolve_condition(self, text: str, condition=ConditionType.AUTO) -> ConditionType:
        """Concrete condition for a request; AUTO falls back to MDD when nothing matches."""
        condition = ConditionType.parse(condition)
        if condition is not ConditionType.AUTO:
            return condition
        return self._detector.detect(text) or DEFAULT_CONDITION

    def analyze(self, note_text: Optional[str], condition=ConditionType.AUTO) -> AnalysisResult:
        """
        Analyze a note with the rule engine.

        Args:
            note_text: Raw clinical note (None or empty yields a no-signal result)
            condition: ConditionType or its string value; AUTO to detect

        Returns:
            Fully enriched AnalysisResult

        Raises:
            ValidationError: If condition names no known condition
        """
        text = normalize(note_text)
        resolved = self.resolve_condition(text, condition)
        result = self._extractors[resolved].extract(text)
        return self._finish(result, text)

    async def analyze_with_classifier(
        self,
        note_text: Optional[str],
        condition=ConditionType.AUTO,
        classifier: Optional[ClassifierPort] = None,
    ) -> Tuple[AnalysisResult, str]:
        """
        Analyze a note with an external classifier, backed by the rule engine.

        Classifier failures and rejected payloads are logged and the rule
        result is used instead.

        Returns:
            (result, source) where source is "classifier" or "rules"
        """
        text = normalize(note_text)
        resolved = self.resolve_condition(text, condition)
        fallback = self._extractors[resolved].extract(text)

        if classifier is None:
            return self._finish(fallback, text), SOURCE_RULES

        try:
            payload = await classifier.classify(note_text or "", resolved)
        except Exception as e:
            logger.error(f"Classifier failed for {resolved.value}, using rule engine: {e}")
            return self._finish(fallback, text), SOURCE_RULES

        merged = reconcile(payload, fallback)
        source = SOURCE_RULES if merged is fallback else SOURCE_CLASSIFIER
        return self._finish(merged, text), source

    def _finish(self, result: AnalysisResult, text: str) -> AnalysisResult:
        result = self._raf.enrich(result)
        return merge_symptoms(result, text)
