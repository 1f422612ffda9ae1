"""Tests for the coding engine pipeline."""
import pytest

from notecoder.config.raf_table import load_raf_table
from notecoder.core.coding.engine import SOURCE_CLASSIFIER, SOURCE_RULES, CodingEngine
from notecoder.core.exceptions import ClassifierError, ValidationError
from notecoder.core.models.condition import COMPONENT_KEYS, ConditionType, RafStatus
from notecoder.core.models.result import CHFAnalysisResult, MDDAnalysisResult, SUDAnalysisResult
from notecoder.core.ports.classifier import ClassifierPort

NOTES = [
    "",
    "Major depressive disorder, moderate, recurrent",
    "patient is sad, not sleeping, lost 10 lbs, can't concentrate, feels worthless",
    "Depression, moderate",
    "CHF, EF 35%, on furosemide. Chronic compensated heart failure",
    "Patient on lasix and carvedilol",
    "COPD GOLD 3 with acute exacerbation",
    "CKD, follows with nephrology",
    "ESRD on dialysis",
    "Type 2 diabetes",
    "Type 1 diabetes with retinopathy",
    "Patient stable on hydrocodone for chronic pain. No aberrant behavior",
    "History of cannabis use",
    "chest pain, severe, now stable",
    "stage 4 breast cancer",
    "peripheral neuropathy from chemotherapy",
]

UNMENTIONED = [
    ("chest pain, severe, now stable", "copd"),
    ("stage 4 breast cancer", "ckd"),
    ("peripheral neuropathy from chemotherapy", "diabetes"),
    ("Patient on lasix and carvedilol", "chf"),
    ("Denies tobacco", "opioid_sud"),
]

CONDITIONS = [c for c in ConditionType if c is not ConditionType.AUTO] + [ConditionType.AUTO]


class FakeClassifier(ClassifierPort):
    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    async def classify(self, note_text, condition):
        self.calls.append((note_text, condition))
        if self.error:
            raise self.error
        return self.payload


@pytest.fixture(scope="module")
def engine():
    return CodingEngine(raf_table=load_raf_table())


class TestAnalyze:
    def test_mdd_complete(self, engine):
        result = engine.analyze("Major depressive disorder, moderate, recurrent", "mdd")
        assert isinstance(result, MDDAnalysisResult)
        assert result.valid is True
        assert result.icd10 == "F33.1"
        assert result.raf_status is RafStatus.COMPLETE
        assert result.raf_dollar_impact == 0
        assert result.symptom_count == 0
        assert result.severity_explicit is True
        assert result.severity_recommendation is None

    def test_mdd_incomplete_has_dollar_gap(self, engine):
        result = engine.analyze("Depression, moderate", ConditionType.MDD)
        assert result.icd10 == "F32.9"
        assert result.potential_icd10 == "F32.1"
        assert result.current_raf_weight == 0
        assert result.potential_raf_weight == pytest.approx(0.309)
        assert result.raf_dollar_impact == pytest.approx(4017.0)
        assert result.raf_status is RafStatus.INCOMPLETE

    def test_mdd_symptom_recommendation(self, engine):
        note = "patient is sad, not sleeping, lost 10 lbs, can't concentrate, feels worthless"
        result = engine.analyze(note, "mdd")
        assert result.symptom_count == 5
        assert result.severity_recommendation == "mild"

    def test_auto_detects_chf(self, engine):
        result = engine.analyze("CHF, EF 35%, on furosemide. Chronic compensated heart failure")
        assert isinstance(result, CHFAnalysisResult)
        assert result.chf_type == "systolic"
        assert result.chf_acuity == "chronic"
        assert result.icd10 == "I50.22"
        assert result.valid is True

    def test_auto_defaults_to_mdd(self, engine):
        result = engine.analyze("routine physical", "auto")
        assert result.condition_type is ConditionType.MDD
        assert result.detected is False

    def test_sud_only_when_requested(self, engine):
        note = "Patient stable on hydrocodone for chronic pain. No aberrant behavior"
        assert engine.analyze(note).condition_type is ConditionType.MDD
        result = engine.analyze(note, "opioid_sud")
        assert isinstance(result, SUDAnalysisResult)
        assert result.sud_substance == "opioid"
        assert len(result.sud_contextual_flags) == 1

    def test_none_note(self, engine):
        result = engine.analyze(None, "ckd")
        assert result.detected is False
        assert result.icd10 == "N18.9"

    def test_unknown_condition_raises(self, engine):
        with pytest.raises(ValidationError):
            engine.analyze("note", "asthma")

    def test_enabled_conditions_limit_auto_detection(self):
        engine = CodingEngine(raf_table=load_raf_table(), enabled=[ConditionType.CKD])
        assert engine.analyze("MDD with CKD stage 4").condition_type is ConditionType.CKD


class TestInvariants:
    @pytest.mark.parametrize("note", NOTES)
    @pytest.mark.parametrize("condition", CONDITIONS)
    def test_result_invariants(self, engine, note, condition):
        result = engine.analyze(note, condition)
        keys = COMPONENT_KEYS[result.condition_type]

        assert result.condition_type is not ConditionType.AUTO
        assert not set(result.present_components) & set(result.missing_components)
        assert set(result.present_components) | set(result.missing_components) == set(keys)
        assert result.valid == (len(result.missing_components) == 0)
        assert set(result.inferred_components) <= set(result.present_components)
        assert result.icd10
        assert result.has_raf
        assert result.raf_dollar_impact >= 0
        if result.valid:
            assert result.raf_dollar_impact == 0
            assert result.raf_status is RafStatus.COMPLETE

    @pytest.mark.parametrize("note, condition", UNMENTIONED)
    def test_unmentioned_condition_has_no_components(self, engine, note, condition):
        result = engine.analyze(note, condition)
        assert result.detected is False
        assert result.present_components == ()
        assert result.valid is False
        assert result.raf_status is not RafStatus.COMPLETE

    @pytest.mark.parametrize("note", NOTES)
    def test_analysis_is_deterministic(self, engine, note):
        assert engine.analyze(note, "auto") == engine.analyze(note, "auto")


class TestClassifierPath:
    @pytest.mark.asyncio
    async def test_without_classifier_uses_rules(self, engine):
        result, source = await engine.analyze_with_classifier("MDD, mild", "mdd")
        assert source == SOURCE_RULES
        assert result == engine.analyze("MDD, mild", "mdd")

    @pytest.mark.asyncio
    async def test_classifier_payload_used(self, engine):
        classifier = FakeClassifier(payload={
            "conditionType": "mdd",
            "detected": True,
            "presentComponents": ["major_keyword", "severity", "episode_type"],
            "missingComponents": [],
            "suggestedText": "Major Depressive Disorder, severe, recurrent episode",
            "icd10": "F33.2",
            "explanation": "model",
        })
        result, source = await engine.analyze_with_classifier("MDD, severe", "mdd", classifier)
        assert source == SOURCE_CLASSIFIER
        assert classifier.calls == [("MDD, severe", ConditionType.MDD)]
        assert result.icd10 == "F33.2"
        assert result.valid is True
        assert result.raf_status is RafStatus.COMPLETE
        assert result.severity_explicit is True

    @pytest.mark.asyncio
    async def test_classifier_failure_falls_back(self, engine):
        classifier = FakeClassifier(error=ClassifierError("provider unavailable"))
        result, source = await engine.analyze_with_classifier("MDD, mild", "mdd", classifier)
        assert source == SOURCE_RULES
        assert result == engine.analyze("MDD, mild", "mdd")

    @pytest.mark.asyncio
    async def test_unexpected_classifier_error_falls_back(self, engine):
        classifier = FakeClassifier(error=RuntimeError("boom"))
        result, source = await engine.analyze_with_classifier("CKD stage 4", "ckd", classifier)
        assert source == SOURCE_RULES
        assert result.icd10 == "N18.4"

    @pytest.mark.asyncio
    async def test_rejected_payload_falls_back(self, engine):
        classifier = FakeClassifier(payload={"conditionType": "chf"})
        result, source = await engine.analyze_with_classifier("MDD, mild", "mdd", classifier)
        assert source == SOURCE_RULES
        assert result.condition_type is ConditionType.MDD

    @pytest.mark.asyncio
    async def test_classifier_receives_resolved_condition(self, engine):
        classifier = FakeClassifier(payload=None)
        await engine.analyze_with_classifier("COPD, stable", "auto", classifier)
        assert classifier.calls[0][1] is ConditionType.COPD

    @pytest.mark.asyncio
    async def test_non_mapping_payload_falls_back(self, engine):
        classifier = FakeClassifier(payload=["not", "a", "mapping"])
        result, source = await engine.analyze_with_classifier("MDD, mild", "mdd", classifier)
        assert source == SOURCE_RULES
        assert result == engine.analyze("MDD, mild", "mdd")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["icd10", "potentialIcd10"])
    async def test_non_string_code_falls_back(self, engine, field):
        classifier = FakeClassifier(payload={
            "conditionType": "mdd",
            "detected": True,
            "presentComponents": ["major_keyword", "severity", "episode_type"],
            "missingComponents": [],
            field: 332,
        })
        result, source = await engine.analyze_with_classifier("MDD, severe", "mdd", classifier)
        assert source == SOURCE_RULES
        assert result.icd10 == "F32.2"
