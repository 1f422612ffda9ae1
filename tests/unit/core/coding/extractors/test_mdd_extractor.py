"""Tests for the MDD extractor."""
import pytest

from notecoder.core.coding.extractors.mdd import MDDExtractor
from notecoder.core.models.condition import ConditionType, RafImpact
from notecoder.core.models.result import MDDAnalysisResult


class TestMDDExtractor:
    @pytest.fixture
    def extractor(self):
        return MDDExtractor()

    def test_fully_documented(self, extractor):
        result = extractor.extract("Major depressive disorder, moderate, recurrent")
        assert isinstance(result, MDDAnalysisResult)
        assert result.condition_type is ConditionType.MDD
        assert result.detected is True
        assert result.valid is True
        assert result.present_components == ("major_keyword", "severity", "episode_type")
        assert result.missing_components == ()
        assert result.inferred_components == ()
        assert result.icd10 == "F33.1"
        assert result.raf_impact is RafImpact.LOW
        assert result.episode_type_inferred is False
        assert result.documentation_tip is None
        assert result.suggested_text == "Major Depressive Disorder, moderate, recurrent episode"

    def test_severe_with_psychotic_features(self, extractor):
        result = extractor.extract("MDD, severe with psychotic features, single episode")
        assert result.icd10 == "F32.3"
        assert "severe with psychotic features" in result.suggested_text

    def test_major_depression_keyword(self, extractor):
        result = extractor.extract("Major depression, mild, single ep")
        assert result.valid is True
        assert result.icd10 == "F32.0"

    def test_recurrent_inferred_from_history(self, extractor):
        result = extractor.extract("MDD, moderate. History of depression, symptoms returned last month.")
        assert result.valid is True
        assert result.icd10 == "F33.1"
        assert result.inferred_components == ("episode_type",)
        assert result.episode_type_inferred is True
        assert "(inferred from clinical context)" in result.suggested_text
        assert '"recurrent"' in result.documentation_tip

    def test_symptom_free_interval_implies_recurrent(self, extractor):
        result = extractor.extract("MDD, severe. Went 2 years without depressive symptoms")
        assert result.icd10 == "F33.2"
        assert result.episode_type_inferred is True

    def test_single_inferred_from_first_episode(self, extractor):
        result = extractor.extract("MDD, mild, first episode")
        assert result.icd10 == "F32.0"
        assert result.episode_type_inferred is True

    def test_defaults_to_single_when_keyword_and_severity_present(self, extractor):
        result = extractor.extract("MDD, mild")
        assert result.valid is True
        assert result.icd10 == "F32.0"
        assert result.inferred_components == ("episode_type",)
        assert '"single"' in result.documentation_tip

    def test_explanation_marks_inferred_component(self, extractor):
        result = extractor.extract("MDD, mild")
        assert result.explanation == (
            "MDD requires 3 components: (1) 'major' keyword ✅ (2) severity ✅ "
            "(3) single/recurrent ✅ (inferred)"
        )

    def test_no_default_without_major_keyword(self, extractor):
        result = extractor.extract("Depression, moderate")
        assert result.detected is False
        assert result.valid is False
        assert result.missing_components == ("major_keyword", "episode_type")
        assert result.raf_impact is RafImpact.HIGH
        assert result.icd10 == "F32.9"
        assert result.suggested_text.endswith("(F32.9)")
        assert "missing ❌" in result.explanation

    def test_missing_severity(self, extractor):
        result = extractor.extract("MDD, recurrent")
        assert result.missing_components == ("severity",)
        assert result.raf_impact is RafImpact.MEDIUM
        assert result.icd10 == "F33.9"
        assert result.potential_icd10 == "F33.1"

    def test_empty_note(self, extractor):
        result = extractor.extract("")
        assert result.detected is False
        assert result.present_components == ()
        assert result.missing_components == ("major_keyword", "severity", "episode_type")
        assert result.icd10 == "F32.9"

    def test_no_raf_fields_before_enrichment(self, extractor):
        result = extractor.extract("MDD, mild")
        assert result.current_raf_weight is None
        assert result.potential_icd10 == "F32.0"
