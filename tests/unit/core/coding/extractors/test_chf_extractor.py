"""Tests for the CHF extractor."""
import pytest

from notecoder.core.coding.extractors.chf import (
    HCC_INSIGHT,
    MEDICATION_FLAG,
    RESOLVED_FLAG,
    CHFExtractor,
)
from notecoder.core.models.condition import RafImpact
from notecoder.core.models.result import CHFAnalysisResult


class TestCHFExtractor:
    @pytest.fixture
    def extractor(self):
        return CHFExtractor()

    def test_ejection_fraction_sets_systolic(self, extractor):
        result = extractor.extract("CHF, EF 35%, on furosemide. Chronic compensated heart failure")
        assert isinstance(result, CHFAnalysisResult)
        assert result.chf_type == "systolic"
        assert result.chf_acuity == "chronic"
        assert result.icd10 == "I50.22"
        assert result.valid is True
        assert result.chf_contextual_flags == ()
        assert result.chf_hcc_insight is None
        assert result.suggested_text == "Congestive Heart Failure, systolic, chronic"

    def test_preserved_ejection_fraction_is_diastolic(self, extractor):
        result = extractor.extract("Heart failure with EF 60%")
        assert result.chf_type == "diastolic"
        assert result.chf_acuity == "chronic"
        assert result.inferred_components == ("acuity",)
        assert result.icd10 == "I50.32"

    def test_acute_on_chronic_wording(self, extractor):
        result = extractor.extract("Acute on chronic diastolic heart failure")
        assert result.chf_acuity == "acute_on_chronic"
        assert result.icd10 == "I50.33"
        assert "acute-on-chronic" in result.suggested_text

    def test_acute_and_chronic_language_together(self, extractor):
        result = extractor.extract("Chronic heart failure, now with pulmonary edema, HFrEF")
        assert result.chf_acuity == "acute_on_chronic"
        assert result.icd10 == "I50.23"

    def test_acute_only(self, extractor):
        result = extractor.extract("Decompensated CHF, volume overloaded, HFrEF")
        assert result.chf_type == "systolic"
        assert result.chf_acuity == "acute"
        assert result.icd10 == "I50.21"

    def test_combined_type(self, extractor):
        result = extractor.extract("Heart failure, both systolic and diastolic")
        assert result.chf_type == "combined"
        assert result.icd10 == "I50.42"

    def test_keyword_only(self, extractor):
        result = extractor.extract("CHF")
        assert result.detected is True
        assert result.valid is False
        assert result.missing_components == ("type",)
        assert result.raf_impact is RafImpact.MEDIUM
        assert result.chf_type is None
        assert result.chf_acuity == "chronic"
        assert result.icd10 == "I50.9"
        assert result.chf_hcc_insight == HCC_INSIGHT
        assert result.suggested_text == "Congestive Heart Failure, unspecified, chronic (I50.9)"

    def test_medications_without_keyword_flag_but_not_detected(self, extractor):
        result = extractor.extract("Patient on lasix and carvedilol")
        assert result.detected is False
        assert result.missing_components == ("chf_keyword", "type", "acuity")
        assert result.chf_contextual_flags == (MEDICATION_FLAG,)
        assert result.chf_type is None
        assert result.chf_acuity is None
        assert result.icd10 == "I50.9"

    def test_resolved_wording_flagged(self, extractor):
        result = extractor.extract("CHF resolved, on diuretics")
        assert RESOLVED_FLAG in result.chf_contextual_flags

    def test_no_signal(self, extractor):
        result = extractor.extract("Routine visit")
        assert result.detected is False
        assert result.chf_contextual_flags == ()
        assert result.potential_icd10 == "I50.22"
