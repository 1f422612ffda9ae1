"""
API Pydantic models for the note coding service.

Request/response models used by the analyze, health and conditions
endpoints. Wire names are camelCase; Python attributes stay snake_case.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from notecoder.config.engine_limits import MAX_NOTE_LENGTH
from notecoder.core.exceptions import ValidationError
from notecoder.core.models.condition import ConditionType
from notecoder.core.models.result import AnalysisResult


class CamelModel(BaseModel):
    """Base model publishing camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeRequest(CamelModel):
    """Request model for note analysis"""

    note_text: str = Field(..., min_length=1, max_length=MAX_NOTE_LENGTH, description="Clinical note text")
    condition_type: ConditionType = Field(
        ConditionType.MDD, description="Condition to validate, or auto to detect"
    )

    @field_validator("note_text")
    @classmethod
    def validate_note_text(cls, v):
        if not v.strip():
            raise ValueError("noteText must not be blank")
        return v

    @field_validator("condition_type", mode="before")
    @classmethod
    def validate_condition_type(cls, v):
        try:
            return ConditionType.parse(v)
        except ValidationError as e:
            raise ValueError(str(e))


class AnalyzeResponse(CamelModel):
    """Response model for note analysis"""

    condition_type: str
    detected: bool
    valid: bool
    present_components: List[str]
    missing_components: List[str]
    inferred_components: List[str] = Field(default_factory=list)
    suggested_text: str
    icd10: str
    potential_icd10: Optional[str] = None
    explanation: str
    raf_impact: str

    # RAF enrichment
    current_raf_weight: Optional[float] = None
    potential_raf_weight: Optional[float] = None
    raf_dollar_impact: Optional[float] = None
    raf_status: Optional[str] = None

    # MDD
    episode_type_inferred: Optional[bool] = None
    documentation_tip: Optional[str] = None
    symptoms_extracted: Optional[List[str]] = None
    symptoms_found: Optional[List[str]] = None
    symptom_count: Optional[int] = None
    has_si: Optional[bool] = Field(None, alias="hasSI")
    has_psychotic_features: Optional[bool] = None
    has_functional_impairment: Optional[bool] = None
    severity_recommendation: Optional[str] = None
    severity_explicit: Optional[bool] = None
    symptom_confidence: Optional[str] = None

    # CHF
    chf_type: Optional[str] = None
    chf_acuity: Optional[str] = None
    chf_contextual_flags: Optional[List[str]] = None
    chf_hcc_insight: Optional[str] = None

    # Opioid/SUD
    sud_substance: Optional[str] = None
    sud_severity: Optional[str] = None
    sud_remission_status: Optional[str] = None
    sud_contextual_flags: Optional[List[str]] = None

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalyzeResponse":
        data = result.to_dict()
        # Empty flag lists are reported as absent
        for key in ("chf_contextual_flags", "sud_contextual_flags"):
            if key in data and not data[key]:
                data[key] = None
        return cls.model_validate(data)


class ConditionInfo(CamelModel):
    """One supported condition"""

    condition_type: str
    components: List[str]
    auto_detected: bool


class ConditionsResponse(CamelModel):
    """Supported conditions response"""

    conditions: List[ConditionInfo]


class HealthResponse(BaseModel):
    """Health check response"""

    status: str
    timestamp: datetime
    version: str
    uptime: float
    system_info: Dict[str, Any]
    engine_status: Dict[str, Any]


class ErrorResponse(BaseModel):
    """Error response model"""

    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime


__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "ConditionInfo",
    "ConditionsResponse",
    "HealthResponse",
    "ErrorResponse",
]
