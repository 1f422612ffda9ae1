"""Note analysis routes"""
import logging
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from prometheus_client import Counter

from notecoder.api.schemas import AnalyzeRequest, AnalyzeResponse, ConditionInfo, ConditionsResponse
from notecoder.core.coding.detector import DETECTION_RULES
from notecoder.core.coding.engine import CodingEngine
from notecoder.core.models.condition import COMPONENT_KEYS, ConditionType
from notecoder.core.ports.classifier import ClassifierPort

logger = logging.getLogger(__name__)

ANALYSIS_COUNT = Counter(
    "notecoder_analyses_total", "Total note analyses", [
        "condition", "valid", "source"])


def create_analyze_router(
    engine: CodingEngine,
    enabled_conditions: List[ConditionType],
    token_dependency: Callable,
    classifier: Optional[ClassifierPort] = None,
) -> APIRouter:
    """Create note analysis router.

    Args:
        engine: Coding engine serving all requests
        enabled_conditions: Conditions this deployment accepts
        token_dependency: Bearer-token dependency guarding analysis
        classifier: Optional external classifier tried before the rules

    Returns:
        FastAPI router with analysis endpoints
    """
    router = APIRouter()
    accepted = set(enabled_conditions) | {ConditionType.AUTO}

    @router.post("/api/v1/analyze", response_model=AnalyzeResponse, response_model_exclude_none=True)
    async def analyze_note(
        request: AnalyzeRequest,
        token: str = Depends(token_dependency),
    ):
        if request.condition_type not in accepted:
            valid = ", ".join(c.value for c in enabled_conditions + [ConditionType.AUTO])
            raise HTTPException(
                status_code=422,
                detail=f"conditionType must be one of: {valid}",
            )

        result, source = await engine.analyze_with_classifier(
            request.note_text, request.condition_type, classifier
        )

        ANALYSIS_COUNT.labels(
            condition=result.condition_type.value,
            valid=str(result.valid).lower(),
            source=source,
        ).inc()
        logger.info(
            f"Analyzed {result.condition_type.value} note via {source}: "
            f"valid={result.valid} icd10={result.icd10}"
        )

        return AnalyzeResponse.from_result(result)

    @router.get("/api/v1/conditions", response_model=ConditionsResponse)
    async def get_conditions():
        """Get supported conditions and their required components"""
        auto = {rule.condition for rule in DETECTION_RULES}
        return ConditionsResponse(
            conditions=[
                ConditionInfo(
                    condition_type=condition.value,
                    components=list(COMPONENT_KEYS[condition]),
                    auto_detected=condition in auto,
                )
                for condition in enabled_conditions
            ]
        )

    return router
