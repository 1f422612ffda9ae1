"""
Result merging.

merge_symptoms attaches DSM-5 symptom extraction to MDD results.
reconcile folds an external classifier payload (camelCase output contract)
into the rule engine's result for the same note, rejecting payloads that
break the component invariants.
"""
import logging
from dataclasses import fields, replace
from typing import Any, Dict, Mapping, Optional

from notecoder.core.coding.symptoms import extract_symptoms
from notecoder.core.exceptions import ValidationError
from notecoder.core.models.condition import (
    COMPONENT_KEYS,
    ConditionType,
    RafImpact,
    RafStatus,
)
from notecoder.core.models.result import AnalysisResult, MDDAnalysisResult

logger = logging.getLogger(__name__)

# Payload keys whose camelCase form is not a plain conversion
_ALIASES = {"has_si": "hasSI"}

# Filled later by RafCalculator from the merged code, never from the fallback
_RAF_FIELDS = (
    "potential_icd10",
    "current_raf_weight",
    "potential_raf_weight",
    "raf_dollar_impact",
    "raf_status",
)

_TUPLE_FIELDS = (
    "present_components",
    "missing_components",
    "inferred_components",
    "symptoms_extracted",
    "symptoms_found",
    "chf_contextual_flags",
    "sud_contextual_flags",
)


def merge_symptoms(result: AnalysisResult, note_text: Optional[str]) -> AnalysisResult:
    """Attach symptom extraction to an MDD result; other results pass through."""
    if not isinstance(result, MDDAnalysisResult):
        return result

    documented = "severity" in result.present_components
    symptoms = extract_symptoms(note_text, severity_already_documented=documented)
    return replace(
        result,
        symptoms_extracted=tuple(symptoms.display_labels),
        symptoms_found=symptoms.symptoms_found,
        symptom_count=symptoms.symptom_count,
        has_si=symptoms.has_si,
        has_psychotic_features=symptoms.has_psychotic_features,
        has_functional_impairment=symptoms.has_functional_impairment,
        severity_recommendation=symptoms.severity_recommendation,
        severity_explicit=symptoms.severity_explicit,
        symptom_confidence=symptoms.confidence,
    )


def reconcile(payload: Optional[Mapping[str, Any]], fallback: AnalysisResult) -> AnalysisResult:
    """
    Merge an external classifier payload with the rule-engine result.

    Args:
        payload: camelCase result from the classifier, or None
        fallback: Rule-engine result for the same note and condition

    Returns:
        Merged result. The fallback is returned unchanged when the payload
        is absent or violates the component invariants. RAF fields the
        payload does not supply are left empty for RafCalculator.
    """
    if payload is None:
        return fallback
    if not isinstance(payload, Mapping):
        logger.warning(
            f"Rejected classifier payload for {fallback.condition_type.value}: "
            f"expected a mapping, got {type(payload).__name__}"
        )
        return fallback

    try:
        return _merge(payload, fallback)
    except (ValidationError, TypeError, ValueError) as e:
        logger.warning(f"Rejected classifier payload for {fallback.condition_type.value}: {e}")
        return fallback


def _camel(name: str) -> str:
    if name in _ALIASES:
        return _ALIASES[name]
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _merge(payload: Mapping[str, Any], fallback: AnalysisResult) -> AnalysisResult:
    condition = ConditionType.parse(payload.get("conditionType", fallback.condition_type.value))
    if condition is not fallback.condition_type:
        raise ValidationError(
            f"conditionType {condition.value} does not match requested {fallback.condition_type.value}"
        )

    present = tuple(payload.get("presentComponents") or ())
    missing = tuple(payload.get("missingComponents") or ())
    _check_partition(condition, present, missing)

    values: Dict[str, Any] = {}
    for f in fields(fallback):
        key = _camel(f.name)
        value = payload.get(key)
        if value is None:
            value = None if f.name in _RAF_FIELDS else getattr(fallback, f.name)
        else:
            _check_type(f.name, value, getattr(fallback, f.name))
            if f.name in _TUPLE_FIELDS:
                value = tuple(value)
        values[f.name] = value

    values["condition_type"] = condition
    values["present_components"] = present
    values["missing_components"] = missing
    values["valid"] = not missing
    values["raf_impact"] = RafImpact.from_missing_count(len(missing))
    values["inferred_components"] = tuple(
        key for key in values["inferred_components"] if key in present
    )
    if values["raf_status"] is not None:
        values["raf_status"] = RafStatus(values["raf_status"])

    if not values["icd10"]:
        # Legacy MDD contract: empty code means no diagnosis found
        legacy_empty = condition is ConditionType.MDD and not values["detected"]
        if not legacy_empty:
            values["icd10"] = fallback.icd10

    for name in ("current_raf_weight", "potential_raf_weight", "raf_dollar_impact"):
        if values[name] is not None:
            values[name] = float(values[name])
    if values["raf_dollar_impact"] is not None and values["raf_dollar_impact"] < 0:
        raise ValidationError("rafDollarImpact must not be negative")

    return type(fallback)(**values)


def _check_partition(condition: ConditionType, present, missing) -> None:
    expected = set(COMPONENT_KEYS[condition])
    overlap = set(present) & set(missing)
    if overlap:
        raise ValidationError(f"components both present and missing: {sorted(overlap)}")
    if len(present) + len(missing) != len(expected) or set(present) | set(missing) != expected:
        raise ValidationError(
            f"components {sorted(set(present) | set(missing))} do not partition {sorted(expected)}"
        )


def _check_type(name: str, value: Any, reference: Any) -> None:
    """Payload values must have the same shape as the rule result's field."""
    if isinstance(reference, bool):
        expected = bool
    elif isinstance(reference, str):
        expected = str
    elif name in _TUPLE_FIELDS:
        expected = (list, tuple)
    else:
        return
    if not isinstance(value, expected):
        raise ValidationError(f"{_camel(name)} has unexpected type {type(value).__name__}")
