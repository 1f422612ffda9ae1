"""
ICD-10 code resolution.

Each condition has a nested code table keyed by its resolved component
values in a fixed dimension order (e.g. severity → episode type for MDD).
Missing dimensions are looked up under "unspecified"; combinations the table
does not know fall back to the condition's generic code.
"""
import logging
from typing import Dict, Mapping, Optional, Tuple

from notecoder.core.models.condition import ConditionType

logger = logging.getLogger(__name__)

UNSPECIFIED = "unspecified"


def _substance_codes(prefix: str) -> Dict[str, Dict[str, str]]:
    """Severity → remission table for one substance family (F10, F11, ...)."""
    return {
        "dependence": {"active": f"{prefix}.20", "in_remission": f"{prefix}.21"},
        "abuse": {"active": f"{prefix}.10", "in_remission": f"{prefix}.11"},
        UNSPECIFIED: {
            "active": f"{prefix}.90",
            "in_remission": f"{prefix}.90",
            UNSPECIFIED: f"{prefix}.90",
        },
    }


CODE_TABLES: Dict[ConditionType, Dict] = {
    # severity → episode_type
    ConditionType.MDD: {
        "mild": {"single": "F32.0", "recurrent": "F33.0"},
        "moderate": {"single": "F32.1", "recurrent": "F33.1"},
        "severe": {"single": "F32.2", "recurrent": "F33.2"},
        "severe with psychosis": {"single": "F32.3", "recurrent": "F33.3"},
        UNSPECIFIED: {"single": "F32.9", "recurrent": "F33.9"},
    },
    # type → acuity
    ConditionType.CHF: {
        "systolic": {
            "acute": "I50.21",
            "chronic": "I50.22",
            "acute_on_chronic": "I50.23",
        },
        "diastolic": {
            "acute": "I50.31",
            "chronic": "I50.32",
            "acute_on_chronic": "I50.33",
        },
        "combined": {
            "acute": "I50.41",
            "chronic": "I50.42",
            "acute_on_chronic": "I50.43",
        },
    },
    # exacerbation_status
    ConditionType.COPD: {
        "acute_lower_resp": "J44.0",
        "with_exacerbation": "J44.1",
        "stable": "J44.1",
    },
    # stage
    ConditionType.CKD: {
        "1": "N18.1",
        "2": "N18.2",
        "3": "N18.30",
        "3a": "N18.31",
        "3b": "N18.32",
        "4": "N18.4",
        "5": "N18.5",
        "esrd": "N18.6",
    },
    # type → complication
    ConditionType.DIABETES: {
        "type_2": {
            "none": "E11.9",
            "nephropathy": "E11.21",
            "retinopathy": "E11.319",
            "neuropathy": "E11.40",
            "peripheral_angiopathy": "E11.51",
            "hyperglycemia": "E11.65",
            "other": "E11.8",
        },
    },
    # substance → severity → remission_status
    ConditionType.OPIOID_SUD: {
        "opioid": _substance_codes("F11"),
        "alcohol": _substance_codes("F10"),
        "cannabis": _substance_codes("F12"),
        "stimulant": _substance_codes("F15"),
    },
}

# Component keys forming each table's lookup path, outermost first
DIMENSIONS: Dict[ConditionType, Tuple[str, ...]] = {
    ConditionType.MDD: ("severity", "episode_type"),
    ConditionType.CHF: ("type", "acuity"),
    ConditionType.COPD: ("exacerbation_status",),
    ConditionType.CKD: ("stage",),
    ConditionType.DIABETES: ("type", "complication"),
    ConditionType.OPIOID_SUD: ("substance", "severity", "remission_status"),
}

GENERIC_CODES: Dict[ConditionType, str] = {
    ConditionType.MDD: "F32.9",
    ConditionType.CHF: "I50.9",
    ConditionType.COPD: "J44.9",
    ConditionType.CKD: "N18.9",
    ConditionType.DIABETES: "E11.9",
    ConditionType.OPIOID_SUD: "F11.90",
}

# Reference values used to build the best-achievable code for a complete note
BEST_DEFAULTS: Dict[ConditionType, Dict[str, str]] = {
    ConditionType.MDD: {"severity": "moderate", "episode_type": "single"},
    ConditionType.CHF: {"type": "systolic", "acuity": "chronic"},
    ConditionType.COPD: {"exacerbation_status": "with_exacerbation"},
    ConditionType.CKD: {"stage": "4"},
    ConditionType.DIABETES: {"type": "type_2", "complication": "neuropathy"},
    ConditionType.OPIOID_SUD: {
        "substance": "opioid",
        "severity": "dependence",
        "remission_status": "active",
    },
}


class ICD10Resolver:
    """Pure table lookup from resolved component values to billing codes."""

    def generic_code(self, condition: ConditionType) -> str:
        return GENERIC_CODES[condition]

    def resolve(self, condition: ConditionType, values: Mapping[str, Optional[str]]) -> str:
        """
        Resolve the code for the documented component values.

        Args:
            condition: Resolved condition (never AUTO)
            values: Component key → resolved value (None when missing)

        Returns:
            Specific code, or the condition's generic code when the
            combination is not in the table
        """
        node = CODE_TABLES[condition]
        path = [values.get(dim) or UNSPECIFIED for dim in DIMENSIONS[condition]]
        for key in path:
            if not isinstance(node, dict) or key not in node:
                logger.debug(f"No {condition.value} code for {path}, using generic")
                return GENERIC_CODES[condition]
            node = node[key]
        if not isinstance(node, str):
            return GENERIC_CODES[condition]
        return node

    def best_code(self, condition: ConditionType, values: Optional[Mapping[str, Optional[str]]] = None) -> str:
        """
        Code a fully documented note would receive.

        Documented dimensions are kept; missing ones take reference values.
        """
        values = values or {}
        filled = {
            dim: values.get(dim) or BEST_DEFAULTS[condition][dim]
            for dim in DIMENSIONS[condition]
        }
        return self.resolve(condition, filled)
