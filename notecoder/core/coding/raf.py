"""
RAF impact calculation.

Looks up risk weights for the documented code and the best-achievable code,
turns the weight gap into an annual dollar estimate, and classifies
documentation completeness.
"""
import logging
from dataclasses import dataclass, replace
from typing import Optional

from notecoder.config.raf_table import RafTable, get_raf_table
from notecoder.core.coding.icd10 import ICD10Resolver
from notecoder.core.models.condition import RafStatus
from notecoder.core.models.result import AnalysisResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RafAssessment:
    """Weights, dollar gap and status for one result."""

    current_raf_weight: float
    potential_raf_weight: float
    raf_dollar_impact: float
    raf_status: RafStatus


class RafCalculator:
    """Compute RAF enrichment from a weight table."""

    def __init__(
        self,
        table: Optional[RafTable] = None,
        resolver: Optional[ICD10Resolver] = None,
    ):
        """
        Initialize calculator.

        Args:
            table: Weight table; defaults to the process-wide configured table
            resolver: Resolver used for best-achievable codes
        """
        self._table = table
        self._resolver = resolver or ICD10Resolver()

    @property
    def table(self) -> RafTable:
        return self._table if self._table is not None else get_raf_table()

    def weight(self, icd10: Optional[str]) -> float:
        return self.table.weight(icd10)

    def compute(
        self,
        current_icd10: Optional[str],
        potential_icd10: Optional[str],
        is_complete: bool,
    ) -> RafAssessment:
        """
        Compare the current code against the best-achievable code.

        Args:
            current_icd10: Code the note supports today
            potential_icd10: Code a fully documented note would support
            is_complete: True when no required component is missing

        Returns:
            RafAssessment; dollar impact is never negative
        """
        table = self.table
        current = table.weight(current_icd10)
        potential = table.weight(potential_icd10)
        gap = max(0.0, potential - current)
        dollars = round(gap * table.pmpy_dollars, 2)

        if is_complete:
            status = RafStatus.COMPLETE
        elif gap > 0:
            status = RafStatus.INCOMPLETE
        else:
            # Gap exists in documentation but not in weight
            status = RafStatus.MISSING

        return RafAssessment(
            current_raf_weight=current,
            potential_raf_weight=potential,
            raf_dollar_impact=dollars,
            raf_status=status,
        )

    def enrich(self, result: AnalysisResult) -> AnalysisResult:
        """
        Return a copy of result with any absent RAF fields filled in.

        Fields already present (e.g. supplied by an external classifier)
        are kept. A result that already carries every RAF field is returned
        unchanged.
        """
        if result.has_raf:
            return result

        potential_code = result.potential_icd10
        if not potential_code:
            if result.valid:
                potential_code = result.icd10
            else:
                potential_code = self._resolver.best_code(result.condition_type)

        assessment = self.compute(
            result.icd10, potential_code, not result.missing_components
        )

        updates = {}
        if result.potential_icd10 is None:
            updates["potential_icd10"] = potential_code
        for name in ("current_raf_weight", "potential_raf_weight", "raf_dollar_impact", "raf_status"):
            if getattr(result, name) is None:
                updates[name] = getattr(assessment, name)

        logger.debug(
            f"RAF {result.condition_type.value}: {result.icd10} -> {potential_code} "
            f"${assessment.raf_dollar_impact:,.2f} ({assessment.raf_status.value})"
        )
        return replace(result, **updates)
