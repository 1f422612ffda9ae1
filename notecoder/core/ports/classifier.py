"""Classifier port interface.

Defines the contract for an optional external (model-backed) classifier.
The coding engine depends only on this abstraction and always falls back
to its rule-based result when a classifier fails or answers badly.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from notecoder.core.models.condition import ConditionType


class ClassifierPort(ABC):
    """Abstract interface for external note classifiers."""

    @abstractmethod
    async def classify(
        self,
        note_text: str,
        condition: ConditionType,
    ) -> Optional[Dict[str, Any]]:
        """Classify a note for one condition.

        Args:
            note_text: Raw note text
            condition: Resolved condition (never AUTO)

        Returns:
            Result payload in the camelCase output contract, or None when
            the classifier has no answer

        Raises:
            ClassifierError: If the provider call fails
        """
        pass
