"""Abstract interfaces for external dependencies."""
from notecoder.core.ports.classifier import ClassifierPort

__all__ = [
    "ClassifierPort",
]
