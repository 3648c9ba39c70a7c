"""Component and line diffing."""

from .components import ComponentReconciler
from .lines import LineDiffEngine

__all__ = ["ComponentReconciler", "LineDiffEngine"]
