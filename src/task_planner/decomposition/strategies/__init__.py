"""Decomposition strategies for different task categories."""

from .template_strategy import TemplateStep, TemplateDecompositionStrategy
from .generic_strategy import GenericDecompositionStrategy
from .category_templates import CATEGORY_TEMPLATES, GENERIC_STEPS, TEMPLATE_VERSION

__all__ = [
    "TemplateStep",
    "TemplateDecompositionStrategy",
    "GenericDecompositionStrategy",
    "CATEGORY_TEMPLATES",
    "GENERIC_STEPS",
    "TEMPLATE_VERSION",
]
