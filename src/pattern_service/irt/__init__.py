"""
IRT (Item Response Theory) module.

This module provides:
- Item parameter classes (dichotomous, graded, nominal) with
  compute_probabilities methods over multidimensional traits
- The ItemResponseModel capability consumed by the pattern generator
- FittedModel, the concrete model backed by item parameters
"""

from pattern_service.irt.items import (
    DichotomousItemParameters,
    GradedItemParameters,
    ItemParameters,
    NominalItemParameters,
)
from pattern_service.irt.models import (
    FittedModel,
    ItemResponseFunction,
    ItemResponseModel,
    min_offsets_from_responses,
)

__all__ = [
    "DichotomousItemParameters",
    "FittedModel",
    "GradedItemParameters",
    "ItemParameters",
    "ItemResponseFunction",
    "ItemResponseModel",
    "NominalItemParameters",
    "min_offsets_from_responses",
]
