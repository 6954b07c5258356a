"""
Response pattern generation.

Samples item responses from a fitted IRT model at given trait values and
shapes them into numeric pattern matrices or answer-key labels.
"""

from pattern_service.patterns.answer_key import AnswerKey, ItemKey
from pattern_service.patterns.generator import (
    ResponsePattern,
    generate_pattern,
    resolve_labels,
)
from pattern_service.patterns.sampling import (
    compute_item_probabilities,
    sample_categories,
    sample_pattern,
)
from pattern_service.patterns.theta import as_theta_matrix

__all__ = [
    "AnswerKey",
    "ItemKey",
    "ResponsePattern",
    "as_theta_matrix",
    "compute_item_probabilities",
    "generate_pattern",
    "resolve_labels",
    "sample_categories",
    "sample_pattern",
]
