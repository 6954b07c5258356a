"""
Constants shared by the pattern generation modules.
"""

# Zero-based category treated as "answered correctly" when an answer key is
# supplied. Only meaningful for dichotomously scored items.
CORRECT_CATEGORY = 1

# Column name fragments used to recognise answer-key tables
OPTION_COLUMN_PATTERN = "Option"
ANSWER_COLUMN_PATTERN = "Answer"

# Logit clipping bounds to prevent overflow in exp()
EXPONENT_CLIP_MIN = -30.0
EXPONENT_CLIP_MAX = 30.0
