"""
Exceptions raised by the pattern generation core.

All input problems are raised before any random draw is made, so a failed
call never leaves a partially sampled pattern behind.
"""


class PatternGenerationError(Exception):
    """Base class for errors raised while generating response patterns."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnsupportedShapeError(PatternGenerationError):
    """Input has a shape this core does not support.

    Raised when labeled output is requested for more than one theta row, when
    an answer key carries more than one answer column, or when theta has more
    than two dimensions.
    """


class InvalidInputError(PatternGenerationError):
    """The answer key is not a usable table."""


class DataIntegrityError(PatternGenerationError):
    """Coercing categorical columns to text changed one or more values."""


class ValidationError(Exception):
    """Raised when a diagnostic check on generated patterns fails."""

    pass
