from pydantic_settings import BaseSettings

from pattern_service.core.constants import (
    ANSWER_COLUMN_PATTERN,
    OPTION_COLUMN_PATTERN,
)

PATTERN_ENV_PREFIX = "PATTERN_"


class PatternSettings(BaseSettings):
    model_config = {"env_prefix": PATTERN_ENV_PREFIX}

    option_column_pattern: str = OPTION_COLUMN_PATTERN
    answer_column_pattern: str = ANSWER_COLUMN_PATTERN
    default_seed: int | None = None
    max_respondents: int = 100000
