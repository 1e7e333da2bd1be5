"""Library configuration management via environment variables."""

from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fuzzy_highlight.core.schemas import (
    DEFAULT_MAX_FULL_MODE_LENGTH,
    DEFAULT_MAX_QUERY_LENGTH,
    SearchMode,
    SearchOptions
)


class Settings(BaseSettings):
    """Search defaults loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FUZZY_HIGHLIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Pattern settings
    default_mode: SearchMode = SearchMode.INTRA_WORD
    whole_word: bool = True
    case_insensitive: bool = True

    # Upper bounds on normalized query length; None disables the check
    max_query_length: Optional[int] = DEFAULT_MAX_QUERY_LENGTH
    max_full_mode_length: Optional[int] = DEFAULT_MAX_FULL_MODE_LENGTH

    # Highlighting
    highlight_class: str = "fuzzy-highlight"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept level names in any case."""
        return v.strip().upper() if isinstance(v, str) else v

    def search_options(self) -> SearchOptions:
        """Build the default SearchOptions from these settings."""
        return SearchOptions(
            mode=self.default_mode,
            whole_word=self.whole_word,
            case_insensitive=self.case_insensitive,
            max_query_length=self.max_query_length,
            max_full_mode_length=self.max_full_mode_length
        )


# Global settings instance
settings = Settings()
