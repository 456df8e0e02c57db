"""
Configuration for annotation_metadata package.

Uses pydantic-settings for environment variable management.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ViewerConfig(BaseSettings):
    """Configuration for metadata reconciliation and display ordering."""

    model_config = SettingsConfigDict(
        env_prefix="ANNOTATION_METADATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Spatial ordering
    row_tolerance: float = Field(
        default=10.0,
        description="Max vertical distance in pixels for two boxes to share a row",
        ge=0.0,
    )

    # Reserved keys
    seed_key: str = Field(
        default="SEED",
        description="Declared-field sentinel that is never displayed",
    )
    header_search_key: str = Field(
        default="HEADER_SEARCH",
        description="Fixed key of the page header search box",
    )

    # Display
    empty_marker: str = Field(
        default="(empty)",
        description="Value shown for fields that exist but have no value",
        min_length=1,
    )

    # Matching
    fuzzy_field_matching: bool = Field(
        default=False,
        description=(
            "Also match flat order/cart/search fields against element keys "
            "that start with the field key minus underscores"
        ),
    )


@lru_cache
def get_config() -> ViewerConfig:
    """Get cached configuration instance."""
    return ViewerConfig()
