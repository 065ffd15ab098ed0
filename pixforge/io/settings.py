"""
Generator settings loaded from environment variables or an env file.
"""

from __future__ import annotations

from typing import Dict, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pixforge.domain.types.crop import CropPoints


class GeneratorSettings(BaseSettings):
    """
    Settings model for the image generator via environment variables
    (``PIXFORGE_*``) or other settings sources supported by `pydantic-settings`.
    """

    base_url: str = ""
    placeholder_name: str = "placeholder.png"

    # breakpoint width -> (x1, y1, x2, y2); JSON object in the environment
    crop_points: Dict[int, Tuple[int, int, int, int]] = Field(default_factory=dict)

    # Anchor every corner crop at the top-left, like the first releases did.
    legacy_corner_anchor: bool = False

    large_image_area: int = 479999
    large_image_quality: int = Field(default=85, ge=1, le=100)
    default_quality: int = Field(default=95, ge=1, le=100)

    temp_suffix: str = "_temp"

    model_config = SettingsConfigDict(
        env_prefix="PIXFORGE_",
        env_file="pixforge.env",
        extra="ignore",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def get_crop_points(self) -> Dict[int, CropPoints]:
        return dict(self.crop_points)

    def quality_for(self, width: int, height: int) -> int:
        """Quality hint for the optimizer; large derivatives compress harder."""
        if width * height > self.large_image_area:
            return self.large_image_quality
        return self.default_quality
