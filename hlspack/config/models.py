from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from hlspack.domain.layout import check_quality_label
from hlspack.domain.models import DEFAULT_ENCODER, DEFAULT_QUALITY, DEFAULT_SEGMENT_DURATION

class GeneralConfig(BaseModel):
    ffmpeg_path: Optional[str] = None  # None = "ffmpeg" from PATH
    log_path: Optional[str] = None
    debug: bool = False

class DefaultsConfig(BaseModel):
    """Job defaults applied when the CLI does not override them.

    Quality labels follow the same rule as --quality: unknown labels are kept
    and encoded with the 720p ladder, but must be plain folder names.
    """
    qualities: List[str] = Field(default_factory=lambda: [DEFAULT_QUALITY])
    segment_duration: int = Field(default=DEFAULT_SEGMENT_DURATION, ge=1)
    encoder: str = DEFAULT_ENCODER

    @field_validator('qualities')
    @classmethod
    def validate_qualities(cls, v: List[str]) -> List[str]:
        return [check_quality_label(q) for q in v]

    @field_validator('encoder')
    @classmethod
    def validate_encoder(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("encoder cannot be empty")
        return v.strip()

class AppConfig(BaseModel):
    general: GeneralConfig = Field(default_factory=GeneralConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
