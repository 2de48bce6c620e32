from enum import Enum
from pathlib import Path
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from hlspack.domain.layout import check_quality_label

DEFAULT_QUALITY = "720p"
DEFAULT_ENCODER = "libx264"
DEFAULT_SEGMENT_DURATION = 4

class JobState(str, Enum):
    PENDING = "PENDING"
    PROBING = "PROBING"
    PLANNING = "PLANNING"
    ENCODING = "ENCODING"
    FINALIZING = "FINALIZING"
    DONE = "DONE"
    FAILED = "FAILED"

class ProcessConfig(BaseModel):
    """Single job request: one source file packaged into one output directory."""
    model_config = ConfigDict(frozen=True)

    id: str
    input_path: Path
    output_dir: Path
    qualities: List[str] = Field(default_factory=list)
    segment_duration: int = Field(default=DEFAULT_SEGMENT_DURATION, ge=1)
    encoder: str = DEFAULT_ENCODER

    @field_validator('qualities')
    @classmethod
    def validate_qualities(cls, v: List[str]) -> List[str]:
        return [check_quality_label(q) for q in v]

class ProbeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    duration: float = Field(default=0.0, ge=0.0)  # 0 = unknown
    width: int = 0
    height: int = 0
    format_name: str = "unknown"

class RenditionProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    quality: str
    scale: str
    bitrate_kbps: int = Field(gt=0)
    bandwidth: int = Field(gt=0)
    resolution: str

    @property
    def bitrate(self) -> str:
        return f"{self.bitrate_kbps}k"

    @property
    def bufsize(self) -> str:
        return f"{self.bitrate_kbps * 2}k"

class EncoderProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    encoder: str
    family: str
    codec_args: List[str]
    profile_args: List[str]
    quality_args: List[str]
    suppress_profile: bool = False

    def video_args(self) -> List[str]:
        """Codec, profile and quality flags in the order ffmpeg receives them."""
        args = list(self.codec_args)
        if not self.suppress_profile:
            args.extend(self.profile_args)
        args.extend(self.quality_args)
        return args

class MasterPlaylistEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    bandwidth: int
    resolution: str
    uri: str

class EncoderInfo(BaseModel):
    id: str
    name: str

class TranscodeJob(BaseModel):
    """Transient state for one rendition encode."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    job_id: str
    rendition: RenditionProfile
    process: Optional[Any] = None
    output: str = ""
    progress_percent: Optional[float] = None
    exit_code: Optional[int] = None

class JobResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    job_id: str
    state: JobState
    manifest_path: Optional[Path] = None
    renditions_completed: int = 0
    error_message: Optional[str] = None
    failure: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.state == JobState.DONE
