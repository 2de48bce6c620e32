"""Rendition and encoder planning.

Pure functions: quality labels map to fixed encode ladders, and the encoder
identifier maps to one backend family whose flags ffmpeg will accept.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from hlspack.domain.models import DEFAULT_QUALITY, EncoderProfile, RenditionProfile

# Segment boundaries only line up with keyframes when the source runs at this rate.
ASSUMED_FRAME_RATE = 12

RENDITION_TABLE: Dict[str, RenditionProfile] = {
    "1080p": RenditionProfile(quality="1080p", scale="scale=-2:1080", bitrate_kbps=4500, bandwidth=5_000_000, resolution="1920x1080"),
    "720p": RenditionProfile(quality="720p", scale="scale=-2:720", bitrate_kbps=2500, bandwidth=2_800_000, resolution="1280x720"),
    "480p": RenditionProfile(quality="480p", scale="scale=-2:480", bitrate_kbps=1250, bandwidth=1_400_000, resolution="854x480"),
    "360p": RenditionProfile(quality="360p", scale="scale=-2:360", bitrate_kbps=800, bandwidth=900_000, resolution="640x360"),
}

PROFILE_ARGS = ["-profile:v", "main"]


def normalize_qualities(qualities: Sequence[str]) -> List[str]:
    """An empty request means a single default rendition."""
    return list(qualities) if qualities else [DEFAULT_QUALITY]


def rendition_for(quality: str) -> RenditionProfile:
    """Profile for a label; unknown labels get the 720p ladder under their own name."""
    known = RENDITION_TABLE.get(quality)
    if known is not None:
        return known
    return RENDITION_TABLE[DEFAULT_QUALITY].model_copy(update={"quality": quality})


def plan_renditions(qualities: Sequence[str]) -> List[RenditionProfile]:
    if not qualities:
        raise ValueError("plan_renditions requires at least one quality; call normalize_qualities first")
    return [rendition_for(q) for q in qualities]


def gop_size(segment_duration: int) -> int:
    return segment_duration * ASSUMED_FRAME_RATE


@dataclass(frozen=True)
class EncoderFamily:
    """A backend family and the quality flags its encoders accept."""

    name: str
    markers: Tuple[str, ...]
    quality_args: Callable[[], List[str]]
    suppress_profile: bool = False

    def matches(self, encoder: str) -> bool:
        return any(marker in encoder for marker in self.markers)

    def profile_for(self, encoder: str) -> EncoderProfile:
        return EncoderProfile(
            encoder=encoder,
            family=self.name,
            codec_args=["-c:v", encoder],
            profile_args=list(PROFILE_ARGS),
            quality_args=self.quality_args(),
            suppress_profile=self.suppress_profile,
        )


NVENC = EncoderFamily(
    name="nvenc",
    markers=("nvenc",),
    quality_args=lambda: ["-cq", "20", "-preset", "p4"],
)

# VideoToolbox rejects -profile:v/-crf alongside its 1-100 -q:v scale.
VIDEOTOOLBOX = EncoderFamily(
    name="videotoolbox",
    markers=("videotoolbox",),
    quality_args=lambda: ["-q:v", "60"],
    suppress_profile=True,
)

SOFTWARE = EncoderFamily(
    name="software",
    markers=(),
    quality_args=lambda: ["-crf", "20"],
)

HARDWARE_FAMILIES: Tuple[EncoderFamily, ...] = (NVENC, VIDEOTOOLBOX)


def select_family(encoder: str) -> EncoderFamily:
    for family in HARDWARE_FAMILIES:
        if family.matches(encoder):
            return family
    return SOFTWARE


def resolve_encoder_profile(encoder: str) -> EncoderProfile:
    return select_family(encoder).profile_for(encoder)


@dataclass(frozen=True)
class JobPlan:
    renditions: List[RenditionProfile]
    encoder: EncoderProfile
    gop: int


def plan_job(qualities: Sequence[str], encoder: str, segment_duration: int) -> JobPlan:
    return JobPlan(
        renditions=plan_renditions(normalize_qualities(qualities)),
        encoder=resolve_encoder_profile(encoder),
        gop=gop_size(segment_duration),
    )
