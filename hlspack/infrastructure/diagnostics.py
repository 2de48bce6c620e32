"""Text patterns for ffmpeg diagnostic output.

ffmpeg has no stable machine-readable stderr format, so every regex the
pipeline depends on lives here. Bump PATTERN_VERSION when a pattern changes
to track a new ffmpeg output layout.
"""

import re
from typing import Optional, Tuple

PATTERN_VERSION = 1

# Duration: 00:01:30.50, start: 0.000000, bitrate: 1234 kb/s
DURATION_RE = re.compile(r"Duration: (\d{2}):(\d{2}):(\d{2})\.(\d{2})")

# Stream #0:0: Video: h264 (High), yuv420p(progressive), 1920x1080 [SAR 1:1 DAR 16:9], ...
GEOMETRY_RE = re.compile(r"Video: .*, (\d{3,5})x(\d{3,5})")

# frame= 250 fps= 50 q=28.0 size= 1024kB time=00:00:10.00 bitrate= 838.9kbits/s
PROGRESS_TIME_RE = re.compile(r"time=(\d{2}):(\d{2}):(\d{2})\.(\d{2})")

# " V....D h264_nvenc           NVIDIA NVENC H.264 encoder (codec h264)"
ENCODER_LINE_RE = re.compile(r"\sV[.A-Z]{5}\s(\w+)\s+(.*)")


def parse_clock(hours: str, minutes: str, seconds: str, hundredths: str) -> float:
    """H×3600 + M×60 + S + F/100."""
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds) + int(hundredths) / 100.0


def parse_duration(text: str) -> float:
    """Duration in seconds, or 0.0 when ffmpeg did not report one."""
    match = DURATION_RE.search(text)
    if not match:
        return 0.0
    return parse_clock(*match.groups())


def parse_geometry(text: str) -> Tuple[int, int]:
    match = GEOMETRY_RE.search(text)
    if not match:
        return 0, 0
    return int(match.group(1)), int(match.group(2))


def parse_progress_time(line: str) -> Optional[float]:
    """Elapsed encode time from a progress line, None for anything else."""
    match = PROGRESS_TIME_RE.search(line)
    if not match:
        return None
    return parse_clock(*match.groups())


def parse_encoder_line(line: str) -> Optional[Tuple[str, str]]:
    """(identifier, description) for a video encoder row of `ffmpeg -encoders`."""
    match = ENCODER_LINE_RE.search(line)
    if not match:
        return None
    return match.group(1), match.group(2).strip()
