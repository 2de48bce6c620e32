"""On-disk layout of a packaged job.

outputDir/master.m3u8
outputDir/<quality>/playlist.m3u8
outputDir/<quality>/000.ts, 001.ts, ...
"""

from pathlib import Path

MASTER_PLAYLIST = "master.m3u8"
RENDITION_PLAYLIST = "playlist.m3u8"
SEGMENT_PATTERN = "%03d.ts"


def rendition_dir(output_dir: Path, quality: str) -> Path:
    return Path(output_dir) / quality


def rendition_uri(quality: str) -> str:
    """Playlist path relative to the master playlist, always with forward slashes."""
    return f"{quality}/{RENDITION_PLAYLIST}"


def check_quality_label(quality: str) -> str:
    """A label names a folder directly under outputDir; reject anything that could escape it."""
    if not quality or quality in (".", "..") or "/" in quality or "\\" in quality:
        raise ValueError(f"Invalid quality label {quality!r}: must be a plain folder name")
    return quality
