import logging
from pathlib import Path
from typing import List

from hlspack.domain.errors import IOFailure
from hlspack.domain.layout import MASTER_PLAYLIST, rendition_uri
from hlspack.domain.models import MasterPlaylistEntry, RenditionProfile

MASTER_HEADER = ["#EXTM3U", "#EXT-X-VERSION:3"]


def entry_for(rendition: RenditionProfile) -> MasterPlaylistEntry:
    return MasterPlaylistEntry(
        bandwidth=rendition.bandwidth,
        resolution=rendition.resolution,
        uri=rendition_uri(rendition.quality),
    )


class PlaylistAssembler:
    """Collects variant entries for one job and writes master.m3u8.

    Entries keep call order: players usually start on the first variant.
    """

    def __init__(self):
        self.entries: List[MasterPlaylistEntry] = []
        self.logger = logging.getLogger(__name__)

    def record(self, entry: MasterPlaylistEntry) -> None:
        self.entries.append(entry)

    def render(self) -> str:
        lines = list(MASTER_HEADER)
        for entry in self.entries:
            lines.append(f"#EXT-X-STREAM-INF:BANDWIDTH={entry.bandwidth},RESOLUTION={entry.resolution}")
            lines.append(entry.uri)
        return "\n".join(lines) + "\n"

    def finalize(self, output_dir: Path) -> Path:
        master_path = Path(output_dir) / MASTER_PLAYLIST
        try:
            master_path.write_text(self.render(), encoding="utf-8")
        except OSError as exc:
            raise IOFailure(f"Failed to write {master_path}: {exc}") from exc
        self.logger.info(f"MASTER_WRITTEN: {master_path} ({len(self.entries)} variants)")
        return master_path
