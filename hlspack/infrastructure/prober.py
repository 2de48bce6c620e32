import logging
from pathlib import Path
from typing import List, Optional

from hlspack.domain.errors import ProbeFailure, SpawnFailure, ToolNotFound
from hlspack.domain.models import ProbeResult
from hlspack.infrastructure.diagnostics import parse_duration, parse_geometry
from hlspack.infrastructure.tool import FFmpegTool, iter_lines

class MediaProber:
    """Reads duration and frame geometry from `ffmpeg -i` diagnostics.

    `ffmpeg -i <file>` with no output exits non-zero by design, so the exit
    code is ignored. Missing fields degrade to 0 / "unknown".
    """

    def __init__(self, tool: Optional[FFmpegTool] = None):
        self.tool = tool or FFmpegTool()
        self.logger = logging.getLogger(__name__)

    def probe(self, file_path: Path) -> ProbeResult:
        try:
            process = self.tool.spawn(["-i", str(file_path), "-hide_banner"])
        except (ToolNotFound, SpawnFailure) as exc:
            raise ProbeFailure(f"Cannot probe {file_path}: {exc}") from exc

        lines: List[str] = list(iter_lines(process.stderr))
        process.wait()
        text = "\n".join(lines)

        duration = parse_duration(text)
        width, height = parse_geometry(text)
        if duration <= 0:
            self.logger.warning(f"PROBE: no duration reported for {file_path}; progress disabled")

        result = ProbeResult(duration=duration, width=width, height=height)
        self.logger.info(
            f"PROBE: {file_path.name} duration={result.duration:.2f}s "
            f"geometry={result.width}x{result.height}"
        )
        return result
