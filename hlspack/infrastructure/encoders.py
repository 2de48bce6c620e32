import logging
from typing import List, Optional

from hlspack.domain.models import DEFAULT_ENCODER, EncoderInfo
from hlspack.infrastructure.diagnostics import parse_encoder_line
from hlspack.infrastructure.tool import FFmpegTool

SOFTWARE_ENCODER = EncoderInfo(id=DEFAULT_ENCODER, name="CPU (x264)")

# Checked in order; first marker contained in the identifier wins.
HARDWARE_VENDORS = (
    ("nvenc", "NVIDIA GPU"),
    ("qsv", "Intel QuickSync"),
    ("vaapi", "VAAPI"),
    ("videotoolbox", "Apple Silicon"),
    ("amf", "AMD AMF"),
)


def classify_encoder(encoder_id: str) -> Optional[str]:
    """Human-readable label for a hardware encoder, None if no vendor matches."""
    for marker, vendor in HARDWARE_VENDORS:
        if marker in encoder_id:
            return f"{vendor} ({encoder_id})"
    return None


class EncoderDiscovery:
    """Lists the encoders a UI can offer, based on `ffmpeg -encoders`."""

    def __init__(self, tool: Optional[FFmpegTool] = None):
        self.tool = tool or FFmpegTool()
        self.logger = logging.getLogger(__name__)

    def list_encoders(self) -> List[EncoderInfo]:
        result = self.tool.run(["-encoders", "-hide_banner"])
        if result.returncode != 0:
            self.logger.warning(f"ENCODERS: ffmpeg exited with code {result.returncode}; parsing captured output")

        encoders = [SOFTWARE_ENCODER]
        for line in (result.stdout or "").splitlines():
            parsed = parse_encoder_line(line)
            if parsed is None:
                continue
            encoder_id, _description = parsed
            label = classify_encoder(encoder_id)
            if label is None:
                continue
            encoders.append(EncoderInfo(id=encoder_id, name=label))

        self.logger.info(f"ENCODERS: {', '.join(e.id for e in encoders)}")
        return encoders
