import pytest
import shutil
import yaml
from unittest.mock import MagicMock
from hlspack.domain.models import ProcessConfig
from hlspack.infrastructure.event_bus import EventBus

# ============================================================================
# ffmpeg Fixtures
# ============================================================================

FAKE_FFMPEG = "/usr/bin/ffmpeg"


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    """Makes ffmpeg resolvable on PATH without a real binary."""
    monkeypatch.setattr("hlspack.infrastructure.tool.shutil.which", lambda name: FAKE_FFMPEG)
    return FAKE_FFMPEG

@pytest.fixture
def missing_ffmpeg(monkeypatch):
    monkeypatch.setattr("hlspack.infrastructure.tool.shutil.which", lambda name: None)

def make_process(stderr_lines, returncode=0):
    """A stand-in for subprocess.Popen with scripted stderr and exit code."""
    process = MagicMock()
    process.stderr = list(stderr_lines)
    process.wait.return_value = returncode
    process.returncode = returncode
    process.poll.return_value = None  # still running until the test says otherwise
    return process

@pytest.fixture
def process_factory():
    return make_process

# ============================================================================
# Job Fixtures
# ============================================================================

@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "input.mp4"
    path.write_bytes(b"not really a video")
    return path

@pytest.fixture
def process_config(source_file, tmp_path):
    return ProcessConfig(
        id="job-1",
        input_path=source_file,
        output_dir=tmp_path / "out",
        qualities=["480p", "1080p"],
    )

@pytest.fixture
def config_yaml_path(tmp_path):
    """Creates a temporary YAML config file."""
    conf_dir = tmp_path / "conf"
    conf_dir.mkdir()
    conf_file = conf_dir / "hlspack.yaml"

    content = {
        'general': {
            'ffmpeg_path': None,
            'debug': False,
        },
        'defaults': {
            'qualities': ['720p', '360p'],
            'segment_duration': 6,
            'encoder': 'h264_nvenc',
        },
    }

    with open(conf_file, 'w') as f:
        yaml.dump(content, f)

    return conf_file

# ============================================================================
# EventBus Fixtures
# ============================================================================

@pytest.fixture
def event_bus():
    """Returns a fresh EventBus instance."""
    return EventBus()

# ============================================================================
# Real ffmpeg (integration tests)
# ============================================================================

@pytest.fixture
def real_ffmpeg():
    path = shutil.which("ffmpeg")
    if path is None:
        pytest.skip("ffmpeg not installed")
    return path

@pytest.fixture
def real_test_video(tmp_path, real_ffmpeg):
    """Generates a short synthetic clip with ffmpeg's lavfi sources."""
    import subprocess

    target = tmp_path / "source.mp4"
    cmd = [
        real_ffmpeg, "-hide_banner", "-y",
        "-f", "lavfi", "-i", "testsrc=size=640x360:rate=24:duration=3",
        "-f", "lavfi", "-i", "sine=frequency=440:duration=3",
        "-c:v", "libx264", "-pix_fmt", "yuv420p", "-c:a", "aac", "-shortest",
        str(target),
    ]
    result = subprocess.run(cmd, capture_output=True)
    if result.returncode != 0:
        pytest.skip("ffmpeg cannot synthesize a test clip (libx264/aac missing?)")
    return target
