import pytest

from hlspack.domain.errors import IOFailure
from hlspack.domain.models import MasterPlaylistEntry
from hlspack.pipeline.planner import rendition_for
from hlspack.pipeline.playlist import PlaylistAssembler, entry_for


def test_entry_for_rendition():
    entry = entry_for(rendition_for("480p"))
    assert entry == MasterPlaylistEntry(bandwidth=1_400_000, resolution="854x480", uri="480p/playlist.m3u8")


def test_render_keeps_record_order():
    assembler = PlaylistAssembler()
    assembler.record(entry_for(rendition_for("480p")))
    assembler.record(entry_for(rendition_for("1080p")))

    assert assembler.render() == (
        "#EXTM3U\n"
        "#EXT-X-VERSION:3\n"
        "#EXT-X-STREAM-INF:BANDWIDTH=1400000,RESOLUTION=854x480\n"
        "480p/playlist.m3u8\n"
        "#EXT-X-STREAM-INF:BANDWIDTH=5000000,RESOLUTION=1920x1080\n"
        "1080p/playlist.m3u8\n"
    )


def test_repeated_quality_is_not_deduplicated():
    assembler = PlaylistAssembler()
    assembler.record(entry_for(rendition_for("720p")))
    assembler.record(entry_for(rendition_for("720p")))
    assert assembler.render().count("720p/playlist.m3u8") == 2


def test_finalize_writes_master(tmp_path):
    assembler = PlaylistAssembler()
    assembler.record(entry_for(rendition_for("360p")))

    path = assembler.finalize(tmp_path)

    assert path == tmp_path / "master.m3u8"
    assert path.read_text() == assembler.render()


def test_finalize_write_error_is_io_failure(tmp_path):
    assembler = PlaylistAssembler()
    with pytest.raises(IOFailure):
        assembler.finalize(tmp_path / "missing" / "dir")
