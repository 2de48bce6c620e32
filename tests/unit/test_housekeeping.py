import pytest

from hlspack.infrastructure.housekeeping import HousekeepingService


def test_cleanup_partial_output(tmp_path):
    (tmp_path / "720p").mkdir()
    (tmp_path / "720p" / "000.ts").write_bytes(b"ts")
    (tmp_path / "480p").mkdir()
    (tmp_path / "keep.txt").write_text("unrelated")

    removed = HousekeepingService().cleanup_partial_output(tmp_path, ["720p", "480p", "360p"])

    assert set(removed) == {tmp_path / "720p", tmp_path / "480p"}
    assert not (tmp_path / "720p").exists()
    assert not (tmp_path / "480p").exists()
    assert (tmp_path / "keep.txt").exists()


def test_cleanup_removes_stale_master(tmp_path):
    (tmp_path / "master.m3u8").write_text("#EXTM3U\n")
    removed = HousekeepingService().cleanup_partial_output(tmp_path, ["720p"])
    assert removed == [tmp_path / "master.m3u8"]


def test_cleanup_duplicate_qualities(tmp_path):
    (tmp_path / "720p").mkdir()
    removed = HousekeepingService().cleanup_partial_output(tmp_path, ["720p", "720p"])
    assert removed == [tmp_path / "720p"]


def test_cleanup_missing_output_dir(tmp_path):
    assert HousekeepingService().cleanup_partial_output(tmp_path / "missing", ["720p"]) == []


@pytest.mark.parametrize("label", ["..", ".", "", "../sibling"])
def test_cleanup_never_leaves_output_dir(tmp_path, label):
    out = tmp_path / "out"
    (out / "720p").mkdir(parents=True)
    (tmp_path / "sibling").mkdir()
    (tmp_path / "precious.txt").write_text("keep me")

    removed = HousekeepingService().cleanup_partial_output(out, [label, "720p"])

    assert removed == [out / "720p"]
    assert (tmp_path / "precious.txt").exists()
    assert (tmp_path / "sibling").is_dir()
    assert out.is_dir()
