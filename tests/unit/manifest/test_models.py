"""Tests for manifest models and their on-disk form."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from vtp.core.codecs import AudioCodec, VideoCodec
from vtp.core.containers import AudioContainer, VideoContainer
from vtp.manifest.descriptor import to_platform_descriptor
from vtp.manifest.io import (
    DESCRIPTOR_FILENAME,
    MANIFEST_FILENAME,
    load_manifest,
    write_descriptor,
    write_manifest,
)
from vtp.manifest.models import (
    AudioOutput,
    Manifest,
    MuxedAudio,
    TextOutput,
    VideoOutput,
)


@pytest.fixture
def manifest() -> Manifest:
    return Manifest(
        title="Episode 1",
        duration=1420.048,
        video_files=(
            VideoOutput(
                filename="main.mp4",
                container=VideoContainer.MP4,
                video_codec=VideoCodec.H264,
                height=1080,
                audio_codec=AudioCodec.AAC,
            ),
            VideoOutput(
                filename="video0_vp9.webm",
                container=VideoContainer.WEBM,
                video_codec=VideoCodec.VP9,
                height=1080,
                audio_codec=AudioCodec.OPUS,
                audio_is_silent=True,
            ),
        ),
        audio_files=(
            AudioOutput(
                filename="audio_2_eng.ogg",
                container=AudioContainer.OGG,
                codec=AudioCodec.FLAC,
                language="eng",
                title="Commentary",
            ),
        ),
        text_files=(TextOutput(filename="sub_3_eng.vtt", language="eng"),),
        muxed_audio=MuxedAudio(language="jpn"),
    )


class TestManifestDiscard:
    """Tests for Manifest.discard."""

    def test_drops_listed_files(self, manifest: Manifest):
        updated = manifest.discard(video=["main.mp4"], text=["sub_3_eng.vtt"])

        assert [v.filename for v in updated.video_files] == ["video0_vp9.webm"]
        assert updated.text_files == ()
        assert updated.audio_files == manifest.audio_files

    def test_original_unchanged(self, manifest: Manifest):
        manifest.discard(audio=["audio_2_eng.ogg"])
        assert len(manifest.audio_files) == 1

    def test_unknown_names_ignored(self, manifest: Manifest):
        assert manifest.discard(video=["nope.mp4"]) == manifest

    def test_names_are_per_kind(self, manifest: Manifest):
        """A video filename listed as audio does not drop the video."""
        assert manifest.discard(audio=["main.mp4"]) == manifest


class TestManifestSerialization:
    def test_dict_round_trip(self, manifest: Manifest):
        assert Manifest.from_dict(manifest.to_dict()) == manifest

    def test_field_names(self, manifest: Manifest):
        data = manifest.to_dict()
        assert data["video_files"][0] == {
            "filename": "main.mp4",
            "container": "mp4",
            "video_codec": "h264",
            "audio_codec": "aac",
            "audio_is_silent": False,
            "height": 1080,
        }
        assert data["muxed_audio"] == {"language": "jpn", "title": None}

    def test_filenames(self, manifest: Manifest):
        assert manifest.filenames == [
            "main.mp4",
            "video0_vp9.webm",
            "audio_2_eng.ogg",
            "sub_3_eng.vtt",
        ]

    def test_has_source_audio(self, manifest: Manifest):
        assert manifest.video_files[0].has_source_audio
        assert not manifest.video_files[1].has_source_audio

    def test_unknown_codec_rejected(self, manifest: Manifest):
        data = manifest.to_dict()
        data["video_files"][0]["video_codec"] = "mpeg2video"
        with pytest.raises(ValueError):
            Manifest.from_dict(data)


class TestManifestIO:
    def test_write_and_load(self, tmp_path: Path, manifest: Manifest):
        path = write_manifest(manifest, tmp_path)

        assert path == tmp_path / MANIFEST_FILENAME
        assert load_manifest(tmp_path) == manifest
        # No temp files left behind
        assert [p.name for p in tmp_path.iterdir()] == [MANIFEST_FILENAME]

    def test_overwrite(self, tmp_path: Path, manifest: Manifest):
        write_manifest(manifest, tmp_path)
        write_manifest(manifest.discard(video=["main.mp4"]), tmp_path)
        assert len(load_manifest(tmp_path).video_files) == 1

    def test_failed_rename_leaves_no_temp_file(
        self, tmp_path: Path, manifest: Manifest
    ):
        with (
            patch("vtp.manifest.io.os.replace", side_effect=OSError("disk full")),
            pytest.raises(OSError, match="disk full"),
        ):
            write_manifest(manifest, tmp_path)
        assert list(tmp_path.iterdir()) == []

    def test_load_missing(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_manifest(tmp_path)

    def test_load_malformed(self, tmp_path: Path):
        (tmp_path / MANIFEST_FILENAME).write_text(json.dumps({"duration": 1}))
        with pytest.raises(ValueError, match="Malformed manifest"):
            load_manifest(tmp_path)

    def test_non_ascii_titles_kept(self, tmp_path: Path):
        titled = Manifest(title="第1話", duration=1.0)
        write_manifest(titled, tmp_path)
        assert "第1話" in (tmp_path / MANIFEST_FILENAME).read_text(encoding="utf-8")

    def test_write_descriptor(self, tmp_path: Path, manifest: Manifest):
        descriptor = to_platform_descriptor(manifest, "/media/ep1/")
        path = write_descriptor(descriptor, tmp_path)

        assert path.name == DESCRIPTOR_FILENAME
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["sources"][0]["url"] == "/media/ep1/main.mp4"
