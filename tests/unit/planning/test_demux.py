"""Tests for the demux planner."""

from pathlib import Path

from vtp.core.codecs import AudioCodec, VideoCodec
from vtp.core.containers import AudioContainer, VideoContainer
from vtp.manifest.models import (
    AudioOutput,
    Manifest,
    MuxedAudio,
    TextOutput,
    VideoOutput,
)
from vtp.planning.demux import build_demux_commands, select_extraction_source

OUT = Path("/out/job")


def video(filename, codec=VideoCodec.H264, audio=AudioCodec.AAC, silent=False):
    container = VideoContainer.from_extension(filename.rsplit(".", 1)[1])
    return VideoOutput(
        filename=filename,
        container=container,
        video_codec=codec,
        height=1080,
        audio_codec=audio,
        audio_is_silent=silent,
    )


def manifest(*videos, **kwargs):
    return Manifest(title="Movie", duration=60.0, video_files=videos, **kwargs)


class TestSelectExtractionSource:
    """Tests for select_extraction_source."""

    def test_no_embedded_audio(self):
        assert select_extraction_source(manifest(video("main.mp4", audio=None))) is (
            None
        )

    def test_silent_audio_is_ignored(self):
        m = manifest(video("main.mp4", silent=True))
        assert select_extraction_source(m) is None

    def test_lossless_preferred(self):
        m = manifest(
            video("main.mp4"),
            video("video0_vp9.mp4", codec=VideoCodec.VP9, audio=AudioCodec.FLAC),
        )
        assert select_extraction_source(m) == 1

    def test_ties_pick_the_last(self):
        """AAC and Opus rank equally; the last output wins every time."""
        m = manifest(
            video("video0_vp9.webm", codec=VideoCodec.VP9, audio=AudioCodec.OPUS),
            video("main.mp4"),
        )
        assert select_extraction_source(m) == 1
        assert select_extraction_source(m) == 1

    def test_higher_rank_beats_position(self):
        m = manifest(
            video("main.mp4", audio=AudioCodec.FLAC),
            video("video0_vp9.webm", codec=VideoCodec.VP9, audio=AudioCodec.OPUS),
        )
        assert select_extraction_source(m) == 0


class TestBuildDemuxCommands:
    """Tests for build_demux_commands."""

    def test_nothing_to_do(self):
        m = manifest(video("main.mp4", audio=None))
        commands, updated = build_demux_commands(m, OUT)
        assert commands == []
        assert updated is m

    def test_single_output(self):
        m = manifest(
            video("main.mp4"),
            muxed_audio=MuxedAudio(language="jpn", title="Stereo"),
        )
        commands, updated = build_demux_commands(m, OUT)

        assert commands == [
            [
                "ffmpeg",
                "-i",
                str(OUT / "main.mp4"),
                "-an",
                "-c:v",
                "copy",
                str(OUT / "main_demuxed.mp4"),
                "-vn",
                "-c:a",
                "copy",
                str(OUT / "demuxed.m4a"),
            ]
        ]

        new_video = updated.video_files[0]
        assert new_video.filename == "main_demuxed.mp4"
        assert new_video.audio_codec is None
        assert new_video.container is VideoContainer.MP4
        assert updated.audio_files == (
            AudioOutput(
                filename="demuxed.m4a",
                container=AudioContainer.M4A,
                codec=AudioCodec.AAC,
                language="jpn",
                title="Stereo",
            ),
        )
        assert updated.muxed_audio is None

    def test_container_follows_video_codec(self):
        """VP9 muxed with AAC lived in MP4; without audio it goes to WebM."""
        m = manifest(video("video0_vp9.mp4", codec=VideoCodec.VP9))
        _, updated = build_demux_commands(m, OUT)
        assert updated.video_files[0].filename == "video0_vp9_demuxed.webm"
        assert updated.video_files[0].container is VideoContainer.WEBM

    def test_audio_extracted_once(self):
        m = manifest(
            video("main.mp4"),
            video("video0_av1.mp4", codec=VideoCodec.AV1),
        )
        commands, updated = build_demux_commands(m, OUT)

        assert len(commands) == 2
        assert "-vn" not in commands[0]
        assert "-vn" in commands[1]
        assert len(updated.audio_files) == 1

    def test_outputs_without_audio_are_kept(self):
        kept = video("video0_theora.ogv", codec=VideoCodec.THEORA, audio=None)
        m = manifest(video("main.mp4"), kept)
        commands, updated = build_demux_commands(m, OUT)

        assert len(commands) == 1
        assert updated.video_files[1] == kept

    def test_existing_files_preserved(self):
        subs = TextOutput(filename="sub_3_eng.vtt", language="eng")
        m = manifest(video("main.mp4"), text_files=(subs,))
        _, updated = build_demux_commands(m, OUT, ffmpeg_path="/opt/ffmpeg")
        assert updated.text_files == (subs,)
        assert updated.title == "Movie"

    def test_missing_muxed_audio_uses_unknown_language(self):
        _, updated = build_demux_commands(manifest(video("main.mp4")), OUT)
        assert updated.audio_files[0].language == "unk"
        assert updated.audio_files[0].title is None

    def test_mp3_extraction_forces_mp4_format(self):
        m = manifest(video("main.mp4", audio=AudioCodec.MP3))
        commands, updated = build_demux_commands(m, OUT)
        assert commands[0][-3:] == ["-f", "mp4", str(OUT / "demuxed.m4a")]
        assert updated.audio_files[0].container is AudioContainer.PSEUDO_M4A
