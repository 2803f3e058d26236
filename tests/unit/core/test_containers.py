"""Tests for container compatibility rules."""

import pytest

from vtp.core.codecs import AudioCodec, VideoCodec
from vtp.core.containers import (
    CONTAINER_PRIORITY,
    AudioContainer,
    VideoContainer,
    find_audio_container,
    find_container_for,
    find_container_for_video,
    require_container_for,
    requires_experimental,
)
from vtp.exceptions import NoCompatibleContainerError


class TestFindContainerFor:
    """Tests for find_container_for."""

    def test_h264_aac_is_mp4(self):
        assert find_container_for(VideoCodec.H264, AudioCodec.AAC) is (
            VideoContainer.MP4
        )

    def test_priority_breaks_ties(self):
        """VP9 + Opus fits MP4, WebM and Ogg; MP4 comes first."""
        assert find_container_for(VideoCodec.VP9, AudioCodec.OPUS) is (
            VideoContainer.MP4
        )

    def test_vorbis_skips_mp4(self):
        """MP4 cannot hold Vorbis, so VP9 + Vorbis falls through to WebM."""
        assert find_container_for(VideoCodec.VP9, AudioCodec.VORBIS) is (
            VideoContainer.WEBM
        )

    def test_theora_flac_is_ogg(self):
        assert find_container_for(VideoCodec.THEORA, AudioCodec.FLAC) is (
            VideoContainer.OGG
        )

    def test_incompatible_pair_returns_none(self):
        """H.264 only fits MP4, which cannot hold Vorbis."""
        assert find_container_for(VideoCodec.H264, AudioCodec.VORBIS) is None

    @pytest.mark.parametrize("video", list(VideoCodec))
    @pytest.mark.parametrize("audio", list(AudioCodec))
    def test_result_accepts_both_codecs(self, video, audio):
        """Any container returned holds both codecs and is the first to."""
        container = find_container_for(video, audio)
        accepting = [c for c in CONTAINER_PRIORITY if c.accepts(video, audio)]
        if container is None:
            assert accepting == []
        else:
            assert container is accepting[0]


class TestRequireContainerFor:
    """Tests for require_container_for."""

    def test_returns_container(self):
        assert require_container_for(VideoCodec.AV1, AudioCodec.VORBIS) is (
            VideoContainer.WEBM
        )

    def test_raises_when_incompatible(self):
        with pytest.raises(NoCompatibleContainerError, match="Theora"):
            require_container_for(VideoCodec.THEORA, AudioCodec.AAC)


class TestFindContainerForVideo:
    """Tests for find_container_for_video."""

    @pytest.mark.parametrize("video", list(VideoCodec))
    def test_defined_for_every_codec(self, video):
        """Every video codec has a natural container that accepts it."""
        assert find_container_for_video(video).accepts(video)

    def test_natural_containers(self):
        assert find_container_for_video(VideoCodec.H264) is VideoContainer.MP4
        assert find_container_for_video(VideoCodec.VP9) is VideoContainer.WEBM
        assert find_container_for_video(VideoCodec.THEORA) is VideoContainer.OGG


class TestAudioContainers:
    """Tests for standalone audio containers."""

    @pytest.mark.parametrize(
        "codec,container",
        [
            (AudioCodec.AAC, AudioContainer.M4A),
            (AudioCodec.ALAC, AudioContainer.M4A),
            (AudioCodec.OPUS, AudioContainer.OGG),
            (AudioCodec.FLAC, AudioContainer.OGG),
            (AudioCodec.MP3, AudioContainer.PSEUDO_M4A),
        ],
    )
    def test_find_audio_container(self, codec, container):
        assert find_audio_container(codec) is container

    def test_pseudo_m4a_forces_mp4_format(self):
        """MP3 audio goes in an .m4a file, so ffmpeg needs -f mp4."""
        assert AudioContainer.PSEUDO_M4A.extension == "m4a"
        assert AudioContainer.PSEUDO_M4A.format_override == ("-f", "mp4")
        assert AudioContainer.M4A.format_override == ()

    def test_mime_types(self):
        assert AudioContainer.OGG.mime_type == "audio/ogg"
        assert AudioContainer.M4A.mime_type == "audio/mp4"


class TestVideoContainer:
    """Tests for VideoContainer properties."""

    def test_ogg_extension_is_ogv(self):
        assert VideoContainer.OGG.extension == "ogv"
        assert VideoContainer.OGG.mime_type == "video/ogg"

    def test_from_extension(self):
        assert VideoContainer.from_extension(".ogv") is VideoContainer.OGG
        assert VideoContainer.from_extension("MP4") is VideoContainer.MP4
        assert VideoContainer.from_extension("mkv") is None

    def test_preferred_audio(self):
        assert VideoContainer.MP4.preferred_audio_codec is AudioCodec.AAC
        assert VideoContainer.WEBM.preferred_audio_codec is AudioCodec.OPUS
        assert VideoContainer.WEBM.preferred_audio_encoder == "libopus"


class TestRequiresExperimental:
    """Tests for requires_experimental."""

    def test_flac_in_mp4(self):
        assert requires_experimental(VideoContainer.MP4, AudioCodec.FLAC)

    def test_flac_in_ogg(self):
        assert not requires_experimental(VideoContainer.OGG, AudioCodec.FLAC)

    def test_aac_in_mp4(self):
        assert not requires_experimental(VideoContainer.MP4, AudioCodec.AAC)
