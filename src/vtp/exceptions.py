"""Exception types for planning and running transcodes.

Planning errors (bad track references, impossible codec combinations,
unknown encoders) are raised before any external process starts and are
reported to the submitter. Probe and process errors are raised by the
ffmpeg/ffprobe wrappers; the job worker logs process failures and moves on.
"""

from __future__ import annotations

from pathlib import Path


class TranscodeError(Exception):
    """Base exception for all transcode planner errors."""


class CapabilityProbeError(TranscodeError):
    """Raised when ffmpeg's codec list cannot be obtained.

    This is fatal at startup: nothing can be planned without knowing which
    encoders are available.

    Attributes:
        ffmpeg_path: The ffmpeg executable that was invoked.
    """

    def __init__(self, ffmpeg_path: str, reason: str) -> None:
        self.ffmpeg_path = ffmpeg_path
        self.reason = reason
        super().__init__(f"Failed to query codecs from {ffmpeg_path}: {reason}")


class SourceProbeError(TranscodeError):
    """Raised when ffprobe fails on a source file.

    Attributes:
        path: The source file that was probed.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to probe {path}: {reason}")


class SourceNotFoundError(SourceProbeError):
    """Raised when the source file to probe does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, "file not found")


class PlanningError(TranscodeError):
    """Base exception for requests rejected before transcoding starts."""


class NoCompatibleContainerError(PlanningError):
    """Raised when no container accepts a requested codec combination.

    Attributes:
        video_codec: The requested video codec, if any.
        audio_codec: The requested audio codec, if any.
    """

    def __init__(self, video_codec: object = None, audio_codec: object = None) -> None:
        self.video_codec = video_codec
        self.audio_codec = audio_codec
        parts = [str(c) for c in (video_codec, audio_codec) if c is not None]
        super().__init__(f"No container accepts {' + '.join(parts) or 'nothing'}")


class InvalidTrackReferenceError(PlanningError):
    """Raised when a selection names a track absent from the probe result.

    Also raised when the referenced track exists but is of the wrong kind.

    Attributes:
        index: The track index that was referenced.
    """

    def __init__(self, index: int, message: str | None = None) -> None:
        self.index = index
        super().__init__(message or f"No such track: {index}")


class UnsupportedEncoderError(PlanningError):
    """Raised when ffmpeg on this host has no such encoder for a codec.

    Attributes:
        codec: The target codec.
        encoder: The encoder name that was requested.
    """

    def __init__(self, codec: object, encoder: str) -> None:
        self.codec = codec
        self.encoder = encoder
        super().__init__(f"Encoder {encoder!r} is not available for {codec}")


class ConflictingSelectionError(PlanningError):
    """Raised when selections cannot share one ffmpeg invocation.

    Only one video output may be a passthrough copy, and every selection of
    a given track must agree on passthrough versus re-encode.

    Attributes:
        index: The track index of the conflicting selection.
    """

    def __init__(self, index: int, message: str) -> None:
        self.index = index
        super().__init__(message)


class TranscodeProcessError(TranscodeError):
    """Raised when the ffmpeg process fails to start or exits non-zero.

    Attributes:
        slug: Output directory name of the failed job.
        returncode: Process exit code, or None if it never started.
    """

    def __init__(self, slug: str, returncode: int | None, reason: str = "") -> None:
        self.slug = slug
        self.returncode = returncode
        if returncode is None:
            message = f"Transcode {slug} could not be started: {reason}"
        else:
            message = f"Transcode {slug} exited with code {returncode}"
        super().__init__(message)


class InvalidPathError(TranscodeError):
    """Raised when a requested path escapes its base directory.

    Attributes:
        requested: The path as supplied by the caller.
    """

    def __init__(self, requested: str) -> None:
        self.requested = requested
        super().__init__(f"Invalid path: {requested}")


class JobNotFoundError(TranscodeError):
    """Raised when no queued, running or recent job has the given slug.

    Attributes:
        slug: The slug that was looked up.
    """

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"No such job: {slug}")


class DuplicateJobError(PlanningError):
    """Raised when a job with the same slug is already queued or running.

    Both jobs would write to the same output directory.

    Attributes:
        slug: The conflicting slug.
    """

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Job {slug} is already queued or running")
