"""Resolving client-supplied paths under a base directory."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from vtp.exceptions import InvalidPathError


def resolve_within(base: Path, requested: str) -> Path:
    """Join a client-supplied relative path onto a base directory.

    A leading slash is ignored, so "/movies/a.mkv" and "movies/a.mkv" name
    the same file. Any ".." component is rejected outright rather than
    normalized away.

    Args:
        base: Directory the path must stay within.
        requested: Path as supplied by the client, "/" separated.

    Returns:
        The joined path.

    Raises:
        InvalidPathError: If the path is empty, contains "..", or contains
            a NUL byte.
    """
    if not requested or "\x00" in requested:
        raise InvalidPathError(requested)
    parts = PurePosixPath(requested).parts
    if ".." in parts:
        raise InvalidPathError(requested)
    relative = [p for p in parts if p != "/"]
    if not relative:
        raise InvalidPathError(requested)
    return base.joinpath(*relative)
