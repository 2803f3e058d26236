"""Reading and writing manifest files in a job's output directory."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from vtp.manifest.descriptor import PlatformDescriptor
from vtp.manifest.models import Manifest

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"
DESCRIPTOR_FILENAME = "descriptor.json"


def _write_atomic(path: Path, content: str) -> None:
    """Write text to path via a temp file in the same directory.

    The temp file is removed if the write or the rename fails.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def write_manifest(manifest: Manifest, output_dir: Path) -> Path:
    """Write manifest.json into an output directory.

    Args:
        manifest: Manifest to persist.
        output_dir: Existing job output directory.

    Returns:
        Path of the written file.
    """
    path = output_dir / MANIFEST_FILENAME
    _write_atomic(path, json.dumps(manifest.to_dict(), indent=2, ensure_ascii=False))
    logger.debug("Wrote manifest %s", path)
    return path


def load_manifest(output_dir: Path) -> Manifest:
    """Load manifest.json from an output directory.

    Raises:
        FileNotFoundError: If the directory has no manifest.
        ValueError: If the manifest is malformed.
    """
    path = output_dir / MANIFEST_FILENAME
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    try:
        return Manifest.from_dict(data)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed manifest {path}: {e}") from e


def write_descriptor(descriptor: PlatformDescriptor, output_dir: Path) -> Path:
    """Write the platform descriptor next to the manifest."""
    path = output_dir / DESCRIPTOR_FILENAME
    _write_atomic(path, descriptor.to_json())
    logger.debug("Wrote descriptor %s", path)
    return path
