"""Output file naming and directory handling."""

import os
from pathlib import Path

from taxparcels.errors import ParcelIOError


def output_path_for(id_path: str, out_dir: str, extension: str) -> str:
    """
    ``lists/north side.txt`` with ``.kml`` becomes ``<out_dir>/north side.kml``.

    Only the last extension of the ID-list base name is dropped.
    """
    return os.path.join(out_dir, Path(id_path).stem + extension)


def ensure_out_dir(out_dir: str) -> None:
    try:
        Path(out_dir).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ParcelIOError(f"unable to create output directory {out_dir!r}: {exc}") from exc
