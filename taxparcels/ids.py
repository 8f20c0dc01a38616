"""Loading of parcel ID-list files."""

from __future__ import annotations

import logging
from typing import Set

from taxparcels.constants import COMMENT_MARKER
from taxparcels.errors import ParcelIOError

logger = logging.getLogger(__name__)


def parse_ids(text: str) -> Set[str]:
    """Return the distinct non-empty, non-comment lines of ``text``."""
    ids = set()
    for line in text.split("\n"):
        line = line.rstrip("\r")
        if line and not line.startswith(COMMENT_MARKER):
            ids.add(line)
    return ids


def load_ids(path: str) -> Set[str]:
    """
    Read an ID-list file into a set of parcel IDs.

    Parameters
    ----------
    path : str
        Plain text file, one parcel ID per line. Blank lines and lines
        starting with ``#`` are skipped.

    Returns
    -------
    Set[str]
        Requested IDs. Duplicates collapse; IDs are not validated, and
        bytes that are not UTF-8 are kept as surrogate escapes.
    """
    try:
        with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            text = f.read()
    except OSError as exc:
        raise ParcelIOError(f"unable to read parcel ID file {path!r}: {exc}") from exc

    ids = parse_ids(text)
    logger.debug(f"Loaded {len(ids)} parcel IDs from {path}")
    return ids
