"""Common interface for the GeoJSON and KML parcel sources."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

from taxparcels.constants import DEFAULT_KEY_PROPERTY, OUTPUT_EXTENSIONS
from taxparcels.errors import ParcelIOError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureRecord:
    """One decoded feature paired with its parcel ID, if it has one."""

    key: Optional[str]
    record: Any


class FeatureSource(ABC):
    """
    A decoded parcel collection that can be re-encoded with a subset of
    its features.

    Subclasses decode the document once in ``from_path``. The decoded
    document is never modified afterwards: ``encode`` builds a new
    document around whatever records it is given, so the same source can
    serve any number of ID lists.
    """

    format: str = ""

    def __init__(self, path: str, key_property: str = DEFAULT_KEY_PROPERTY):
        self.path = path
        self.key_property = key_property

    @property
    def extension(self) -> str:
        return OUTPUT_EXTENSIONS[self.format]

    @classmethod
    @abstractmethod
    def from_path(
        cls, path: str, key_property: str = DEFAULT_KEY_PROPERTY
    ) -> "FeatureSource":
        """Decode the document at ``path``."""

    @property
    @abstractmethod
    def records(self) -> Tuple[FeatureRecord, ...]:
        """Every feature in document order."""

    @abstractmethod
    def encode(self, records: Sequence[FeatureRecord]) -> bytes:
        """Serialize the source envelope around ``records``."""

    def write(self, records: Sequence[FeatureRecord], output_path: str) -> None:
        """Encode ``records`` and write them to ``output_path``."""
        payload = self.encode(records)
        try:
            with open(output_path, "wb") as f:
                f.write(payload)
        except OSError as exc:
            raise ParcelIOError(
                f"unable to write {self.format} output {output_path!r}: {exc}"
            ) from exc
        logger.info(f"Wrote {len(records)} features to {output_path}")

    def __len__(self) -> int:
        return len(self.records)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r}, features={len(self)})"


def read_document(path: str, kind: str) -> bytes:
    """Read a whole input document, wrapping ``OSError`` with context."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise ParcelIOError(f"unable to read {kind} file {path!r}: {exc}") from exc
