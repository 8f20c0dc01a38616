"""GeoJSON FeatureCollection source."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from taxparcels.constants import DEFAULT_KEY_PROPERTY, GEOJSON_FORMAT
from taxparcels.errors import ParseError, SerializeError
from taxparcels.sources.base import FeatureRecord, FeatureSource, read_document

logger = logging.getLogger(__name__)


def feature_key(
    feature: Mapping[str, Any], key_property: str = DEFAULT_KEY_PROPERTY
) -> Optional[str]:
    """
    Return the parcel ID stored in a feature's properties.

    A missing ``properties`` object, a missing key, or a value that is
    not a string all yield None, and such a feature never matches.
    """
    properties = feature.get("properties")
    if not isinstance(properties, Mapping):
        return None
    value = properties.get(key_property)
    return value if isinstance(value, str) else None


class GeoJSONSource(FeatureSource):
    """Parcels from a GeoJSON FeatureCollection."""

    format = GEOJSON_FORMAT

    def __init__(
        self,
        path: str,
        document: Dict[str, Any],
        key_property: str = DEFAULT_KEY_PROPERTY,
        indent: Optional[int] = None,
    ):
        super().__init__(path, key_property)
        self.indent = indent
        self._document = document
        self._records = tuple(
            FeatureRecord(key=feature_key(feature, key_property), record=feature)
            for feature in document.get("features") or []
        )

    @classmethod
    def from_path(
        cls,
        path: str,
        key_property: str = DEFAULT_KEY_PROPERTY,
        indent: Optional[int] = None,
    ) -> "GeoJSONSource":
        raw = read_document(path, "GeoJSON")
        try:
            document = json.loads(raw)
        except ValueError as exc:
            raise ParseError(f"unable to parse GeoJSON {path!r}: {exc}") from exc

        validate_feature_collection(document, path)
        source = cls(path, document, key_property=key_property, indent=indent)
        logger.info(f"Parsed {len(source)} features from {path}")
        return source

    @property
    def records(self) -> Tuple[FeatureRecord, ...]:
        return self._records

    def encode(self, records: Sequence[FeatureRecord]) -> bytes:
        envelope = dict(self._document)
        envelope["features"] = [r.record for r in records]
        try:
            text = json.dumps(envelope, indent=self.indent, ensure_ascii=False)
            return (text + "\n").encode("utf-8")
        except (TypeError, ValueError) as exc:
            # UnicodeEncodeError (lone surrogates from \uXXXX escapes) is a ValueError
            raise SerializeError(f"unable to encode GeoJSON: {exc}") from exc


def validate_feature_collection(document: Any, path: str) -> None:
    """Raise ParseError unless ``document`` is shaped like a FeatureCollection."""
    if not isinstance(document, dict):
        raise ParseError(f"unable to parse GeoJSON {path!r}: top level is not an object")

    doc_type = document.get("type")
    if doc_type is not None and doc_type != "FeatureCollection":
        raise ParseError(
            f"unable to parse GeoJSON {path!r}: expected a FeatureCollection, got {doc_type!r}"
        )

    features = document.get("features")
    if features is None:
        return
    if not isinstance(features, list):
        raise ParseError(f"unable to parse GeoJSON {path!r}: 'features' is not an array")
    for i, feature in enumerate(features):
        if not isinstance(feature, dict):
            raise ParseError(
                f"unable to parse GeoJSON {path!r}: feature {i} is not an object"
            )
