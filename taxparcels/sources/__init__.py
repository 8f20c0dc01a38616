"""Parcel sources: decoded GeoJSON or KML documents."""

from typing import Optional

from taxparcels.constants import DEFAULT_KEY_PROPERTY, GEOJSON_FORMAT, KML_FORMAT
from taxparcels.errors import ConfigError
from taxparcels.sources.base import FeatureRecord, FeatureSource
from taxparcels.sources.geojson import GeoJSONSource
from taxparcels.sources.kml import KMLSource


def open_source(
    path: str,
    fmt: str,
    key_property: str = DEFAULT_KEY_PROPERTY,
    indent: Optional[int] = None,
) -> FeatureSource:
    """Decode ``path`` with the source class for ``fmt``."""
    if fmt == GEOJSON_FORMAT:
        return GeoJSONSource.from_path(path, key_property=key_property, indent=indent)
    if fmt == KML_FORMAT:
        return KMLSource.from_path(path, key_property=key_property)
    raise ConfigError(f"unknown input format {fmt!r}")


__all__ = [
    "FeatureRecord",
    "FeatureSource",
    "GeoJSONSource",
    "KMLSource",
    "open_source",
]
