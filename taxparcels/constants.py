"""
Constants for the taxparcels tool.
"""

from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path.cwd() / ".env")

# Property (GeoJSON) or SimpleData name (KML) holding the parcel ID
DEFAULT_KEY_PROPERTY = "TaxParcelNumber"

# ID-list files
COMMENT_MARKER = "#"
ID_PATHS_DELIMITER = ","

# KML 2.2 namespace
KML_NAMESPACE = "http://www.opengis.net/kml/2.2"

# Formats and the extension each one is written with
GEOJSON_FORMAT = "geojson"
KML_FORMAT = "kml"
OUTPUT_EXTENSIONS = {
    GEOJSON_FORMAT: ".geojson",
    KML_FORMAT: ".kml",
}

# Environment overrides
ENV_OUT_DIR = "TAXPARCELS_OUT_DIR"
ENV_LOG_LEVEL = "TAXPARCELS_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
