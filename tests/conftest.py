"""Shared fixtures for the taxparcels tests."""

import json

import pytest


SAMPLE_KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document id="root_doc">
    <Schema name="tax_parcels" id="tax_parcels">
      <SimpleField name="TaxParcelNumber" type="string"></SimpleField>
      <SimpleField name="Site_Address" type="string"></SimpleField>
    </Schema>
    <Folder>
      <name>tax_parcels</name>
      <Placemark>
        <name>X</name>
        <ExtendedData>
          <SchemaData schemaUrl="#tax_parcels">
            <SimpleData name="Site_Address">1 MAIN ST</SimpleData>
            <SimpleData name="TaxParcelNumber">X</SimpleData>
          </SchemaData>
        </ExtendedData>
        <Polygon><outerBoundaryIs><LinearRing><coordinates>-122.4,47.2 -122.4,47.3 -122.3,47.3 -122.4,47.2</coordinates></LinearRing></outerBoundaryIs></Polygon>
      </Placemark>
      <Placemark>
        <name>no parcel number</name>
        <ExtendedData>
          <SchemaData schemaUrl="#tax_parcels">
            <SimpleData name="Site_Address">2 MAIN ST</SimpleData>
          </SchemaData>
        </ExtendedData>
      </Placemark>
      <Placemark>
        <name>Y</name>
        <ExtendedData>
          <SchemaData schemaUrl="#tax_parcels">
            <SimpleData name="TaxParcelNumber">Y</SimpleData>
          </SchemaData>
        </ExtendedData>
      </Placemark>
    </Folder>
  </Document>
</kml>
"""


def make_feature(parcel_id, x=0.0, **extra):
    properties = {"TaxParcelNumber": parcel_id}
    properties.update(extra)
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [x, 47.0]},
        "properties": properties,
    }


@pytest.fixture
def parcel_geojson():
    return {
        "type": "FeatureCollection",
        "name": "tax_parcels",
        "crs": {"type": "name", "properties": {"name": "urn:ogc:def:crs:OGC:1.3:CRS84"}},
        "features": [
            make_feature("A", 1.0),
            make_feature("B", 2.0),
            make_feature("C", 3.0),
        ],
    }


@pytest.fixture
def write_geojson(tmp_path):
    def _write(document, name="tax_parcels.geojson"):
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def geojson_path(write_geojson, parcel_geojson):
    return write_geojson(parcel_geojson)


@pytest.fixture
def kml_path(tmp_path):
    path = tmp_path / "tax_parcels.kml"
    path.write_text(SAMPLE_KML, encoding="utf-8")
    return str(path)


@pytest.fixture
def write_ids(tmp_path):
    """Write an ID-list file under tmp_path/lists and return its path."""
    lists_dir = tmp_path / "lists"
    lists_dir.mkdir(exist_ok=True)

    def _write(name, text):
        path = lists_dir / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def out_dir(tmp_path):
    return str(tmp_path / "out")
