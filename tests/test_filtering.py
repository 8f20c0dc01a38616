import io
import json
import os

import pytest

from taxparcels.errors import ParcelIOError
from taxparcels.filtering import ParcelFilter, filter_records
from taxparcels.output import output_path_for
from taxparcels.report import ReportSink
from taxparcels.sources import FeatureRecord, GeoJSONSource, KMLSource

from conftest import make_feature


def records(*keys):
    return [FeatureRecord(key=k, record={"n": i}) for i, k in enumerate(keys)]


def test_filter_records_partitions_and_reports_missing():
    result = filter_records(records("A", "B", "C"), {"A", "C", "D"})
    assert [r.key for r in result.matched] == ["A", "C"]
    assert result.not_found == {"D"}
    assert result.total == 3


def test_filter_records_does_not_mutate_input_set():
    ids = {"A", "B"}
    filter_records(records("A"), ids)
    assert ids == {"A", "B"}


def test_first_duplicate_wins():
    result = filter_records(records("A", "A", "B", "A"), {"A", "B"})
    assert [r.record["n"] for r in result.matched] == [0, 2]
    assert result.not_found == set()


def test_records_without_key_never_match():
    result = filter_records(records(None, "A", None), {"A"})
    assert [r.key for r in result.matched] == ["A"]


@pytest.mark.parametrize("keys,ids", [
    (("A", "B", "C"), {"A", "C", "D"}),
    (("A", "A", "A"), {"A"}),
    ((), {"X", "Y"}),
    (("A", None, "B"), set()),
])
def test_matched_plus_missing_equals_requested(keys, ids):
    result = filter_records(records(*keys), ids)
    assert len(result.matched) + len(result.not_found) == len(ids)
    assert all(r.key in ids for r in result.matched)


def test_repeat_runs_are_identical():
    recs = records("A", "B", "C", "B")
    first = filter_records(recs, {"B", "Z"})
    second = filter_records(recs, {"B", "Z"})
    assert first == second


@pytest.mark.parametrize("id_path,extension,expected", [
    ("lists/north.txt", ".geojson", os.path.join("out", "north.geojson")),
    ("north", ".kml", os.path.join("out", "north.kml")),
    ("/abs/path/north.ids.txt", ".kml", os.path.join("out", "north.ids.kml")),
])
def test_output_path_for(id_path, extension, expected):
    assert output_path_for(id_path, "out", extension) == expected


def test_geojson_end_to_end(geojson_path, write_ids, out_dir, parcel_geojson):
    ids_path = write_ids("wanted.txt", "A\nC\nD\n")
    stream = io.StringIO()

    source = GeoJSONSource.from_path(geojson_path)
    [summary] = ParcelFilter(source, out_dir=out_dir, report=ReportSink(stream)).run([ids_path])

    assert summary.output_path == os.path.join(out_dir, "wanted.geojson")
    assert (summary.requested, summary.matched, summary.not_found) == (3, 2, {"D"})

    with open(summary.output_path) as f:
        written = json.load(f)
    assert written["features"] == [parcel_geojson["features"][0], parcel_geojson["features"][2]]
    assert written["name"] == "tax_parcels"

    assert stream.getvalue().splitlines() == [
        f'parsed 3 from "{ids_path}"',
        "found 2 of 3",
        "could not find: D",
    ]


def test_kml_end_to_end(kml_path, write_ids, out_dir):
    ids_path = write_ids("xy.txt", "X\nY\n")
    stream = io.StringIO()

    source = KMLSource.from_path(kml_path)
    [summary] = ParcelFilter(source, out_dir=out_dir, report=ReportSink(stream)).run([ids_path])

    written = KMLSource.from_path(summary.output_path)
    assert [r.key for r in written.records] == ["X", "Y"]
    assert "found 2 of 2" in stream.getvalue()
    assert "could not find" not in stream.getvalue()


def test_every_list_sees_the_full_collection(kml_path, write_ids, out_dir):
    only_x = write_ids("only_x.txt", "X\n")
    only_y = write_ids("only_y.txt", "Y\n")
    both = write_ids("both.txt", "Y\nX\n")

    source = KMLSource.from_path(kml_path)
    summaries = ParcelFilter(source, out_dir=out_dir, report=ReportSink(io.StringIO())).run(
        [only_x, only_y, both]
    )

    keys = [
        [r.key for r in KMLSource.from_path(s.output_path).records]
        for s in summaries
    ]
    assert keys == [["X"], ["Y"], ["X", "Y"]]


def test_duplicate_feature_keys_keep_first(write_geojson, write_ids, out_dir):
    document = {
        "type": "FeatureCollection",
        "features": [make_feature("A", 1.0), make_feature("A", 2.0), make_feature("B", 3.0)],
    }
    source = GeoJSONSource.from_path(write_geojson(document))
    ids_path = write_ids("a.txt", "A\n")

    [summary] = ParcelFilter(source, out_dir=out_dir, report=ReportSink(io.StringIO())).run([ids_path])

    with open(summary.output_path) as f:
        features = json.load(f)["features"]
    assert [f["geometry"]["coordinates"][0] for f in features] == [1.0]


def test_missing_ids_are_reported_sorted(geojson_path, write_ids, out_dir):
    ids_path = write_ids("missing.txt", "Z\nM\nA\nQ\n")
    stream = io.StringIO()
    ParcelFilter(
        GeoJSONSource.from_path(geojson_path), out_dir=out_dir, report=ReportSink(stream)
    ).run([ids_path])

    lines = stream.getvalue().splitlines()
    assert lines[1] == "found 1 of 4"
    assert lines[2:] == ["could not find: M", "could not find: Q", "could not find: Z"]


def test_failure_stops_run_but_keeps_earlier_outputs(geojson_path, write_ids, out_dir, tmp_path):
    good = write_ids("good.txt", "A\n")
    missing = str(tmp_path / "lists" / "missing.txt")
    never = write_ids("never.txt", "B\n")

    parcel_filter = ParcelFilter(
        GeoJSONSource.from_path(geojson_path), out_dir=out_dir, report=ReportSink(io.StringIO())
    )
    with pytest.raises(ParcelIOError):
        parcel_filter.run([good, missing, never])

    assert os.path.exists(os.path.join(out_dir, "good.geojson"))
    assert not os.path.exists(os.path.join(out_dir, "never.geojson"))
