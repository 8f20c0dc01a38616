"""
Parcel filtering.

For each ID list:
1. Load the requested parcel IDs
2. Scan the full decoded collection, keeping the first feature per requested ID
3. Report how many were found and which IDs were not
4. Write the kept features next to the other outputs

Every ID list is matched against the whole original collection, so a
parcel left out of one output can still land in another.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Iterable, List, Optional, Set, Tuple

from taxparcels.ids import load_ids
from taxparcels.output import ensure_out_dir, output_path_for
from taxparcels.report import ReportSink
from taxparcels.sources import FeatureRecord, FeatureSource

logger = logging.getLogger(__name__)


@dataclass
class FilterResult:
    """Outcome of matching one ID set against a collection."""

    matched: Tuple[FeatureRecord, ...]
    not_found: Set[str]

    @property
    def total(self) -> int:
        return len(self.matched) + len(self.not_found)


@dataclass
class FilterSummary:
    """What happened for one ID-list path."""

    id_path: str
    output_path: str
    requested: int
    matched: int
    not_found: Set[str] = field(default_factory=set)


def filter_records(
    records: Iterable[FeatureRecord], ids: AbstractSet[str]
) -> FilterResult:
    """
    Keep the records whose key is in ``ids``, in their original order.

    ``ids`` is not modified. A key is consumed by the first record that
    carries it; later records with the same key are skipped, as are
    records with no key at all.
    """
    remaining = set(ids)
    matched: List[FeatureRecord] = []
    for record in records:
        if record.key is not None and record.key in remaining:
            remaining.remove(record.key)
            matched.append(record)
    return FilterResult(matched=tuple(matched), not_found=remaining)


class ParcelFilter:
    """
    Runs ID lists against one decoded source.

    Usage:
        source = open_source("tax_parcels.kml", "kml")
        summaries = ParcelFilter(source, out_dir="out/").run(["north.txt", "south.txt"])
    """

    def __init__(
        self,
        source: FeatureSource,
        out_dir: str = ".",
        report: Optional[ReportSink] = None,
    ):
        self.source = source
        self.out_dir = out_dir
        self.report = report or ReportSink()

    def run_one(self, id_path: str) -> FilterSummary:
        """Filter, report and write the output for a single ID list."""
        ids = load_ids(id_path)
        self.report.parsed(len(ids), id_path)

        result = filter_records(self.source.records, ids)
        self.report.found(len(result.matched), result.total)
        self.report.missing(result.not_found)

        output_path = output_path_for(id_path, self.out_dir, self.source.extension)
        self.source.write(result.matched, output_path)

        return FilterSummary(
            id_path=id_path,
            output_path=output_path,
            requested=len(ids),
            matched=len(result.matched),
            not_found=result.not_found,
        )

    def run(self, id_paths: Iterable[str]) -> List[FilterSummary]:
        """Process each ID list in turn, stopping at the first failure."""
        ensure_out_dir(self.out_dir)
        summaries = []
        for id_path in id_paths:
            logger.debug(f"Filtering {self.source.path} with {id_path}")
            summaries.append(self.run_one(id_path))
        return summaries
