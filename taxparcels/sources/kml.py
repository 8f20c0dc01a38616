"""KML Document/Folder/Placemark source."""

from __future__ import annotations

import copy
import logging
from typing import Optional, Sequence, Tuple

from lxml import etree

from taxparcels.constants import DEFAULT_KEY_PROPERTY, KML_FORMAT
from taxparcels.errors import ParseError, SerializeError
from taxparcels.sources.base import FeatureRecord, FeatureSource, read_document

logger = logging.getLogger(__name__)


def _qualify(namespace: Optional[str], name: str) -> str:
    return f"{{{namespace}}}{name}" if namespace else name


def placemark_key(
    placemark: etree._Element,
    key_property: str = DEFAULT_KEY_PROPERTY,
    namespace: Optional[str] = None,
) -> Optional[str]:
    """
    Return the text of the placemark's ``SimpleData`` entry named
    ``key_property``, or None when it has no such entry.
    """
    path = "/".join(
        _qualify(namespace, name)
        for name in ("ExtendedData", "SchemaData", "SimpleData")
    )
    for data in placemark.iterfind(path):
        if data.get("name") == key_property:
            return data.text
    return None


def find_folder(root: etree._Element, namespace: Optional[str]) -> Optional[etree._Element]:
    return root.find(f"{_qualify(namespace, 'Document')}/{_qualify(namespace, 'Folder')}")


class KMLSource(FeatureSource):
    """Parcels from the Placemarks of a KML Document's Folder."""

    format = KML_FORMAT

    def __init__(
        self,
        path: str,
        root: etree._Element,
        key_property: str = DEFAULT_KEY_PROPERTY,
    ):
        super().__init__(path, key_property)
        self.namespace = etree.QName(root).namespace
        self._root = root

        folder = find_folder(root, self.namespace)
        if folder is None:
            raise ParseError(f"unable to parse KML {path!r}: no Document/Folder element")
        self._records = tuple(
            FeatureRecord(
                key=placemark_key(placemark, key_property, self.namespace),
                record=placemark,
            )
            for placemark in folder.iterchildren(self._tag("Placemark"))
        )

    def _tag(self, name: str) -> str:
        return _qualify(self.namespace, name)

    @classmethod
    def from_path(
        cls, path: str, key_property: str = DEFAULT_KEY_PROPERTY
    ) -> "KMLSource":
        raw = read_document(path, "KML")
        parser = etree.XMLParser(
            remove_blank_text=True, resolve_entities=False, no_network=True
        )
        try:
            root = etree.fromstring(raw, parser)
        except etree.XMLSyntaxError as exc:
            raise ParseError(f"unable to parse KML {path!r}: {exc}") from exc

        if etree.QName(root).localname != "kml":
            raise ParseError(
                f"unable to parse KML {path!r}: root element is <{etree.QName(root).localname}>, not <kml>"
            )
        source = cls(path, root, key_property=key_property)
        logger.info(f"Parsed {len(source)} placemarks from {path}")
        return source

    @property
    def records(self) -> Tuple[FeatureRecord, ...]:
        return self._records

    def encode(self, records: Sequence[FeatureRecord]) -> bytes:
        # Work on a copy so the decoded document stays whole for the next ID list.
        root = copy.deepcopy(self._root)
        folder = find_folder(root, self.namespace)
        existing = list(folder.iterchildren(self._tag("Placemark")))
        insert_at = folder.index(existing[0]) if existing else len(folder)
        for placemark in existing:
            folder.remove(placemark)
        for offset, record in enumerate(records):
            folder.insert(insert_at + offset, copy.deepcopy(record.record))

        try:
            return etree.tostring(
                root, xml_declaration=True, encoding="UTF-8", pretty_print=True
            )
        except (etree.SerialisationError, ValueError) as exc:
            raise SerializeError(f"unable to encode KML: {exc}") from exc
