"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/manifest_service.py
Serializes surviving file records to a Metalink 4 (RFC 5854) document.

Example output:

<?xml version='1.0' encoding='utf-8'?>
<metalink xmlns="urn:ietf:params:xml:ns:metalink">
    <generator>mirrorlink/0.6.0</generator>
    <published>2010-05-01T12:15:02Z</published>
    <file name="subdir/example.ext">
        <size>14471447</size>
        <hash type="sha-256">f44bcce2a9c2aa3f...</hash>
        <url location="us" type="ftp">ftp://ftp.example.com/subdir/example.ext</url>
    </file>
</metalink>
"""
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from mirrorlink.core.errors import ManifestError, describe_os_error
from mirrorlink.core.models import FileRecord, HashType
from mirrorlink.utils.convert_utils import ConvertUtils
from mirrorlink.version import APP_NAME, __version__

METALINK_NAMESPACE = "urn:ietf:params:xml:ns:metalink"


class ManifestService:
    """
    Builds the manifest document. Records are written in the order given,
    hashes in the order of `hash_types`.
    """

    def __init__(
        self,
        hash_types: Optional[List[HashType]] = None,
        generator: bool = True,
        include_date: bool = True,
        now: Optional[datetime] = None
    ):
        self.hash_types = list(hash_types) if hash_types else None
        self.generator = generator
        self.include_date = include_date
        self.now = now

    def build_tree(self, records: Iterable[FileRecord]) -> ET.Element:
        root = ET.Element("metalink", {"xmlns": METALINK_NAMESPACE})

        if self.generator:
            ET.SubElement(root, "generator").text = f"{APP_NAME}/{__version__}"

        if self.include_date:
            now = self.now or datetime.now(timezone.utc)
            ET.SubElement(root, "published").text = ConvertUtils.datetime_to_rfc3339(now)

        for record in records:
            self._append_file(root, record)

        return root

    def _append_file(self, root: ET.Element, record: FileRecord) -> None:
        file_node = ET.SubElement(root, "file", {"name": ConvertUtils.fs_name_to_text(record.name)})
        ET.SubElement(file_node, "size").text = str(record.size)

        hash_types = self.hash_types or list(record.digests)
        for hash_type in hash_types:
            value = record.hex_digest(hash_type)
            if value is None:
                continue
            ET.SubElement(file_node, "hash", {"type": hash_type.manifest_name}).text = value

        for locator in record.locations:
            attributes = {}
            if locator.location:
                attributes["location"] = locator.location
            attributes["type"] = locator.type
            ET.SubElement(file_node, "url", attributes).text = locator.url

    def render(self, records: Iterable[FileRecord]) -> bytes:
        root = self.build_tree(records)
        ET.indent(root, space="\t")
        return ET.tostring(root, encoding="utf-8", xml_declaration=True) + b"\n"

    def write(self, records: Iterable[FileRecord], output_path: str) -> None:
        """Writes the manifest to `output_path`."""
        data = self.render(records)
        try:
            Path(output_path).write_bytes(data)
        except OSError as e:
            raise ManifestError(output_path, "Writing manifest", describe_os_error(e)) from e
