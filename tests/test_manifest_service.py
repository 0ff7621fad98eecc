"""
Tests for ManifestService (Metalink 4 serialization).
Output is parsed back with ElementTree and checked element by element.
"""
import hashlib
import sys
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

import pytest

from mirrorlink.core.errors import ManifestError
from mirrorlink.core.models import FileRecord, HashType, Locator, LocationSet
from mirrorlink.services.manifest_service import METALINK_NAMESPACE, ManifestService
from mirrorlink.version import __version__

NS = {"ml": METALINK_NAMESPACE}
NOW = datetime(2010, 5, 1, 12, 15, 2, tzinfo=timezone.utc)


def make_record(name="sub/a b.txt", content=b"abc"):
    return FileRecord(
        relative_path=tuple(name.split("/")),
        absolute_path=f"/srv/{name}",
        size=len(content),
        modified_time=0,
        digests={
            HashType.SHA256: hashlib.sha256(content).digest(),
            HashType.MD5: hashlib.md5(content).digest(),
        },
        locations=LocationSet([
            Locator(url="ftp://ftp.example.com/sub/a%20b.txt", type="ftp", location="us"),
            Locator(url="file:///srv/sub/a%20b.txt", type="file"),
        ]),
    )


def parse(data: bytes) -> ET.Element:
    return ET.fromstring(data)


class TestDocument:

    def test_root_and_header(self):
        root = parse(ManifestService(now=NOW).render([]))

        assert root.tag == f"{{{METALINK_NAMESPACE}}}metalink"
        assert root.find("ml:generator", NS).text == f"mirrorlink/{__version__}"
        assert root.find("ml:published", NS).text == "2010-05-01T12:15:02Z"
        assert root.findall("ml:file", NS) == []

    def test_sparse_output(self):
        root = parse(ManifestService(generator=False, include_date=False).render([make_record()]))

        assert root.find("ml:generator", NS) is None
        assert root.find("ml:published", NS) is None

    def test_xml_declaration(self):
        data = ManifestService(now=NOW).render([])
        assert data.startswith(b"<?xml version='1.0' encoding='utf-8'?>")
        assert data.endswith(b"\n")

    def test_sparse_output_is_reproducible(self):
        service = ManifestService(generator=False, include_date=False)
        assert service.render([make_record()]) == service.render([make_record()])


class TestFileElement:

    def test_file_content(self):
        service = ManifestService(hash_types=[HashType.MD5, HashType.SHA256], now=NOW)
        file_node = parse(service.render([make_record()])).find("ml:file", NS)

        assert file_node.get("name") == "sub/a b.txt"
        assert file_node.find("ml:size", NS).text == "3"

        hashes = [(h.get("type"), h.text) for h in file_node.findall("ml:hash", NS)]
        assert hashes == [
            ("md5", "900150983cd24fb0d6963f7d28e17f72"),
            ("sha-256", "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"),
        ]

        urls = file_node.findall("ml:url", NS)
        assert [u.text for u in urls] == [
            "ftp://ftp.example.com/sub/a%20b.txt", "file:///srv/sub/a%20b.txt"]
        assert urls[0].get("location") == "us"
        assert urls[0].get("type") == "ftp"
        assert urls[1].get("location") is None

    def test_only_requested_hashes_written(self):
        service = ManifestService(hash_types=[HashType.SHA256], now=NOW)
        file_node = parse(service.render([make_record()])).find("ml:file", NS)

        assert [h.get("type") for h in file_node.findall("ml:hash", NS)] == ["sha-256"]

    def test_records_in_given_order(self):
        records = [make_record("b.txt"), make_record("a.txt")]
        root = parse(ManifestService(now=NOW).render(records))

        assert [f.get("name") for f in root.findall("ml:file", NS)] == ["b.txt", "a.txt"]

    def test_special_characters_escaped(self):
        record = make_record("R&D <draft>.txt")
        root = parse(ManifestService(now=NOW).render([record]))

        assert root.find("ml:file", NS).get("name") == "R&D <draft>.txt"


class TestWrite:

    def test_write_file(self, temp_dir):
        output = temp_dir / "out.meta4"
        ManifestService(now=NOW).write([make_record()], str(output))

        assert parse(output.read_bytes()).find("ml:file", NS) is not None

    def test_write_error(self, temp_dir):
        output = temp_dir / "missing" / "out.meta4"
        with pytest.raises(ManifestError) as exc_info:
            ManifestService(now=NOW).write([], str(output))

        assert exc_info.value.operation == "Writing manifest"
        assert exc_info.value.path == str(output)


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX filesystem names are bytes")
class TestUndecodableNames:

    def test_written_manifest_parses(self, temp_dir):
        """A name with invalid UTF-8 bytes still gives a well-formed document."""
        name = b"sub/bad\xff.bin".decode("utf-8", "surrogateescape")
        output = temp_dir / "out.meta4"
        ManifestService(now=NOW).write([make_record(name)], str(output))

        root = ET.parse(str(output)).getroot()
        assert root.find("ml:file", NS).get("name") == "sub/bad�.bin"
