"""
Tests for LocatorBuilderImpl: base, file, ni and magnet URLs.
"""
import base64
import hashlib
import sys

import pytest

from mirrorlink.core.models import HashType, ManifestParams
from mirrorlink.services.locator_service import LocatorBuilderImpl, join_url, scheme_of

ABC_SHA256 = hashlib.sha256(b"abc").digest()


class TestHelpers:

    def test_scheme_of(self):
        assert scheme_of("ftp://ftp.example.com/") == "ftp"
        assert scheme_of("https://mirror.example.com/pub") == "https"

    def test_scheme_required(self):
        with pytest.raises(ValueError):
            scheme_of("mirror.example.com/pub")

    def test_join_url_encodes_segments(self):
        url = join_url("ftp://ftp.example.com/pub", ("my dir", "ünï #1.txt"))
        assert url == "ftp://ftp.example.com/pub/my%20dir/%C3%BCn%C3%AF%20%231.txt"

    def test_join_url_keeps_single_slash(self):
        assert join_url("http://h/", ("a",)) == "http://h/a"


class TestBuild:

    def test_base_url_locator(self):
        builder = LocatorBuilderImpl(base_url="ftp://ftp.example.com/pub/", country="us")
        locations = builder.build(("sub", "file.bin"), {HashType.SHA256: ABC_SHA256})

        (locator,) = list(locations)
        assert locator.url == "ftp://ftp.example.com/pub/sub/file.bin"
        assert locator.type == "ftp"
        assert locator.location == "us"

    def test_all_kinds_in_fixed_order(self):
        builder = LocatorBuilderImpl(
            base_url="http://mirror.example.com/",
            file_url_base="file:///srv/mirror/",
            ni_url=True,
            magnet_url=True,
        )
        locations = builder.build(("a.txt",), {HashType.SHA256: ABC_SHA256})

        assert [loc.type for loc in locations] == ["http", "file", "ni", "magnet"]
        assert locations.urls()[1] == "file:///srv/mirror/a.txt"

    def test_ni_url(self):
        url = LocatorBuilderImpl.ni_url_for(ABC_SHA256)
        encoded = base64.urlsafe_b64encode(ABC_SHA256).decode("ascii").rstrip("=")

        assert url == f"ni:///sha-256;{encoded}"
        assert "=" not in url
        assert "+" not in url and "/" not in url[len("ni:///"):]

    def test_magnet_url(self):
        assert LocatorBuilderImpl.magnet_url_for(ABC_SHA256) == (
            "magnet:?xt=urn:sha256:"
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad")

    def test_content_addressed_urls_need_sha256(self):
        builder = LocatorBuilderImpl(ni_url=True)
        with pytest.raises(ValueError):
            builder.build(("a",), {HashType.MD5: hashlib.md5(b"abc").digest()})


class TestFileUrl:

    def test_file_url_for_directory(self, temp_dir):
        url = LocatorBuilderImpl.file_url_for(str(temp_dir))
        assert url.startswith("file:///")
        assert url.endswith("/")
        assert url == temp_dir.resolve().as_uri() + "/"

    def test_missing_directory(self, temp_dir):
        with pytest.raises(ValueError):
            LocatorBuilderImpl.file_url_for(str(temp_dir / "missing"))

    def test_from_params(self, temp_dir):
        params = ManifestParams(root_dir=str(temp_dir), base_url="ftp://h/", country="DE",
                                file_url=True, magnet_url=True)
        builder = LocatorBuilderImpl.from_params(params)

        assert builder.base_url_type == "ftp"
        assert builder.country == "de"
        assert builder.file_url_base == temp_dir.resolve().as_uri() + "/"
        assert builder.magnet_url and not builder.ni_url


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX filesystem names are bytes")
class TestUndecodableNames:
    """Names that are not valid UTF-8 arrive from os.scandir as surrogate escapes."""

    def test_join_url_encodes_raw_bytes(self):
        name = b"bad\xff.bin".decode("utf-8", "surrogateescape")
        url = join_url("ftp://ftp.example.com/pub", ("dir", name))
        assert url == "ftp://ftp.example.com/pub/dir/bad%FF.bin"

    def test_build_with_undecodable_segment(self):
        name = b"bad\xff.bin".decode("utf-8", "surrogateescape")
        locations = LocatorBuilderImpl(base_url="http://h/").build((name,), {})
        assert locations.urls() == ["http://h/bad%FF.bin"]
