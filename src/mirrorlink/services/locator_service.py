"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/locator_service.py
Builds the locators (URLs) of a file record: mirror base URL, local file URL,
Named Information (RFC 6920) URL and magnet link.
"""
import base64
import os
from pathlib import Path
from typing import Dict, Optional, Tuple
from urllib.parse import quote

from mirrorlink.core.interfaces import LocatorBuilder
from mirrorlink.core.models import SCHEME_RE, HashType, Locator, LocationSet, ManifestParams


def scheme_of(url: str) -> str:
    """Returns the scheme of `url` ('ftp' for 'ftp://host/')."""
    scheme, sep, _ = url.partition("://")
    if not sep or not SCHEME_RE.match(scheme):
        raise ValueError(f"Invalid URL, expected '<scheme>://...': '{url}'")
    return scheme


def join_url(base: str, relative_path: Tuple[str, ...]) -> str:
    """
    Appends percent-encoded path segments to `base`.
    Segments are encoded from their filesystem bytes, so undecodable names stay addressable.
    """
    if not base.endswith("/"):
        base += "/"
    return base + "/".join(quote(os.fsencode(segment)) for segment in relative_path)


class LocatorBuilderImpl(LocatorBuilder):
    """
    Builds one LocationSet per file, always in the same order:
    base URL, file URL, ni URL, magnet link.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        country: Optional[str] = None,
        file_url_base: Optional[str] = None,
        ni_url: bool = False,
        magnet_url: bool = False
    ):
        self.base_url = base_url
        self.base_url_type = scheme_of(base_url) if base_url else None
        self.country = country
        self.file_url_base = file_url_base
        self.ni_url = ni_url
        self.magnet_url = magnet_url

    @classmethod
    def from_params(cls, params: ManifestParams) -> "LocatorBuilderImpl":
        return cls(
            base_url=params.base_url,
            country=params.country,
            file_url_base=cls.file_url_for(params.root_dir) if params.file_url else None,
            ni_url=params.ni_url,
            magnet_url=params.magnet_url,
        )

    @staticmethod
    def file_url_for(root_dir: str) -> str:
        """
        Canonical file: URL of a local directory.
        /srv/mirror -> file:///srv/mirror/ ; C:\\Mirror -> file:///C:/Mirror/
        """
        try:
            uri = Path(root_dir).resolve(strict=True).as_uri()
        except OSError as e:
            raise ValueError(f"Can't get canonical path from '{root_dir}': {e}") from e
        return uri if uri.endswith("/") else uri + "/"

    @staticmethod
    def ni_url_for(sha256_digest: bytes) -> str:
        encoded = base64.urlsafe_b64encode(sha256_digest).decode("ascii").rstrip("=")
        return f"ni:///sha-256;{encoded}"

    @staticmethod
    def magnet_url_for(sha256_digest: bytes) -> str:
        return f"magnet:?xt=urn:sha256:{sha256_digest.hex()}"

    def build(self, relative_path: Tuple[str, ...], digests: Dict[HashType, bytes]) -> LocationSet:
        locations = LocationSet()

        if self.base_url:
            locations.add(Locator(
                url=join_url(self.base_url, relative_path),
                type=self.base_url_type,
                location=self.country
            ))

        if self.file_url_base:
            locations.add(Locator(url=join_url(self.file_url_base, relative_path), type="file"))

        sha256 = digests.get(HashType.SHA256)
        if (self.ni_url or self.magnet_url) and sha256 is None:
            raise ValueError("ni and magnet URLs require a sha256 digest")

        if self.ni_url:
            locations.add(Locator(url=self.ni_url_for(sha256), type="ni"))

        if self.magnet_url:
            locations.add(Locator(url=self.magnet_url_for(sha256), type="magnet"))

        return locations
