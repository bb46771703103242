"""Module for fetching raw sitemap XML from any supported location.

One entry point, :meth:`SitemapFetcher.fetch`, covers the three backends:

* local files, read as UTF-8
* HTTP(S) URLs, one ``GET`` with a descriptive "User-Agent" header
* S3 objects, through :class:`~sitemap_diff.s3.S3Storage`

Every failure is logged and reported as ``None``; nothing here raises for a
missing file, a network error or a bad status code. There are no retries.
"""

from __future__ import annotations

from typing import Optional

import requests

from .config import Settings
from .location import HttpUrl, LocalFile, Location, ObjectStore, parse_location
from .logger import DiagnosticLogger, default_logger
from .s3 import S3Storage


class SitemapFetcher:
    """Fetches sitemap XML documents as text."""

    def __init__(
        self,
        *,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        storage: Optional[S3Storage] = None,
        logger: Optional[DiagnosticLogger] = None,
    ):
        """Create a new ``SitemapFetcher``.

        Parameters
        ----------
        timeout
            Maximum seconds to wait for an HTTP response. Defaults to the
            ``SITEMAP_DIFF_TIMEOUT`` env var or 30 seconds.
        user_agent
            Custom *User-Agent* header value. If *None*, a default string
            containing a contact e-mail derived from ``SITEMAP_DIFF_EMAIL``
            is used.
        storage
            S3 backend; one sharing this fetcher's logger is built if omitted.
        logger
            Diagnostic logger for progress and error messages.
        """
        settings = Settings.from_env()
        self.timeout = timeout if timeout is not None else settings.timeout
        self.user_agent = user_agent or settings.user_agent
        self.logger = logger or default_logger
        self.storage = storage or S3Storage(logger=self.logger)

        # Prepared headers dict reused across requests
        self._headers = {"User-Agent": self.user_agent}

    def fetch_location(self, location: str) -> Optional[str]:
        """Classify *location* and fetch its content."""
        if not location:
            self.logger.error("No sitemap url or file path provided.")
            return None
        descriptor = parse_location(location, self.logger)
        if descriptor is None:
            self.logger.error(f"Invalid sitemap path: {location}")
            return None
        return self.fetch(descriptor)

    def fetch(self, descriptor: Location) -> Optional[str]:
        """Return the text behind *descriptor*, or None if it can't be read."""
        if isinstance(descriptor, HttpUrl):
            self.logger.info(f"\t{descriptor.url} - Fetching URL file")
            return self._fetch_url(descriptor.url)
        if isinstance(descriptor, ObjectStore):
            self.logger.info(f"\ts3://{descriptor.bucket}/{descriptor.key} - Getting S3 file")
            return self.storage.get_text(descriptor.bucket, descriptor.key, descriptor.region)
        if isinstance(descriptor, LocalFile):
            self.logger.info(f"\t{descriptor.path} - Reading local file")
            return self._read_file(descriptor.path)
        raise TypeError(f"Unsupported location descriptor: {descriptor!r}")

    def _read_file(self, path: str) -> Optional[str]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Error while reading {path}: {e}")
            return None

    def _fetch_url(self, url: str) -> Optional[str]:
        try:
            resp = requests.get(url, timeout=self.timeout, headers=self._headers)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Error fetching sitemap {url}: {e}")
            return None

        if resp.status_code >= 400:
            self.logger.error(f"Failed to fetch {url}: HTTP {resp.status_code}")
            return None

        # Prefer UTF-8 (dropping any BOM); fall back to the declared encoding
        try:
            return resp.content.decode("utf-8-sig")
        except UnicodeDecodeError:
            return resp.text
