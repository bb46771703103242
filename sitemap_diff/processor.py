"""Module orchestrating fetch, parse and diff for pairs of sitemaps."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .differ import diff_sequences
from .errors import InvalidArgumentError, SitemapExtractError, SitemapReadError
from .fetcher import SitemapFetcher
from .logger import DiagnosticLogger, default_logger
from .parser import SitemapParser
from .report import DiffResult


class SitemapComparer:
    """Orchestrates the fetching, parsing, and comparison of sitemaps.

    Fetcher, parser and logger can be injected, which keeps unit tests free
    of network and file access:

    >>> fetcher = Mock(fetch_location=lambda location: xml_text)
    >>> comparer = SitemapComparer(fetcher=fetcher)

    Lower layers report problems by returning ``None``; this class turns
    them into :class:`~sitemap_diff.errors.SitemapReadError` and
    :class:`~sitemap_diff.errors.SitemapExtractError`, prefixed with the
    offending location.
    """

    def __init__(
        self,
        *,
        fetcher: Optional[SitemapFetcher] = None,
        parser: Optional[SitemapParser] = None,
        logger: Optional[DiagnosticLogger] = None,
        timeout: Optional[float] = None,
    ):
        self.logger = logger or default_logger

        # Use injected dependencies or fall back to concrete implementations
        self.fetcher = (
            fetcher
            if fetcher is not None
            else SitemapFetcher(timeout=timeout, logger=self.logger)
        )
        self.parser = parser if parser is not None else SitemapParser(logger=self.logger)

    def fetch_and_extract_paths(
        self,
        location: str,
        *,
        log_level: Optional[str] = None,
        exclude_paths: Optional[Sequence[str]] = None,
    ) -> List[str]:
        """Fetch one sitemap and return its URL paths.

        Raises:
            InvalidArgumentError: If *location* is empty.
            SitemapReadError: If the sitemap could not be fetched.
            SitemapExtractError: If no paths could be extracted from it.
        """
        if not location:
            raise InvalidArgumentError("No sitemap file path provided")

        with self.logger.temporary_level(log_level):
            sitemap_xml = self.fetcher.fetch_location(location)
            if sitemap_xml is None:
                raise SitemapReadError(f"{location} - Could not read sitemap file")

            self.logger.debug(f"   {location} - Parsing XML from sitemap file")
            paths = self.parser.parse_paths(sitemap_xml, exclude_paths)
            if paths is None:
                raise SitemapExtractError(
                    f"{location} - Could not extract paths from sitemap file"
                )
            self.logger.debug(f"   {location} - Paths extracted from sitemap file")
            return paths

    def compare_paths(
        self,
        sitemap1: str,
        sitemap2: str,
        *,
        log_level: Optional[str] = None,
        exclude_paths: Optional[Sequence[str]] = None,
    ) -> DiffResult:
        """Compare the paths of two sitemaps.

        *sitemap1* is processed to completion before *sitemap2* is fetched.
        Any failure is logged and re-raised.
        """
        if not sitemap1 or not sitemap2:
            raise InvalidArgumentError("Both sitemap1 and sitemap2 must be provided")

        with self.logger.temporary_level(log_level):
            try:
                self.logger.info(f"Processing sitemap1: {sitemap1}")
                sitemap1_paths = self.fetch_and_extract_paths(
                    sitemap1, exclude_paths=exclude_paths
                )
                self.logger.info(f"Processing sitemap2: {sitemap2}")
                sitemap2_paths = self.fetch_and_extract_paths(
                    sitemap2, exclude_paths=exclude_paths
                )

                self.logger.debug("Comparing paths from both sitemaps...")
                diff = diff_sequences(sitemap1_paths, sitemap2_paths)
            except Exception as e:
                self.logger.error(f"Error processing sitemaps: {e}")
                raise

        return DiffResult(
            sitemap1=sitemap1,
            sitemap2=sitemap2,
            common_paths=diff.common_elements,
            sitemap1_paths_not_in_sitemap2=diff.elements_1_not_in_2,
            sitemap2_paths_not_in_sitemap1=diff.elements_2_not_in_1,
        )


def fetch_and_extract_paths(
    location: str,
    *,
    log_level: Optional[str] = None,
    exclude_paths: Optional[Sequence[str]] = None,
) -> List[str]:
    """Module-level shortcut for :meth:`SitemapComparer.fetch_and_extract_paths`."""
    return SitemapComparer().fetch_and_extract_paths(
        location, log_level=log_level, exclude_paths=exclude_paths
    )


def compare_paths(
    sitemap1: str,
    sitemap2: str,
    *,
    log_level: Optional[str] = None,
    exclude_paths: Optional[Sequence[str]] = None,
) -> DiffResult:
    """Module-level shortcut for :meth:`SitemapComparer.compare_paths`."""
    return SitemapComparer().compare_paths(
        sitemap1, sitemap2, log_level=log_level, exclude_paths=exclude_paths
    )
