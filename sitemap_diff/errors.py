"""Exception types raised by the sitemap diff pipeline.

Lower layers (fetcher, parser) report failures by returning ``None``; only
the orchestrator in :mod:`sitemap_diff.processor` turns those into the
exceptions below, so a CLI needs to catch :class:`SitemapDiffError` alone.
"""


class SitemapDiffError(Exception):
    """Base class for terminal failures of a sitemap comparison."""


class SitemapReadError(SitemapDiffError):
    """The sitemap location was invalid or its content could not be fetched."""


class SitemapExtractError(SitemapDiffError):
    """The sitemap was fetched but no paths could be extracted from it."""


class InvalidArgumentError(SitemapDiffError, TypeError):
    """A function was called with arguments of the wrong shape."""
