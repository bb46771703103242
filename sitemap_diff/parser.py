"""Module for parsing, validating and extracting routes from sitemap XML.

The XML is first turned into a plain structure of dicts, lists and strings
keyed by tag name (namespaces stripped), e.g.::

    {"urlset": {"url": [{"loc": "https://example.com/", "priority": "0.5"}]}}

which the validator checks against the sitemap protocol rules. Only
``<urlset>`` documents yield routes; sitemap index files are rejected.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlsplit

from .logger import DiagnosticLogger, default_logger

CHANGEFREQ_VALUES = frozenset(
    ["always", "hourly", "daily", "weekly", "monthly", "yearly", "never"]
)

# W3C datetime reduced precision forms: YYYY and YYYY-MM
_YEAR_MONTH_RE = re.compile(r"^\d{4}(-\d{2})?$")


def _local_name(tag: str) -> str:
    """Strips the ``{namespace}`` part from an ElementTree tag."""
    return tag.rsplit("}", 1)[-1]


def _element_to_value(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        return (element.text or "").strip()

    value: Dict[str, Any] = {}
    for child in children:
        name = _local_name(child.tag)
        item = _element_to_value(child)
        if name not in value:
            value[name] = item
        elif isinstance(value[name], list):
            value[name].append(item)
        else:
            value[name] = [value[name], item]
    return value


def is_parseable_date(value: Any) -> bool:
    """Checks whether *value* is a W3C/ISO-8601 or RFC 2822 date string."""
    if not isinstance(value, str) or not value.strip():
        return False
    text = value.strip()
    if _YEAR_MONTH_RE.match(text):
        return True
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
        return True
    except ValueError:
        pass
    try:
        parsedate_to_datetime(text)
        return True
    except (TypeError, ValueError):
        return False


def route_to_path(route: str) -> Optional[str]:
    """Returns the path of an absolute URL, or None if *route* isn't one."""
    try:
        parts = urlsplit(route)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return parts.path or "/"


class SitemapParser:
    """Parses XML content into sitemap structures, routes and paths."""

    def __init__(self, logger: Optional[DiagnosticLogger] = None):
        self.logger = logger or default_logger

    # --- Structure ---
    def parse_structure(self, xml_text: str) -> Optional[Dict[str, Any]]:
        """Parses XML text into a ``{root_tag: value}`` structure.

        Args:
            xml_text: The XML document as a string.

        Returns:
            The structure, or None if the text is empty or not well-formed.
        """
        if not xml_text or not xml_text.strip():
            self.logger.error("Sitemap XML content is empty")
            return None
        try:
            root = ET.fromstring(xml_text.lstrip("\ufeff").strip())
        except ET.ParseError as e:
            self.logger.error(f"Error parsing XML: {e}")
            return None
        return {_local_name(root.tag): _element_to_value(root)}

    def is_sitemap_index(self, structure: Dict[str, Any]) -> bool:
        """Checks if the given structure is a sitemap index."""
        return "sitemapindex" in structure

    # --- Validation ---
    def is_valid_url_entry(self, entry: Any) -> bool:
        """Validates a single ``<url>`` element of a ``<urlset>``.

        A bad ``<lastmod>`` only produces a warning. A valid ``<priority>``
        is converted to a float in place.
        """
        if not isinstance(entry, dict):
            self.logger.error("Invalid sitemap: <url> element is not an object")
            return False
        loc = entry.get("loc")
        if not loc or not isinstance(loc, str):
            self.logger.error("Invalid sitemap: Missing <loc> in <url> element")
            return False
        lastmod = entry.get("lastmod")
        if lastmod and not is_parseable_date(lastmod):
            self.logger.warn(
                f"Invalid <lastmod> date format in <url> element with loc: {loc}"
            )
        priority = entry.get("priority")
        if priority not in (None, ""):
            try:
                value = float(priority)
            except (TypeError, ValueError):
                value = None
            if value is None or not 0.0 <= value <= 1.0:
                self.logger.error(
                    "Invalid sitemap: <priority> must be between 0.0 and 1.0 "
                    f"in <url> element with loc: {loc}"
                )
                return False
            entry["priority"] = value
        changefreq = entry.get("changefreq")
        if changefreq and (
            not isinstance(changefreq, str) or changefreq not in CHANGEFREQ_VALUES
        ):
            self.logger.error(
                f"Invalid sitemap: Invalid <changefreq> value in <url> element with loc: {loc}"
            )
            return False
        return True

    def is_valid_index_entry(self, entry: Any) -> bool:
        """Validates a single ``<sitemap>`` element of a ``<sitemapindex>``."""
        if not isinstance(entry, dict):
            self.logger.error("Invalid sitemap index: <sitemap> element is not an object")
            return False
        loc = entry.get("loc")
        if not loc or not isinstance(loc, str):
            self.logger.error("Invalid sitemap index: Missing <loc> in <sitemap> element")
            return False
        lastmod = entry.get("lastmod")
        if lastmod and not is_parseable_date(lastmod):
            self.logger.error(
                "Invalid sitemap index: Invalid <lastmod> date format "
                f"in <sitemap> element with loc: {loc}"
            )
            return False
        return True

    def validate(self, structure: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Checks a parsed structure against the sitemap rules.

        Single ``<url>``/``<sitemap>`` entries are normalized into
        one-element lists and an empty ``<urlset>`` into ``{"url": []}``.

        Returns:
            The normalized structure, or None if any rule is violated.
        """
        if structure is None:
            return None

        if self.is_sitemap_index(structure):
            return self._validate_index(structure)

        if "urlset" in structure:
            return self._validate_urlset(structure)

        # Neither <urlset> nor <sitemapindex>: nothing to check
        self.logger.debug("No <urlset> or <sitemapindex> found; treating as valid")
        return structure

    def _validate_index(self, structure: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        index = structure["sitemapindex"]
        sitemaps = index.get("sitemap") if isinstance(index, dict) else None
        if isinstance(sitemaps, dict):
            sitemaps = [sitemaps]
            index["sitemap"] = sitemaps
        if not isinstance(sitemaps, list):
            self.logger.error("Invalid sitemap index: <sitemapindex> has no <sitemap> elements")
            return None
        if not all(self.is_valid_index_entry(entry) for entry in sitemaps):
            self.logger.error("Invalid sitemap index structure")
            return None
        return structure

    def _validate_urlset(self, structure: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        urlset = structure["urlset"]
        if not isinstance(urlset, dict):
            # <urlset/> or <urlset>text</urlset>: no entries
            urlset = {"url": []}
            structure["urlset"] = urlset

        if "urlset" in urlset:
            self.logger.error("Nested <urlset> found in <urlset> element. This is not supported.")
            return None

        urls = urlset.get("url")
        if urls is None or urls == "":
            self.logger.warn("<urlset> does not contain <url> elements")
            urlset["url"] = []
            return structure
        if not isinstance(urls, list):
            urls = [urls]
            urlset["url"] = urls

        if not all(self.is_valid_url_entry(entry) for entry in urls):
            self.logger.error("Invalid sitemap: <urlset> does not contain valid <url> elements")
            return None
        return structure

    def parse_validate(self, xml_text: str) -> Optional[Dict[str, Any]]:
        """Parses and validates *xml_text* in one step."""
        structure = self.parse_structure(xml_text)
        if structure is None:
            self.logger.error("Failed to parse sitemap XML")
            return None
        return self.validate(structure)

    # --- Extraction ---
    def extract_routes(self, structure: Dict[str, Any]) -> Optional[List[str]]:
        """Extracts ``<loc>`` values from a validated ``<urlset>`` structure.

        Entries without a ``<loc>`` are skipped with an error. Duplicates are
        kept, and reported once in a single warning.
        """
        urlset = structure.get("urlset")
        if urlset is None:
            self.logger.error(
                "Unsupported sitemap.xml file. No <urlset>, or it was not empty, "
                "or it did not contain <url>(s)"
            )
            return None
        urls = urlset.get("url") if isinstance(urlset, dict) else None
        if not urls:
            return []
        if not isinstance(urls, list):
            urls = [urls]

        routes: List[str] = []
        for item in urls:
            loc = item.get("loc") if isinstance(item, dict) else None
            if not loc:
                self.logger.error(f"Missing <loc> field in <url> element: {item!r}")
                continue
            lastmod = item.get("lastmod")
            if lastmod and not is_parseable_date(lastmod):
                self.logger.warn(f"Invalid <lastmod> date format in <url><loc>: {loc}")
            routes.append(loc)

        seen = set()
        duplicates: List[str] = []
        for route in routes:
            if route in seen and route not in duplicates:
                duplicates.append(route)
            seen.add(route)
        if duplicates:
            self.logger.warn(f"Duplicate routes found in the sitemap: {', '.join(duplicates)}")

        return routes

    def parse_routes(self, xml_text: str) -> Optional[List[str]]:
        """Returns the ``<loc>`` routes of a ``<urlset>`` sitemap in order.

        Args:
            xml_text: The content of the sitemap file.

        Returns:
            The routes (possibly empty), or None if the XML is malformed,
            invalid, or not a ``<urlset>`` (sitemap indexes included).
        """
        if not xml_text:
            self.logger.error("Sitemap XML content is empty")
            return None

        structure = self.parse_validate(xml_text)
        if structure is None:
            return None

        if self.is_sitemap_index(structure):
            self.logger.error("Sitemap index files are not supported, only <urlset> sitemaps")
            return None

        return self.extract_routes(structure)

    def parse_paths(
        self, xml_text: str, exclude_paths: Optional[Sequence[str]] = None
    ) -> Optional[List[str]]:
        """Returns the URL paths of a sitemap, minus any in *exclude_paths*.

        Routes that are not absolute URLs are skipped with an error.
        """
        routes = self.parse_routes(xml_text)
        if routes is None:
            return None
        if not routes:
            return []

        paths: List[str] = []
        for route in routes:
            path = route_to_path(route)
            if path is None:
                self.logger.error(f"Invalid URL: {route}")
                continue
            paths.append(path)

        if exclude_paths:
            excluded = set(exclude_paths)
            return [path for path in paths if path not in excluded]
        return paths
