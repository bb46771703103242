"""Diff result type plus its JSON file and console representations.

The JSON report has exactly these top-level keys::

    {
      "sitemap1": "<location>",
      "sitemap2": "<location>",
      "commonPaths": [...],
      "sitemap1PathsNotInSitemap2": [...],
      "sitemap2PathsNotInSitemap1": [...]
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .location import is_valid_file_path
from .logger import DiagnosticLogger, default_logger


@dataclass
class DiffResult:
    """Paths shared by, and unique to, two sitemaps."""

    sitemap1: str
    sitemap2: str
    common_paths: List[str] = field(default_factory=list)
    sitemap1_paths_not_in_sitemap2: List[str] = field(default_factory=list)
    sitemap2_paths_not_in_sitemap1: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sitemap1": self.sitemap1,
            "sitemap2": self.sitemap2,
            "commonPaths": list(self.common_paths),
            "sitemap1PathsNotInSitemap2": list(self.sitemap1_paths_not_in_sitemap2),
            "sitemap2PathsNotInSitemap1": list(self.sitemap2_paths_not_in_sitemap1),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiffResult":
        return cls(
            sitemap1=data["sitemap1"],
            sitemap2=data["sitemap2"],
            common_paths=list(data["commonPaths"]),
            sitemap1_paths_not_in_sitemap2=list(data["sitemap1PathsNotInSitemap2"]),
            sitemap2_paths_not_in_sitemap1=list(data["sitemap2PathsNotInSitemap1"]),
        )


def is_valid_output_file(path: str) -> bool:
    """Checks that *path* is a usable file path ending in ``.json``."""
    return bool(path) and is_valid_file_path(path) and path.endswith(".json")


class ReportWriter:
    """Handles persistence and validation of JSON diff reports."""

    # Keys we expect in the persisted JSON and their expected Python types.
    REQUIRED_KEYS = {
        "sitemap1": str,
        "sitemap2": str,
        "commonPaths": list,
        "sitemap1PathsNotInSitemap2": list,
        "sitemap2PathsNotInSitemap1": list,
    }

    @classmethod
    def load(cls, path: str) -> DiffResult:
        """Load and validate a report file.

        Raises
        ------
        FileNotFoundError
            If *path* does not exist.
        json.JSONDecodeError
            If the file cannot be parsed as JSON.
        KeyError
            If a required key is missing.
        ValueError
            If a key has an unexpected type or the root object is not a dict.
        """
        with open(path, "r", encoding="utf-8") as fp:
            data = json.load(fp)

        if not isinstance(data, dict):
            raise ValueError("Report data is not a dictionary")

        for key, expected_type in cls.REQUIRED_KEYS.items():
            if key not in data:
                raise KeyError(f"Missing required key in report: {key}")
            if not isinstance(data[key], expected_type):
                expected = expected_type.__name__
                actual = type(data[key]).__name__
                raise ValueError(
                    f"Invalid type for key '{key}': expected {expected}, got {actual}"
                )
        return DiffResult.from_dict(data)

    @staticmethod
    def save(
        path: str, result: DiffResult, logger: Optional[DiagnosticLogger] = None
    ) -> bool:
        """Write *result* to *path* as pretty-printed JSON.

        Returns True on success. An invalid file name or a write error is
        logged and reported as False.
        """
        log = logger or default_logger
        if not is_valid_output_file(path):
            log.error('Invalid output file name. Must be a valid JSON file (e.g., "output.json").')
            return False
        try:
            with open(path, "w", encoding="utf-8") as fp:
                json.dump(result.to_dict(), fp, indent=2, ensure_ascii=False)
        except OSError as e:
            log.error(f"Error writing JSON to file: {e}")
            return False
        return True


def _format_paths(paths: List[str]) -> str:
    return "\n".join(f"  {path}" for path in paths)


def format_summary(result: DiffResult) -> str:
    """Human-readable description of *result* for the console."""
    s1, s2 = result.sitemap1, result.sitemap2
    lines: List[str] = []

    if not result.sitemap1_paths_not_in_sitemap2 and not result.sitemap2_paths_not_in_sitemap1:
        lines.append(f'No path differences found between the two sitemaps "{s1}" and "{s2}".')
    else:
        lines.append("Different paths found:")
        if result.sitemap1_paths_not_in_sitemap2:
            lines.append(f'\nsitemap1 "{s1}" paths not in sitemap2 "{s2}":')
            lines.append(_format_paths(result.sitemap1_paths_not_in_sitemap2))
        else:
            lines.append(f'\nsitemap1 "{s1}" paths are all in sitemap2 "{s2}" paths.')
        if result.sitemap2_paths_not_in_sitemap1:
            lines.append(f'\nsitemap2 "{s2}" paths not in sitemap1 "{s1}":')
            lines.append(_format_paths(result.sitemap2_paths_not_in_sitemap1))
        else:
            lines.append(f'\nsitemap2 "{s2}" paths are all in sitemap1 "{s1}" paths.')

    if result.common_paths:
        lines.append("\nCommon paths found in both sitemaps:")
        lines.append(_format_paths(result.common_paths))
    else:
        lines.append(f'\nNo common paths found between the two sitemaps "{s1}" and "{s2}".')

    return "\n".join(lines)
