"""Classification of sitemap location strings.

A location is one of:

* an HTTP(S) URL, e.g. ``https://www.example.com/sitemap.xml``
* an S3 reference, ``s3://<bucket>/<key>[:region://<region>]``
* a local file path, e.g. ``./some/dir/sitemap.xml``

All three must end in ``.xml``, with one historical exception: a plain
``http://`` URL is accepted whatever its suffix, while ``https://`` URLs must
end in ``.xml``. Existing callers rely on that, so it is kept as is.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from .logger import DiagnosticLogger, default_logger

S3_PREFIX = "s3://"
REGION_SEPARATOR = ":region://"

RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)

_VALID_FILENAME_RE = re.compile(r'^[^<>:"/\\|?*\x00-\x1F]+$')
_VALID_POSIX_PATH_RE = re.compile(r'^[^<>:"|?*\x00-\x1F]+$')
_VALID_WINDOWS_PATH_RE = re.compile(r'^(?:[a-zA-Z]:)?(?:[\\/][^<>:"|?*\x00-\x1F]+)+$')

_S3_BUCKET_RE = re.compile(r"^s3://([^/]+)")
_S3_KEY_RE = re.compile(r"^s3://[^/]+/(.*?)(?::region://|$)")
_S3_REGION_RE = re.compile(r":region://([^/]+)")


@dataclass(frozen=True)
class LocalFile:
    path: str


@dataclass(frozen=True)
class HttpUrl:
    url: str


@dataclass(frozen=True)
class ObjectStore:
    bucket: str
    key: str
    region: Optional[str] = None


Location = Union[LocalFile, HttpUrl, ObjectStore]


def is_valid_filename(filename: str) -> bool:
    """Checks that *filename* is a single, portable file name."""
    if not filename or not _VALID_FILENAME_RE.match(filename):
        return False
    return filename.upper() not in RESERVED_NAMES


def is_valid_file_path(file_path: str) -> bool:
    """Checks that *file_path* is a usable POSIX or Windows file path.

    Args:
        file_path: The path to check, relative or absolute.

    Returns:
        True if the path contains no forbidden characters and its last
        segment is not a reserved device name, False otherwise.
    """
    if not file_path:
        return False
    if not _VALID_POSIX_PATH_RE.match(file_path) and not _VALID_WINDOWS_PATH_RE.match(
        file_path
    ):
        return False

    normalized = file_path.replace("\\", "/")
    file_name = normalized.split("/")[-1]
    return bool(file_name) and file_name.upper() not in RESERVED_NAMES


def bucket_from_s3_url(s3_url: str) -> Optional[str]:
    match = _S3_BUCKET_RE.match(s3_url)
    return match.group(1) if match else None


def key_from_s3_url(s3_url: str) -> Optional[str]:
    match = _S3_KEY_RE.match(s3_url)
    return match.group(1) if match else None


def region_from_s3_url(s3_url: str) -> Optional[str]:
    match = _S3_REGION_RE.search(s3_url)
    return match.group(1) if match else None


def parse_s3_url(s3_url: str) -> Optional[ObjectStore]:
    """Splits ``s3://bucket/key[:region://region]`` into its parts.

    Returns None if the bucket or key is missing.
    """
    bucket = bucket_from_s3_url(s3_url)
    key = key_from_s3_url(s3_url)
    if not bucket or not key:
        return None
    return ObjectStore(bucket=bucket, key=key, region=region_from_s3_url(s3_url) or None)


def _is_valid_s3_location(text: str) -> bool:
    parts = text.split(REGION_SEPARATOR)
    if len(parts) == 1:
        return parts[0].endswith(".xml")
    if len(parts) == 2:
        return parts[0].endswith(".xml") and len(parts[1]) > 0
    return False


def parse_location(
    text: str, logger: Optional[DiagnosticLogger] = None
) -> Optional[Location]:
    """Classifies a sitemap location string.

    Args:
        text: A URL, S3 reference or local file path.
        logger: Diagnostic logger; the module default if omitted.

    Returns:
        A :class:`HttpUrl`, :class:`ObjectStore` or :class:`LocalFile`, or
        None if *text* matches none of the accepted forms.
    """
    log = logger or default_logger
    if not text:
        log.debug("Empty sitemap location")
        return None

    # http:// is accepted regardless of suffix; only https:// is checked
    if text.startswith("http://") or (text.startswith("https://") and text.endswith(".xml")):
        log.debug(f"{text} - classified as URL")
        return HttpUrl(url=text)

    if text.startswith(S3_PREFIX):
        if _is_valid_s3_location(text):
            descriptor = parse_s3_url(text)
            if descriptor is not None:
                log.debug(f"{text} - classified as S3 object")
                return descriptor
        log.debug(f"{text} - invalid S3 location")
        return None

    if is_valid_file_path(text) and text.endswith(".xml"):
        log.debug(f"{text} - classified as local file")
        return LocalFile(path=text)

    log.debug(f"{text} - unrecognised sitemap location")
    return None
