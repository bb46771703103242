import codecs  # Import codecs for BOM
import io

import pytest
import requests
from botocore.exceptions import ClientError


SITEMAP_1 = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
   <url><loc>https://example.com/</loc></url>
   <url><loc>https://example.com/about</loc></url>
</urlset>"""

SITEMAP_2 = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
   <url><loc>https://example.com/about</loc></url>
   <url><loc>https://example.com/contact</loc></url>
</urlset>"""

SITEMAP_INDEX = """<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
   <sitemap><loc>https://example.com/child.xml</loc></sitemap>
</sitemapindex>"""


# Helper class for mocking requests.get
class MockResponse:
    def __init__(self, xml_data, status_code=200, encoding="utf-8"):
        # Encode based on the provided encoding
        if isinstance(xml_data, str):
            self.content = xml_data.encode(encoding)
            self.text = xml_data
        else:  # Assume bytes if not string (e.g., for BOM)
            self.content = xml_data
            self.text = xml_data.decode("latin-1")
        self.status_code = status_code
        self.ok = 200 <= status_code < 300


# Monkeypatch requests.get
@pytest.fixture
def patch_requests(monkeypatch):
    """Patches requests.get to return controlled responses or raise errors."""

    bom_xml_content = codecs.BOM_UTF8 + SITEMAP_1.encode("utf-8")

    def fake_get(url, **kwargs):  # Accept **kwargs to handle 'timeout' and 'headers'
        if url == "http://error.com/sitemap.xml":
            raise requests.exceptions.RequestException("Network error")
        if url == "http://badxml.com/sitemap.xml":
            # Return genuinely malformed XML
            return MockResponse("<root><unclosed-tag</root>")
        if url == "http://bom.com/sitemap.xml":
            return MockResponse(bom_xml_content)
        if url == "http://latin1.com/sitemap.xml":
            return MockResponse(
                "<urlset><url><loc>http://latin1.com/caf\xe9</loc></url></urlset>",
                encoding="latin-1",
            )
        if url == "http://notfound.com/sitemap.xml":
            return MockResponse("<error>Not Found</error>", status_code=404)
        if url == "http://redirect.com/sitemap.xml":
            return MockResponse(SITEMAP_2, status_code=304)
        if url == "https://example.com/sitemap1.xml":
            return MockResponse(SITEMAP_1)
        if url == "https://example.com/sitemap2.xml":
            return MockResponse(SITEMAP_2)
        if url == "https://example.com/index.xml":
            return MockResponse(SITEMAP_INDEX)

        # Default fallback for unexpected URLs
        return MockResponse("<root/>", status_code=404)

    monkeypatch.setattr(requests, "get", fake_get)


def _client_error(code, operation):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakePaginator:
    def __init__(self, client):
        self.client = client

    def paginate(self, Bucket):
        if self.client.fail_listing:
            raise _client_error("AccessDenied", "ListObjectsV2")
        keys = sorted(key for bucket, key in self.client.objects if bucket == Bucket)
        # Two pages so membership has to span the whole listing
        middle = len(keys) // 2
        yield {"Contents": [{"Key": key} for key in keys[:middle]]}
        yield {"Contents": [{"Key": key} for key in keys[middle:]]}


class FakeS3Client:
    """Minimal stand-in for a boto3 S3 client backed by a dict."""

    def __init__(self, objects=None, fail_listing=False):
        self.objects = objects or {}
        self.fail_listing = fail_listing
        self.regions = []

    def get_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise _client_error("NoSuchKey", "GetObject")
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}

    def head_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise _client_error("404", "HeadObject")
        return {"ContentLength": len(self.objects[(Bucket, Key)])}

    def get_paginator(self, name):
        assert name == "list_objects_v2"
        return FakePaginator(self)


@pytest.fixture
def fake_s3():
    """A fake S3 client holding two sitemaps in ``bucket``."""
    return FakeS3Client(
        {
            ("bucket", "sitemap.xml"): SITEMAP_1.encode("utf-8"),
            ("bucket", "dir/sitemap.xml"): SITEMAP_2.encode("utf-8"),
        }
    )


@pytest.fixture
def s3_factory(fake_s3):
    """Client factory returning ``fake_s3`` and recording requested regions."""

    def factory(region):
        fake_s3.regions.append(region)
        return fake_s3

    return factory
