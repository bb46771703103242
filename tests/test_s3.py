from botocore.exceptions import NoCredentialsError

from sitemap_diff.s3 import S3Storage
from conftest import SITEMAP_1, FakeS3Client


def test_get_text_success(s3_factory, fake_s3):
    storage = S3Storage(client_factory=s3_factory)
    assert storage.get_text("bucket", "sitemap.xml", "us-west-2") == SITEMAP_1
    assert fake_s3.regions == ["us-west-2"]


def test_get_text_default_region(s3_factory, fake_s3):
    storage = S3Storage(client_factory=s3_factory)
    assert storage.get_text("bucket", "sitemap.xml") == SITEMAP_1
    assert fake_s3.regions == [None]


def test_get_text_missing_key_returns_none(s3_factory, capsys):
    storage = S3Storage(client_factory=s3_factory)
    assert storage.get_text("bucket", "missing.xml") is None
    assert "S3 GetObject error for s3://bucket/missing.xml" in capsys.readouterr().err


def test_get_text_strips_bom():
    client = FakeS3Client({("b", "k.xml"): b"\xef\xbb\xbf<urlset/>"})
    storage = S3Storage(client_factory=lambda region: client)
    assert storage.get_text("b", "k.xml") == "<urlset/>"


def test_get_text_client_creation_failure():
    """Errors raised while building the client are reported as None."""

    def factory(region):
        raise NoCredentialsError()

    storage = S3Storage(client_factory=factory)
    assert storage.get_text("bucket", "sitemap.xml") is None


def test_object_exists(s3_factory):
    storage = S3Storage(client_factory=s3_factory)
    assert storage.object_exists("bucket", "sitemap.xml") is True
    assert storage.object_exists("bucket", "missing.xml") is False
    assert storage.object_exists("other-bucket", "sitemap.xml") is False


def test_objects_exist_uses_full_listing(s3_factory):
    storage = S3Storage(client_factory=s3_factory)
    result = storage.objects_exist(
        "bucket", ["sitemap.xml", "dir/sitemap.xml", "missing.xml"]
    )
    assert result == {
        "sitemap.xml": True,
        "dir/sitemap.xml": True,
        "missing.xml": False,
    }


def test_objects_exist_listing_error_marks_all_missing():
    client = FakeS3Client({("bucket", "a.xml"): b"<urlset/>"}, fail_listing=True)
    storage = S3Storage(client_factory=lambda region: client)
    assert storage.objects_exist("bucket", ["a.xml", "b.xml"]) == {
        "a.xml": False,
        "b.xml": False,
    }


def test_get_text_empty_object_returns_empty_string():
    """An empty object reads as "" just like an empty local file."""
    client = FakeS3Client({("b", "empty.xml"): b""})
    storage = S3Storage(client_factory=lambda region: client)
    assert storage.get_text("b", "empty.xml") == ""
