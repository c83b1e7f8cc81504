from unittest.mock import MagicMock

import pytest
from minio.error import MinioException
from urllib3.exceptions import MaxRetryError

from tracker.core.storage import CommentImageStorage


def _storage(client=None):
    return CommentImageStorage(client or MagicMock(), "comment-images", "http://cdn.test/")


def test_public_url_and_path_round_trip():
    storage = _storage()

    url = storage.public_url("3/1700000000000-ab12.png")

    assert url == "http://cdn.test/comment-images/3/1700000000000-ab12.png"
    assert storage.path_from_url(url) == "3/1700000000000-ab12.png"


def test_path_from_foreign_url_is_none():
    storage = _storage()

    assert storage.path_from_url("http://elsewhere.test/avatar.png") is None
    assert storage.path_from_url(None) is None


def test_upload_sends_object_with_content_type():
    client = MagicMock()
    storage = _storage(client)

    storage.upload("1/a.png", b"data", "image/png")

    args, kwargs = client.put_object.call_args
    assert args[:2] == ("comment-images", "1/a.png")
    assert kwargs["length"] == 4
    assert kwargs["content_type"] == "image/png"


@pytest.mark.parametrize(
    "failure",
    [
        MaxRetryError(None, "/comment-images/1/a.png", "Connection refused"),
        MinioException("bucket policy denied"),
        OSError("connection reset"),
    ],
)
def test_remove_by_url_swallows_storage_errors(failure):
    client = MagicMock()
    client.remove_object.side_effect = failure
    storage = _storage(client)

    assert storage.remove_by_url("http://cdn.test/comment-images/1/a.png") is False


def test_remove_by_url_deletes_object():
    client = MagicMock()
    storage = _storage(client)

    assert storage.remove_by_url("http://cdn.test/comment-images/1/a.png") is True
    client.remove_object.assert_called_once_with("comment-images", "1/a.png")
