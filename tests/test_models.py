"""Tests for pdrive models and errors."""
import pytest

from pdrive.exceptions import (
    BadRequestError,
    ClientError,
    PdriveError,
    UnauthorizedError,
    UnexpectedStatusError,
)
from pdrive.models import Chunk, PartResult, UploadSession


class TestChunk:
    def test_size(self):
        assert Chunk(index=1, data=b"abcd").size == 4

    def test_immutable(self):
        chunk = Chunk(index=1, data=b"x")
        with pytest.raises(Exception):
            chunk.index = 2


class TestUploadSession:
    def test_from_json_uses_server_field_names(self):
        session = UploadSession.from_json({"key": "movie.mkv", "uploadId": "u-1"})
        assert session.key == "movie.mkv"
        assert session.upload_id == "u-1"

    def test_from_json_missing_field(self):
        with pytest.raises(KeyError):
            UploadSession.from_json({"key": "movie.mkv"})


class TestPartResult:
    def test_json_shape(self):
        part = PartResult.from_json({"partNumber": 3, "etag": '"abc"'})
        assert part == PartResult(part_number=3, etag='"abc"')
        assert part.to_json() == {"partNumber": 3, "etag": '"abc"'}


class TestErrors:
    def test_unauthorized_has_fixed_message(self):
        error = UnauthorizedError()
        assert error.message == "Wrong token"
        assert str(error) == "Server error occured: Wrong token"

    def test_bad_request_keeps_body(self):
        error = BadRequestError("file too large")
        assert isinstance(error, ClientError)
        assert error.message == "file too large"

    def test_unexpected_status_details(self):
        error = UnexpectedStatusError("upload-part finish", 500, "boom")
        assert isinstance(error, PdriveError)
        assert error.status_code == 500
        assert error.body == "boom"
        assert "500" in str(error)
        assert "upload-part finish" in str(error)
