"""Unit tests for HTTP/1.0 response serialization."""

from pathlib import Path

import pytest

from response import HTTPResponse, prepare_response, status_line


def test_response_serialization_sets_length_and_default_content_type() -> None:
    response = HTTPResponse(status_code=200, body="hello")

    raw = response.to_bytes()

    assert raw == (
        b"HTTP/1.0 200 OK\r\n"
        b"Content-type: text/plain\r\n"
        b"Content-length: 5\r\n"
        b"\r\n"
        b"hello"
    )


def test_response_serialization_preserves_custom_content_type() -> None:
    response = HTTPResponse(
        status_code=404,
        content_type="text/html",
        body=b"<h1>Not Found</h1>",
    )

    raw = response.to_bytes()

    assert raw.startswith(b"HTTP/1.0 404 Not Found\r\n")
    assert b"Content-type: text/html\r\n" in raw
    assert b"Content-length: 18\r\n" in raw


def test_content_length_counts_encoded_bytes() -> None:
    response = HTTPResponse(status_code=200, body="café")

    assert b"Content-length: 5\r\n" in response.to_bytes()


def test_status_line_uses_custom_reason() -> None:
    assert status_line(200) == b"HTTP/1.0 200 OK\r\n"
    assert status_line(404, "Gone Fishing") == b"HTTP/1.0 404 Gone Fishing\r\n"


def test_file_response_uses_given_length(tmp_path: Path) -> None:
    file_path = tmp_path / "clip.mp4"
    file_path.write_bytes(b"0123456789")

    prepared = prepare_response(
        HTTPResponse(
            status_code=200,
            content_type="video/mp4",
            file_path=file_path,
            content_length=10,
        )
    )

    assert prepared.body is None
    assert prepared.file_path == file_path
    assert prepared.head.endswith(b"Content-length: 10\r\n\r\n")


def test_file_response_requires_length(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        HTTPResponse(status_code=200, file_path=tmp_path / "x.html")
