"""HTTP/1.0 response model and serializer."""

from dataclasses import dataclass
from pathlib import Path

REASON_PHRASES: dict[int, str] = {
    200: "OK",
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    500: "Internal Server Error",
    501: "Not Implemented",
}

HTTP_VERSION = "HTTP/1.0"


@dataclass(slots=True)
class PreparedResponse:
    head: bytes
    body: bytes | None = None
    file_path: Path | None = None
    content_length: int = 0


@dataclass(slots=True)
class HTTPResponse:
    status_code: int
    reason_phrase: str | None = None
    content_type: str = "text/plain"
    body: bytes | str = b""
    file_path: Path | None = None
    content_length: int | None = None

    def __post_init__(self) -> None:
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")
        if self.file_path is not None and self.body:
            raise ValueError("Response cannot set both body and file_path")
        if self.file_path is not None and self.content_length is None:
            raise ValueError("File responses need the size taken from the request's stat")

    def to_bytes(self) -> bytes:
        """Serialize an in-memory response into HTTP/1.0 wire format bytes."""
        prepared = prepare_response(self)
        if prepared.file_path is not None:
            raise ValueError("File responses are streamed, not serialized")
        return prepared.head + (prepared.body or b"")


def status_line(status_code: int, reason_phrase: str | None = None) -> bytes:
    reason = reason_phrase or REASON_PHRASES.get(status_code, "Unknown")
    return f"{HTTP_VERSION} {status_code} {reason}\r\n".encode("iso-8859-1")


def prepare_response(response: HTTPResponse) -> PreparedResponse:
    if response.file_path is not None:
        content_length = response.content_length
        body = None
    else:
        body = response.body
        content_length = len(body) if response.content_length is None else response.content_length

    head = (
        status_line(response.status_code, response.reason_phrase)
        + f"Content-type: {response.content_type}\r\n".encode("iso-8859-1")
        + f"Content-length: {content_length}\r\n\r\n".encode("ascii")
    )
    return PreparedResponse(
        head=head,
        body=body,
        file_path=response.file_path,
        content_length=content_length,
    )
