"""HTTP request model and request-line parser."""

import os
from dataclasses import dataclass

SUPPORTED_METHOD = "GET"


class HTTPRequestParseError(ValueError):
    """Request parse error carrying an HTTP status code."""

    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class HTTPRequest:
    method: str
    uri: str
    http_version: str

    @property
    def is_supported_method(self) -> bool:
        return self.method.upper() == SUPPORTED_METHOD

    @classmethod
    def from_request_line(cls, line: bytes) -> "HTTPRequest":
        """Parse a raw request line such as ``GET /home.html HTTP/1.0``."""
        # Same bytes reach os.stat as were sent on the wire.
        text = os.fsdecode(line)
        parts = text.split()
        if not parts:
            raise HTTPRequestParseError("Missing request line")
        if len(parts) != 3:
            raise HTTPRequestParseError("Invalid request line")

        method, uri, http_version = parts
        return cls(method=method, uri=uri, http_version=http_version)


def parse_request_line(line: bytes) -> HTTPRequest:
    return HTTPRequest.from_request_line(line)
