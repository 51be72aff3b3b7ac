"""Low-level socket read/write utilities."""

from __future__ import annotations

import socket
from typing import BinaryIO

from config import MAX_LINE_BYTES
from response import HTTPResponse, prepare_response


class HTTPReadError(Exception):
    """Raised when a client request cannot be safely read from the socket."""


class ConnectionClosedError(HTTPReadError):
    """Raised when the peer closes the connection in the middle of a request."""


class LineTooLongError(HTTPReadError):
    """Raised when a request or header line exceeds MAX_LINE_BYTES."""


class SocketTimeoutError(HTTPReadError):
    """Raised when a client times out while sending request bytes."""


class ShortWriteError(OSError):
    """Raised when fewer body bytes were sent than Content-length announced."""


def _read_line(reader: BinaryIO, max_line_bytes: int) -> bytes:
    try:
        line = reader.readline(max_line_bytes + 1)
    except socket.timeout as exc:
        raise SocketTimeoutError("Timed out waiting for request bytes") from exc

    if len(line) > max_line_bytes:
        raise LineTooLongError("Line exceeded MAX_LINE_BYTES")
    return line


def read_request_line(reader: BinaryIO, max_line_bytes: int = MAX_LINE_BYTES) -> bytes:
    """Read the request line, returning b"" when the peer sent nothing at all."""
    line = _read_line(reader, max_line_bytes)
    if line and not line.endswith(b"\n"):
        raise ConnectionClosedError("Connection closed before request line completed")
    return line


def discard_request_headers(reader: BinaryIO, max_line_bytes: int = MAX_LINE_BYTES) -> int:
    """Consume header lines through the blank terminator and return bytes read."""
    consumed = 0
    while True:
        line = _read_line(reader, max_line_bytes)
        if not line.endswith(b"\n"):
            raise ConnectionClosedError("Connection closed before headers completed")
        consumed += len(line)
        if line in (b"\r\n", b"\n"):
            return consumed


def write_http_response(client_socket: socket.socket, payload: bytes) -> None:
    """Write the complete payload to a client socket."""
    client_socket.sendall(payload)


def write_http_response_message(client_socket: socket.socket, response: HTTPResponse) -> int:
    """Write an HTTPResponse, streaming file bodies instead of loading them."""
    prepared = prepare_response(response)

    if prepared.file_path is None:
        client_socket.sendall(prepared.head)
        if prepared.body:
            client_socket.sendall(prepared.body)
        return len(prepared.head) + len(prepared.body or b"")

    with prepared.file_path.open("rb") as file_obj:
        client_socket.sendall(prepared.head)
        sent = 0
        if prepared.content_length:
            sent = client_socket.sendfile(file_obj, offset=0, count=prepared.content_length)
        if sent != prepared.content_length:
            raise ShortWriteError(
                f"Sent {sent} of {prepared.content_length} bytes from {prepared.file_path}"
            )
    return len(prepared.head) + sent
