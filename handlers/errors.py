"""HTML error pages sent for rejected requests."""

import html
import socket

from config import MAX_ERROR_BODY_BYTES, SERVER_NAME
from response import REASON_PHRASES, HTTPResponse
from socket_handler import write_http_response_message


def render_error_body(
    cause: str,
    status_code: int,
    short_message: str,
    long_message: str,
    max_bytes: int = MAX_ERROR_BODY_BYTES,
) -> bytes:
    """Render the error page, truncated to ``max_bytes`` on a character boundary."""
    page = (
        "<html><title>Tiny Error</title>"
        '<body bgcolor="#ffffff">\r\n'
        f"{status_code}: {html.escape(short_message)}\r\n"
        f"<p>{html.escape(long_message)}: {html.escape(cause)}\r\n"
        f"<hr><em>{html.escape(SERVER_NAME)}</em>\r\n"
    )
    body = page.encode("utf-8", errors="surrogateescape")
    if len(body) > max_bytes:
        body = body[:max_bytes].decode("utf-8", errors="ignore").encode("utf-8")
    return body


def client_error(
    cause: str,
    status_code: int,
    long_message: str,
    short_message: str | None = None,
) -> HTTPResponse:
    short_message = short_message or REASON_PHRASES.get(status_code, "Error")
    return HTTPResponse(
        status_code=status_code,
        reason_phrase=short_message,
        content_type="text/html",
        body=render_error_body(cause, status_code, short_message, long_message),
    )


def send_client_error(
    client_socket: socket.socket,
    cause: str,
    status_code: int,
    long_message: str,
    short_message: str | None = None,
) -> int:
    response = client_error(cause, status_code, long_message, short_message)
    return write_http_response_message(client_socket, response)
