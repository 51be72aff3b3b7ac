"""Single-request dispatch: parse, classify, check permissions, respond."""

from __future__ import annotations

import logging
import os
import socket
import stat
from dataclasses import dataclass
from typing import BinaryIO

from config import ServerSettings
from handlers.dynamic import serve_dynamic
from handlers.errors import send_client_error
from handlers.static import serve_static
from request import HTTPRequest, HTTPRequestParseError
from router import classify_uri
from socket_handler import LineTooLongError, discard_request_headers, read_request_line
from utils import is_within_root

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DispatchOutcome:
    """What happened to one request, for access logging and metrics."""

    method: str = "-"
    uri: str = "-"
    status_code: int = 0
    bytes_in: int = 0
    bytes_out: int = 0


def handle_request(
    client_socket: socket.socket,
    reader: BinaryIO,
    settings: ServerSettings,
) -> DispatchOutcome | None:
    """Serve exactly one request from ``reader``, answering on ``client_socket``.

    Returns None when the peer closed without sending anything. Stream
    failures propagate to the caller, which closes the connection.
    """
    outcome = DispatchOutcome()

    try:
        line = read_request_line(reader)
    except LineTooLongError:
        outcome.status_code = 400
        outcome.bytes_out = send_client_error(
            client_socket, "request line", 400, "Tiny couldn't parse the request line"
        )
        return outcome
    if not line:
        return None
    outcome.bytes_in = len(line)
    logger.debug("Request line: %r", line)

    try:
        request = HTTPRequest.from_request_line(line)
    except HTTPRequestParseError as exc:
        outcome.status_code = exc.status_code
        outcome.bytes_out = send_client_error(
            client_socket,
            os.fsdecode(line).strip(),
            exc.status_code,
            "Tiny couldn't parse the request line",
        )
        return outcome

    outcome.method = request.method
    outcome.uri = request.uri

    if not request.is_supported_method:
        outcome.status_code = 501
        outcome.bytes_out = send_client_error(
            client_socket, request.method, 501, "Tiny does not implement this method"
        )
        return outcome

    try:
        outcome.bytes_in += discard_request_headers(reader)
    except LineTooLongError:
        outcome.status_code = 400
        outcome.bytes_out = send_client_error(
            client_socket, "request header", 400, "Tiny couldn't parse the request headers"
        )
        return outcome

    target = classify_uri(
        request.uri,
        doc_root=settings.doc_root,
        cgi_marker=settings.cgi_marker,
        default_index=settings.default_index,
    )

    if target.filename and not is_within_root(target.filename, settings.doc_root):
        outcome.status_code = 403
        outcome.bytes_out = send_client_error(
            client_socket, request.uri, 403, "Tiny won't serve files outside its document root"
        )
        return outcome

    try:
        file_stat = os.stat(target.filename)
    except (OSError, ValueError):
        outcome.status_code = 404
        outcome.bytes_out = send_client_error(
            client_socket, target.filename, 404, "Tiny couldn't find this file"
        )
        return outcome

    is_regular = stat.S_ISREG(file_stat.st_mode)

    if target.is_static:
        if not is_regular or not file_stat.st_mode & stat.S_IRUSR:
            outcome.status_code = 403
            outcome.bytes_out = send_client_error(
                client_socket, target.filename, 403, "Tiny couldn't read the file"
            )
            return outcome
        outcome.status_code = 200
        outcome.bytes_out = serve_static(client_socket, target.filename, file_stat.st_size)
        return outcome

    if not is_regular or not file_stat.st_mode & stat.S_IXUSR:
        outcome.status_code = 403
        outcome.bytes_out = send_client_error(
            client_socket, target.filename, 403, "Tiny couldn't run the CGI program"
        )
        return outcome
    outcome.status_code = 200
    result = serve_dynamic(
        client_socket,
        target.filename,
        target.cgi_args,
        timeout=settings.cgi_timeout_secs,
    )
    outcome.bytes_out = result.bytes_sent
    return outcome
