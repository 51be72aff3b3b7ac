"""Static file responses."""

import socket
from pathlib import Path

from response import HTTPResponse
from socket_handler import write_http_response_message
from utils import get_content_type


def serve_static(client_socket: socket.socket, filename: str, filesize: int) -> int:
    """Send ``filename`` byte-for-byte and return the number of bytes written.

    ``filesize`` comes from the dispatcher's stat and is not re-checked here.
    """
    response = HTTPResponse(
        status_code=200,
        content_type=get_content_type(filename),
        file_path=Path(filename),
        content_length=filesize,
    )
    return write_http_response_message(client_socket, response)
