"""CGI-style dynamic content: run a program with its stdout on the client socket."""

from __future__ import annotations

import logging
import os
import socket
import subprocess
from dataclasses import dataclass

from config import CGI_ARGS_ENV, CGI_TIMEOUT_SECS
from response import status_line
from socket_handler import write_http_response

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CGIResult:
    returncode: int
    bytes_sent: int


class CGIExecutionError(Exception):
    """Raised when a CGI program cannot be started or does not finish."""


def build_cgi_environment(cgi_args: str) -> dict[str, str]:
    env = dict(os.environ)
    env[CGI_ARGS_ENV] = cgi_args
    return env


def serve_dynamic(
    client_socket: socket.socket,
    filename: str,
    cgi_args: str,
    *,
    timeout: float | None = CGI_TIMEOUT_SECS,
) -> CGIResult:
    """Send the status line, then hand the connection to ``filename``.

    The program writes its own headers, blank line and body. Returns its
    exit status and the bytes this server wrote, once it has finished.
    """
    head = status_line(200)
    write_http_response(client_socket, head)

    # A timeout leaves the descriptor in O_NONBLOCK, which the child would inherit.
    client_socket.setblocking(True)
    connection_fd = client_socket.fileno()
    try:
        process = subprocess.Popen(
            [filename],
            stdin=connection_fd,
            stdout=connection_fd,
            env=build_cgi_environment(cgi_args),
        )
    except OSError as exc:
        raise CGIExecutionError(f"Could not start CGI program {filename}") from exc

    try:
        returncode = process.wait(timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        process.kill()
        process.wait()
        raise CGIExecutionError(f"CGI program {filename} exceeded {timeout}s") from exc

    if returncode != 0:
        logger.warning("CGI program %s exited with status %s", filename, returncode)
    return CGIResult(returncode=returncode, bytes_sent=len(head))
