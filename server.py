"""Main HTTP server entry point and connection lifecycle orchestration."""

from __future__ import annotations

import argparse
import json
import logging
import socket
import time

from config import ACCEPT_POLL_SECS, HOST, PORT, ServerSettings, load_settings
from dispatcher import DispatchOutcome, handle_request
from handlers.dynamic import CGIExecutionError
from metrics import MetricsRegistry
from socket_handler import HTTPReadError

logger = logging.getLogger(__name__)


class HTTPServer:
    """Iterative server: each connection is fully handled before the next accept."""

    def __init__(
        self,
        host: str = HOST,
        port: int = PORT,
        settings: ServerSettings | None = None,
    ) -> None:
        self.settings = settings or ServerSettings()
        self.host = host
        self.port = port
        self._server_socket: socket.socket | None = None
        self._running = False
        self.metrics = MetricsRegistry()

    def start(self) -> None:
        """Listen and serve connections one at a time until stop() is called."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server_socket:
            self._server_socket = server_socket
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen(128)
            server_socket.settimeout(ACCEPT_POLL_SECS)
            self.port = server_socket.getsockname()[1]
            logger.info("Serving %s on %s:%s", self.settings.doc_root, self.host, self.port)

            self._running = True
            try:
                while self._running:
                    try:
                        client_socket, address = server_socket.accept()
                    except socket.timeout:
                        continue
                    except OSError:
                        break
                    self._handle_client(client_socket, address)
            finally:
                self._running = False
                logger.info(
                    "Server stopped: %s", json.dumps(self.metrics.snapshot(), sort_keys=True)
                )

    def stop(self) -> None:
        self._running = False
        if self._server_socket is not None:
            self._server_socket.close()
            self._server_socket = None

    def _handle_client(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        with client_socket:
            self.metrics.connection_opened()
            logger.info("Accepted connection from (%s, %s)", address[0], address[1])
            client_socket.settimeout(self.settings.socket_timeout_secs)
            started_at = time.perf_counter()
            with client_socket.makefile("rb") as reader:
                try:
                    outcome = handle_request(client_socket, reader, self.settings)
                except HTTPReadError as exc:
                    self.metrics.record_read_error(exc.__class__.__name__)
                    logger.warning("Dropping connection from %s: %s", address[0], exc)
                    return
                except CGIExecutionError as exc:
                    self.metrics.record_cgi_failure()
                    logger.error("CGI failure for %s: %s", address[0], exc)
                    return
                except OSError as exc:
                    self.metrics.record_write_error(exc.__class__.__name__)
                    logger.warning("I/O error on connection from %s: %s", address[0], exc)
                    return

            if outcome is not None:
                self._record_and_log(address, outcome, started_at)

    def _record_and_log(
        self,
        address: tuple[str, int],
        outcome: DispatchOutcome,
        started_at: float,
    ) -> None:
        duration_ms = (time.perf_counter() - started_at) * 1000
        self.metrics.record_request(
            status_code=outcome.status_code,
            duration_ms=duration_ms,
            bytes_sent=outcome.bytes_out,
        )
        event = {
            "client": address[0],
            "method": outcome.method,
            "uri": outcome.uri,
            "status": outcome.status_code,
            "bytes_in": outcome.bytes_in,
            "bytes_out": outcome.bytes_out,
            "latency_ms": round(duration_ms, 3),
        }
        if self.settings.log_format == "json":
            logger.info(json.dumps(event, sort_keys=True))
            return

        logger.info(
            "client=%s method=%s uri=%s status=%s bytes_in=%s bytes_out=%s duration_ms=%.2f",
            event["client"],
            event["method"],
            event["uri"],
            event["status"],
            event["bytes_in"],
            event["bytes_out"],
            duration_ms,
        )


def _port_number(value: str) -> int:
    try:
        port = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}") from exc
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the tiny HTTP/1.0 server")
    parser.add_argument("port", type=_port_number)
    parser.add_argument("--host", default=None)
    parser.add_argument("--root", default=None, help="document root")
    parser.add_argument("--config", default=None, help="YAML settings file")
    parser.add_argument("--log-format", choices=["plain", "json"], default=None)
    parser.add_argument("--timeout", type=float, default=None, help="per-connection socket timeout")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> ServerSettings:
    settings = load_settings(args.config)
    if args.host is not None:
        settings.host = args.host
    if args.root is not None:
        settings.doc_root = args.root
    if args.log_format is not None:
        settings.log_format = args.log_format
    if args.timeout is not None:
        settings.socket_timeout_secs = args.timeout
    return settings


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    settings = build_settings(args)
    server = HTTPServer(host=settings.host, port=args.port, settings=settings)
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()


if __name__ == "__main__":
    main()
