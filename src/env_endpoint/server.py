"""HTTP sidecar server for env-endpoint.

Runs as a lightweight stdlib HTTP server on localhost.

Endpoints:
    GET  /health          — Health check
    GET  /env             — Full environment report
    GET  /env/<source>    — One property source (404 if unknown)

All endpoints return JSON. The ``/env`` routes answer 404 while the
endpoint is disabled. The optional ``X-Principal`` header identifies the
requester to the endpoint's filter hook.
"""

from __future__ import annotations
import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import unquote, urlsplit

from .config import DEFAULT_PORT
from .endpoint import EnvironmentEndpoint

logger = logging.getLogger(__name__)

PRINCIPAL_HEADER = "X-Principal"


class EnvEndpointServer(ThreadingHTTPServer):
    """HTTP server bound to a single EnvironmentEndpoint."""

    daemon_threads = True

    def __init__(self, address: tuple[str, int], endpoint: EnvironmentEndpoint) -> None:
        self.endpoint = endpoint
        super().__init__(address, EnvHandler)


class EnvHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the env endpoint sidecar."""

    server: EnvEndpointServer

    def _respond(self, status: int, data: Any) -> None:
        body = json.dumps(data, ensure_ascii=False, default=str).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        endpoint = self.server.endpoint
        path = urlsplit(self.path).path.rstrip("/") or "/"
        prefix = f"/{EnvironmentEndpoint.NAME}"
        try:
            if path == "/health":
                self._respond(200, {"status": "ok", "enabled": endpoint.enabled})

            elif not endpoint.enabled or not (path == prefix or path.startswith(prefix + "/")):
                self._respond(404, {"error": "not found"})

            elif path == prefix:
                principal = self.headers.get(PRINCIPAL_HEADER)
                self._respond(200, endpoint.get_environment_info(principal))

            else:
                name = unquote(path[len(prefix) + 1:])
                info = endpoint.get_properties(name, self.headers.get(PRINCIPAL_HEADER))
                if info is None:
                    self._respond(404, {"error": "not found", "property_source": name})
                else:
                    self._respond(200, info)

        except Exception as e:
            logger.exception("Error handling %s", self.path)
            self._respond(500, {"error": str(e)})


def make_server(
    endpoint: EnvironmentEndpoint,
    host: str = "127.0.0.1",
    port: int = DEFAULT_PORT,
) -> EnvEndpointServer:
    """Bind a server without starting it (port 0 picks a free port)."""
    return EnvEndpointServer((host, port), endpoint)


def serve(endpoint: EnvironmentEndpoint, port: int = DEFAULT_PORT, host: str = "127.0.0.1") -> None:
    """Start the env endpoint HTTP sidecar and block until interrupted."""
    server = make_server(endpoint, host, port)
    logger.info("env-endpoint sidecar listening on http://%s:%d", host, server.server_address[1])
    if not endpoint.enabled:
        logger.warning("env endpoint is disabled; /%s routes will answer 404", EnvironmentEndpoint.NAME)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        server.server_close()
