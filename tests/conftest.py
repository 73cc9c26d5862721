"""Shared pytest fixtures for acquia_cloud tests."""

import json
import socket
import threading
import urllib.parse
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from acquia_cloud import CloudApiClient


class StubHandler(BaseHTTPRequestHandler):
    """Answers from ``server.routes`` and records every request it sees."""

    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        parsed = urllib.parse.urlparse(self.path)
        self.server.requests.append({
            "method": self.command,
            "raw_path": self.path,
            "path": parsed.path,
            "query": parsed.query,
            "headers": self.headers,
            "body": body,
        })

        status, headers, payload = self.server.routes.get(
            (self.command, parsed.path),
            (404, {}, {"message": "Not found"}),
        )
        data = payload if isinstance(payload, bytes) else json.dumps(payload).encode()

        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        for name, value in headers.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    do_GET = _handle
    do_POST = _handle
    do_DELETE = _handle

    def log_message(self, format, *args):
        pass


@pytest.fixture
def stub_server():
    """Run a stub Cloud API on a free local port."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), StubHandler)
    server.routes = {}
    server.requests = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture
def endpoint(stub_server) -> str:
    return f"http://127.0.0.1:{stub_server.server_address[1]}/v1"


@pytest.fixture
def credentials(endpoint):
    return {
        "stage": "test",
        "demo": {
            "username": "user",
            "password": "secret",
            "endpoint": endpoint,
        },
        "gardener": "demo",
    }


@pytest.fixture
def client(credentials) -> CloudApiClient:
    return CloudApiClient(credentials)


@pytest.fixture
def closed_port() -> int:
    """A local port nothing is listening on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
