"""Tests for the HTTP sidecar and the CLI."""

import json
import threading
import urllib.error
import urllib.request

import pytest

from env_endpoint import (
    ConfiguredEnvironmentFilter, Environment, EnvironmentEndpoint, MapPropertySource, MASK_MARKER,
)
from env_endpoint.cli import main
from env_endpoint.server import make_server


def _endpoint(enabled=True, environment_filter=None):
    env = Environment(
        active_names=["dev"],
        property_sources=[
            MapPropertySource("application", {"db.password": "p", "db.host": "h"}),
            MapPropertySource("my source", {"x": 1}, order=1),
        ],
    )
    return EnvironmentEndpoint(
        env,
        environment_filter or ConfiguredEnvironmentFilter("legacy"),
        enabled=enabled,
    )


@pytest.fixture
def serve_endpoint():
    servers = []

    def start(endpoint):
        server = make_server(endpoint, port=0)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return f"http://127.0.0.1:{server.server_address[1]}"

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


def _get(url, headers=None):
    req = urllib.request.Request(url, headers=headers or {})
    try:
        with urllib.request.urlopen(req, timeout=5) as resp:
            return resp.status, json.loads(resp.read())
    except urllib.error.HTTPError as e:
        return e.code, json.loads(e.read())


# ── HTTP sidecar ─────────────────────────────────────────────────────

def test_health(serve_endpoint):
    base = serve_endpoint(_endpoint())
    assert _get(base + "/health") == (200, {"status": "ok", "enabled": True})


def test_full_report(serve_endpoint):
    base = serve_endpoint(_endpoint())
    status, body = _get(base + "/env")
    assert status == 200
    assert body["activeEnvironments"] == ["dev"]
    assert [ps["name"] for ps in body["propertySources"]] == ["application", "my source"]
    assert body["propertySources"][0]["properties"] == {"db.password": MASK_MARKER, "db.host": "h"}


def test_single_source_url_decoded(serve_endpoint):
    base = serve_endpoint(_endpoint())
    status, body = _get(base + "/env/my%20source")
    assert status == 200
    assert body == {"name": "my source", "order": 1, "convention": "JAVA_PROPERTIES", "properties": {"x": 1}}


def test_unknown_source_is_404(serve_endpoint):
    base = serve_endpoint(_endpoint())
    status, body = _get(base + "/env/nope")
    assert status == 404
    assert body["error"] == "not found"


def test_disabled_endpoint_hides_routes(serve_endpoint):
    base = serve_endpoint(_endpoint(enabled=False))
    assert _get(base + "/env")[0] == 404
    assert _get(base + "/env/application")[0] == 404
    assert _get(base + "/health") == (200, {"status": "ok", "enabled": False})


def test_unknown_path_is_404(serve_endpoint):
    base = serve_endpoint(_endpoint())
    assert _get(base + "/environment")[0] == 404


def test_principal_header_reaches_hook(serve_endpoint):
    class AdminSeesAll:
        def specify_filtering(self, specification):
            if specification.principal == "admin":
                specification.mask_none()

    base = serve_endpoint(_endpoint(environment_filter=AdminSeesAll()))
    _, anon = _get(base + "/env/application")
    _, admin = _get(base + "/env/application", {"X-Principal": "admin"})
    assert anon["properties"]["db.host"] == MASK_MARKER
    assert admin["properties"]["db.host"] == "h"


def test_hook_failure_is_500(serve_endpoint):
    class Broken:
        def specify_filtering(self, specification):
            raise RuntimeError("policy store down")

    base = serve_endpoint(_endpoint(environment_filter=Broken()))
    status, body = _get(base + "/env")
    assert status == 500
    assert "policy store down" in body["error"]


# ── CLI ──────────────────────────────────────────────────────────────

@pytest.fixture
def config_file(tmp_path):
    (tmp_path / "application.yml").write_text("db:\n  password: p\n  host: h\n")
    path = tmp_path / "endpoint.yml"
    path.write_text(
        "env_endpoint:\n"
        "  masking: legacy\n"
        "  include_environ: false\n"
        "  property_sources: [application.yml]\n"
    )
    return str(path)


def test_cli_report(config_file, capsys):
    assert main(["--config", config_file, "report"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["propertySources"][0]["properties"] == {"db.password": MASK_MARKER, "db.host": "h"}


def test_cli_source(config_file, capsys):
    assert main(["--config", config_file, "--masking", "none", "source", "application"]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["properties"] == {"db.password": "p", "db.host": "h"}


def test_cli_extra_mask_pattern(config_file, capsys):
    assert main(["--config", config_file, "--mask-pattern", r"db\.host", "source", "application"]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["properties"]["db.host"] == MASK_MARKER


def test_cli_missing_source(config_file, capsys):
    assert main(["--config", config_file, "source", "nope"]) == 1
    assert "not found" in capsys.readouterr().err


def test_cli_bad_pattern_reports_error(config_file, capsys):
    assert main(["--config", config_file, "--mask-pattern", "((", "report"]) == 2
    assert "Invalid mask pattern" in capsys.readouterr().err


def test_cli_without_config_uses_environ(monkeypatch, capsys):
    monkeypatch.delenv("ENV_ENDPOINT_CONFIG", raising=False)
    monkeypatch.setenv("MY_SECRET", "s3cr3t")
    assert main(["--config", "", "--masking", "legacy", "source", "env"]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["properties"]["MY_SECRET"] == MASK_MARKER


def test_cli_invalid_utf8_config_reports_error(tmp_path, capsys):
    path = tmp_path / "endpoint.yml"
    path.write_bytes(b"env_endpoint: \xff\xfe\n")
    assert main(["--config", str(path), "report"]) == 2
    assert capsys.readouterr().err.startswith("error:")
