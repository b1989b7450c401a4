"""Tests for pdrive CLI."""
import json
import logging

import httpx
import pytest

from pdrive.cli import _mask_token, _setup_logging, run_cli


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("PDRIVE_TOKEN", "PDRIVE_API_URL", "PDRIVE_CONCURRENT_REQUESTS", "LOG_LEVEL"):
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    yield tmp_path
    logging.disable(logging.NOTSET)


@pytest.fixture
def config_file(workdir):
    path = workdir / "config.json"
    path.write_text(
        json.dumps({"token": "secret", "api_url": "http://api.test/", "concurrent_requests": 2}),
        encoding="utf-8",
    )
    return path


def _server(status=200):
    requests = []

    def handler(request):
        requests.append(request)
        if request.url.path.startswith("/upload/"):
            if status == 401:
                return httpx.Response(401, text="bad jwt")
            if status == 400:
                return httpx.Response(400, text="Name already taken")
            return httpx.Response(200, text="x1/" + request.url.path.rsplit("/", 1)[-1])
        return httpx.Response(404)

    return httpx.MockTransport(handler), requests


def test_missing_env_file_exits(workdir, config_file, capsys):
    source = workdir / "photo.jpg"
    source.write_bytes(b"jpeg bytes")
    transport, requests = _server()

    code = run_cli(
        [str(source), "--config", str(config_file), "--env-file", str(workdir / "missing.env")],
        transport=transport,
    )

    assert code == 1
    assert "could not read env file" in capsys.readouterr().err
    assert requests == []


def test_setup_logging_defaults_to_silent():
    mode = _setup_logging(debug=False, silent=False, log_level=None)
    assert mode == "silent"
    assert logging.getLogger().isEnabledFor(logging.ERROR) is False
    logging.disable(logging.NOTSET)


def test_setup_logging_debug_mode():
    mode = _setup_logging(debug=True, silent=False, log_level=None)
    assert mode == "DEBUG"
    assert logging.getLogger().isEnabledFor(logging.DEBUG) is True
    logging.disable(logging.NOTSET)


def test_setup_logging_explicit_level():
    mode = _setup_logging(debug=False, silent=False, log_level="warning")
    assert mode == "WARNING"
    assert logging.getLogger().isEnabledFor(logging.INFO) is False
    logging.disable(logging.NOTSET)


def test_mask_token():
    assert _mask_token("abc") == "***"
    assert _mask_token("abcdefghijkl") == "abcd...ijkl"


def test_upload_prints_absolute_url(workdir, config_file, capsys):
    source = workdir / "photo.jpg"
    source.write_bytes(b"jpeg bytes")
    transport, requests = _server()

    code = run_cli([str(source), "--config", str(config_file), "--silent"], transport=transport)

    assert code == 0
    assert capsys.readouterr().out == "http://api.test/x1/photo.jpg\n"
    assert len(requests) == 1
    assert requests[0].headers["Authorization"] == "Bearer secret"


def test_upload_with_progress_output(workdir, config_file, capsys):
    source = workdir / "photo.jpg"
    source.write_bytes(b"jpeg bytes")
    transport, _ = _server()

    code = run_cli([str(source), "--config", str(config_file)], transport=transport)

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == "http://api.test/x1/photo.jpg\n"
    assert "Uploading..." in captured.err


def test_wrong_token_exits_non_zero(workdir, config_file, capsys):
    source = workdir / "photo.jpg"
    source.write_bytes(b"jpeg bytes")
    transport, _ = _server(status=401)

    code = run_cli([str(source), "--config", str(config_file), "--silent"], transport=transport)

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "Wrong token" in captured.err
    assert "bad jwt" not in captured.err


def test_bad_request_shows_server_message(workdir, config_file, capsys):
    source = workdir / "photo.jpg"
    source.write_bytes(b"jpeg bytes")
    transport, _ = _server(status=400)

    code = run_cli([str(source), "--config", str(config_file), "--silent"], transport=transport)

    assert code == 1
    assert "Name already taken" in capsys.readouterr().err


def test_missing_file_exits_before_network(workdir, config_file, capsys):
    transport, requests = _server()

    code = run_cli([str(workdir / "nope.bin"), "--config", str(config_file)], transport=transport)

    assert code == 1
    assert "does not exist" in capsys.readouterr().err
    assert requests == []


def test_unconfigured_api_exits(workdir, capsys):
    source = workdir / "photo.jpg"
    source.write_bytes(b"jpeg bytes")
    config_path = workdir / "fresh" / "config.json"
    transport, requests = _server()

    code = run_cli([str(source), "--config", str(config_path)], transport=transport)

    assert code == 1
    assert "api_url is not configured" in capsys.readouterr().err
    assert config_path.exists()
    assert requests == []


def test_env_file_supplies_credentials(workdir, capsys):
    source = workdir / "photo.jpg"
    source.write_bytes(b"jpeg bytes")
    (workdir / ".env").write_text(
        "PDRIVE_API_URL=http://api.test\nPDRIVE_TOKEN=from-env\n", encoding="utf-8"
    )
    transport, requests = _server()

    code = run_cli(
        [str(source), "--config", str(workdir / "config.json"), "--silent"],
        transport=transport,
    )

    assert code == 0
    assert requests[0].headers["Authorization"] == "Bearer from-env"
