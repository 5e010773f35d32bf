"""Shared pytest fixtures and configuration."""

import pytest
import tempfile
from pathlib import Path

from cloudflare_receiver.settings import LogsSettings, ReceiverSettings, TLSSettings


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def valid_logs_settings():
    """Logs settings that pass validation."""
    return LogsSettings(
        endpoint="0.0.0.0:4318",
        tls=TLSSettings(cert_file="/etc/receiver/cert.pem", key_file="/etc/receiver/key.pem"),
        secret="abc123",
        attributes={"ClientIP": "http_request.client_ip", "ClientRequestHost": "http_request.host"},
        timestamp_field="EdgeEndTimestamp",
        timestamp_format="unixnano",
        separator="_",
    )


@pytest.fixture
def valid_settings(valid_logs_settings):
    """Receiver settings that pass validation."""
    return ReceiverSettings(logs=valid_logs_settings)


@pytest.fixture
def config_file(temp_dir):
    """Write YAML content to a config file and return its path."""

    def _write(content: str) -> Path:
        path = temp_dir / "config.yaml"
        path.write_text(content)
        return path

    return _write
