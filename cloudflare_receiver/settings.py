"""Configuration model of the Cloudflare Logpush receiver.

The models only describe shape. Whether the values make sense together is
decided by `cloudflare_receiver.validation.validate`, so an incomplete
configuration can still be built and reported on in full.
"""

from pydantic import BaseModel, ConfigDict, Field

from cloudflare_receiver.constants import (
    DEFAULT_SEPARATOR,
    DEFAULT_TIMESTAMP_FIELD,
    DEFAULT_TIMESTAMP_FORMAT,
)


class TLSSettings(BaseModel):
    """TLS material for the HTTPS listener.

    Only `cert_file` and `key_file` are checked before startup; the remaining
    fields are handed to the listener as they are.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    cert_file: str = ""
    key_file: str = ""
    ca_file: str = ""
    client_ca_file: str = ""
    min_version: str = ""
    max_version: str = ""


class LogsSettings(BaseModel):
    """Settings of the logs endpoint.

    Settings are immutable per runtime and must be built from keyword
    arguments; positional construction raises `TypeError`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    endpoint: str = ""
    tls: TLSSettings | None = None
    secret: str = ""
    # provider field name -> output attribute name
    attributes: dict[str, str] = Field(default_factory=dict)

    # Empty means "use the default", see with_defaults()
    timestamp_field: str = ""
    timestamp_format: str = ""
    separator: str = ""


class ReceiverSettings(BaseModel):
    """Receiver settings loaded from YAML configuration files."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    logs: LogsSettings = Field(default_factory=LogsSettings)


def with_defaults(logs: LogsSettings) -> LogsSettings:
    """Return a copy of `logs` with the documented defaults filled in.

    Args:
        logs: Settings as loaded, possibly with empty optional fields.

    Returns:
        New settings; `logs` itself is left untouched.
    """
    return logs.model_copy(
        update={
            "timestamp_field": logs.timestamp_field or DEFAULT_TIMESTAMP_FIELD,
            "timestamp_format": logs.timestamp_format or DEFAULT_TIMESTAMP_FORMAT,
            "separator": logs.separator or DEFAULT_SEPARATOR,
        }
    )
