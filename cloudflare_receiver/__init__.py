"""Configuration gate for the Cloudflare Logpush receiver."""

from .settings import LogsSettings, ReceiverSettings, TLSSettings, with_defaults
from .validation import (
    ConfigValidationError,
    Problem,
    ProblemKind,
    ValidationOutcome,
    validate,
)

__all__ = [
    "ConfigValidationError",
    "LogsSettings",
    "Problem",
    "ProblemKind",
    "ReceiverSettings",
    "TLSSettings",
    "ValidationOutcome",
    "validate",
    "with_defaults",
]
