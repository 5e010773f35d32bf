"""Startup validation of the receiver configuration.

`validate` runs every check and reports all problems it finds at once, so an
operator can fix a broken configuration in a single pass.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from cloudflare_receiver.constants import (
    ERR_MISSING_BRACKET,
    ERR_MISSING_PORT,
    ERR_NO_CERT,
    ERR_NO_ENDPOINT,
    ERR_NO_KEY,
    ERR_TOO_MANY_COLONS,
    ERR_UNEXPECTED_CLOSE_BRACKET,
    ERR_UNEXPECTED_OPEN_BRACKET,
    TIMESTAMP_FORMATS,
)
from cloudflare_receiver.settings import LogsSettings, ReceiverSettings


class ProblemKind(str, Enum):
    """Kinds of configuration problems."""

    MISSING_ENDPOINT = "missing_endpoint"
    INVALID_TIMESTAMP_FORMAT = "invalid_timestamp_format"
    INCOMPLETE_TLS = "incomplete_tls"
    MALFORMED_ENDPOINT_SYNTAX = "malformed_endpoint_syntax"


class Problem(BaseModel):
    """A single configuration defect."""

    model_config = ConfigDict(frozen=True)

    kind: ProblemKind
    message: str

    def __str__(self) -> str:
        return self.message


class ConfigValidationError(Exception):
    """Exception raised when a configuration has one or more problems."""

    def __init__(self, problems: tuple[Problem, ...]):
        self.problems = problems
        super().__init__("; ".join(p.message for p in problems))


class ValidationOutcome(BaseModel):
    """Result of `validate`: success, or the ordered problems found."""

    model_config = ConfigDict(frozen=True)

    problems: tuple[Problem, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.problems

    @property
    def messages(self) -> list[str]:
        return [p.message for p in self.problems]

    def with_problem(self, problem: Problem) -> "ValidationOutcome":
        """Return a new outcome with `problem` appended."""
        return ValidationOutcome(problems=self.problems + (problem,))

    def raise_for_problems(self) -> None:
        """Raise `ConfigValidationError` unless the outcome is a success.

        Raises:
            ConfigValidationError: Carrying every problem, in check order.
        """
        if self.problems:
            raise ConfigValidationError(self.problems)


VALID = ValidationOutcome()


class AddressError(ValueError):
    """Exception raised when an address cannot be split into host and port."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"address {address}: {reason}")


def split_host_port(address: str) -> tuple[str, str]:
    """Split a `host:port` address on its rightmost colon.

    Hosts containing colons (IPv6 literals) must be enclosed in brackets,
    e.g. `[::1]:4318`. Empty hosts and empty ports are accepted and the port
    is not required to be numeric.

    Args:
        address: Address to split.

    Returns:
        Tuple of (host, port) with brackets removed from the host.

    Raises:
        AddressError: If the address does not follow the `host:port` syntax.
    """
    i = address.rfind(":")
    if i < 0:
        raise AddressError(address, ERR_MISSING_PORT)

    # positions before which no '[' resp. ']' is allowed
    j, k = 0, 0
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise AddressError(address, ERR_MISSING_BRACKET)
        if end + 1 == len(address):
            raise AddressError(address, ERR_MISSING_PORT)
        if end + 1 != i:
            # ']' is not followed by the last colon
            if address[end + 1] == ":":
                raise AddressError(address, ERR_TOO_MANY_COLONS)
            raise AddressError(address, ERR_MISSING_PORT)
        host = address[1:end]
        j, k = 1, end + 1
    else:
        host = address[:i]
        if ":" in host:
            raise AddressError(address, ERR_TOO_MANY_COLONS)

    if "[" in address[j:]:
        raise AddressError(address, ERR_UNEXPECTED_OPEN_BRACKET)
    if "]" in address[k:]:
        raise AddressError(address, ERR_UNEXPECTED_CLOSE_BRACKET)

    return host, address[i + 1 :]


def validate(config: ReceiverSettings | LogsSettings) -> ValidationOutcome:
    """Check that the receiver can be started with `config`.

    All checks run regardless of earlier failures. The only check that is
    skipped is the endpoint syntax check when there is no endpoint at all.

    Args:
        config: Receiver settings, or just their `logs` section.

    Returns:
        `VALID`, or an outcome carrying every problem found.
    """
    logs = config.logs if isinstance(config, ReceiverSettings) else config
    outcome = VALID

    if not logs.endpoint:
        outcome = outcome.with_problem(
            Problem(kind=ProblemKind.MISSING_ENDPOINT, message=ERR_NO_ENDPOINT)
        )

    if logs.timestamp_format and logs.timestamp_format not in TIMESTAMP_FORMATS:
        outcome = outcome.with_problem(
            Problem(
                kind=ProblemKind.INVALID_TIMESTAMP_FORMAT,
                message=(
                    f'invalid timestamp_format "{logs.timestamp_format}", '
                    f"must be one of: {', '.join(TIMESTAMP_FORMATS)}"
                ),
            )
        )

    if logs.tls is not None:
        if not logs.tls.key_file:
            outcome = outcome.with_problem(
                Problem(kind=ProblemKind.INCOMPLETE_TLS, message=ERR_NO_KEY)
            )
        if not logs.tls.cert_file:
            outcome = outcome.with_problem(
                Problem(kind=ProblemKind.INCOMPLETE_TLS, message=ERR_NO_CERT)
            )

    if logs.endpoint:
        try:
            split_host_port(logs.endpoint)
        except AddressError as e:
            outcome = outcome.with_problem(
                Problem(
                    kind=ProblemKind.MALFORMED_ENDPOINT_SYNTAX,
                    message=f"failed to split endpoint into 'host:port' pair: {e}",
                )
            )

    return outcome
