#!/usr/bin/env python3
"""Command line gate that checks a receiver configuration before startup."""

import argparse
import json
import logging
import sys
from os import environ
from pathlib import Path
from typing import Any, TypeVar, cast

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from cloudflare_receiver import constants
from cloudflare_receiver.settings import ReceiverSettings, with_defaults
from cloudflare_receiver.validation import validate


class Args(argparse.Namespace):
    config: Path | None
    endpoint: str | None
    secret: str | None
    tls_cert_file: str | None
    tls_key_file: str | None
    timestamp_field: str | None
    timestamp_format: str | None
    separator: str | None
    log_level: str
    rich_logs: bool
    print_config_and_exit: bool


class ConfigFileError(Exception):
    """Exception raised when the configuration file cannot be used."""


logger = logging.getLogger(__name__)


def parse_args() -> Args:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Validate the Cloudflare Logpush receiver configuration",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )

    # Configuration overrides (optional when using config file)
    parser.add_argument(
        "--endpoint",
        help="host:port the receiver listens on, e.g. 0.0.0.0:4318",
    )

    parser.add_argument(
        "--secret",
        help=f"Shared secret expected from Logpush. Also accepted in the {constants.SECRET_ENV_VAR} envvar.",
    )

    parser.add_argument(
        "--tls-cert-file",
        help="TLS certificate file; enables TLS",
    )

    parser.add_argument(
        "--tls-key-file",
        help="TLS key file; enables TLS",
    )

    parser.add_argument(
        "--timestamp-field",
        help=f"Log field holding the record timestamp (default when empty: {constants.DEFAULT_TIMESTAMP_FIELD})",
    )

    parser.add_argument(
        "--timestamp-format",
        help=f"One of {', '.join(constants.TIMESTAMP_FORMATS)} (default when empty: {constants.DEFAULT_TIMESTAMP_FORMAT})",
    )

    parser.add_argument(
        "--separator",
        help=f"Separator for nested attribute names (default when empty: '{constants.DEFAULT_SEPARATOR}')",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set the logging level",
    )

    parser.add_argument(
        "--rich-logs",
        action="store_true",
        help="Enable rich colored logging output",
    )

    parser.add_argument(
        "--print-config-and-exit",
        action="store_true",
        help="Print the resolved configuration as JSON and exit if it is valid",
    )

    return cast(Args, parser.parse_args())


def configure_logging(log_level: str, use_rich: bool = False) -> None:
    """Configure logging with optional rich formatting.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        use_rich: Whether to use rich colored logging
    """
    if use_rich:
        logging.basicConfig(
            level=getattr(logging, log_level),
            format="%(message)s",
            datefmt="[%X]",
            handlers=[
                RichHandler(
                    console=Console(stderr=True),
                    show_path=True,
                    show_time=True,
                    show_level=True,
                    markup=False,
                    rich_tracebacks=True,
                )
            ],
        )
    else:
        logging.basicConfig(
            level=getattr(logging, log_level),
            format="%(asctime)s [%(name)s:%(filename)s:%(lineno)d] %(levelname)s: %(message)s",
        )


T = TypeVar("T")


def first_not_none(*values: T | None) -> T | None:
    for v in values:
        if v is not None:
            return v
    return None


def load_config_file(path: Path) -> dict[str, Any]:
    """Load the YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration; an empty file yields an empty dict.

    Raises:
        ConfigFileError: If the file cannot be read or parsed, or its
            top level (or its `logs` section) is not a mapping.
    """
    logger.info("Loading configuration from %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
    except OSError as e:
        raise ConfigFileError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigFileError(f"Cannot parse {path}: {e}") from e

    if config_dict is None:
        return {}
    if not isinstance(config_dict, dict):
        raise ConfigFileError(f"{path} must contain a mapping at the top level")
    logs = config_dict.get("logs")
    if logs is not None and not isinstance(logs, dict):
        raise ConfigFileError(f"'logs' in {path} must be a mapping")
    return config_dict


def build_settings(args: Args, config_dict: dict[str, Any]) -> ReceiverSettings:
    """Merge command line, environment and file values into settings.

    Command line values win over the environment, which wins over the file.

    Raises:
        ConfigFileError: If the `logs` section is not a mapping.
        ValidationError: If the merged values do not fit the settings model.
    """
    logs = config_dict.get("logs")
    if logs is None:
        logs = {}
    elif not isinstance(logs, dict):
        raise ConfigFileError("'logs' must be a mapping")
    logs = dict(logs)

    overrides = {
        "endpoint": args.endpoint,
        "secret": first_not_none(args.secret, environ.get(constants.SECRET_ENV_VAR)),
        "timestamp_field": args.timestamp_field,
        "timestamp_format": args.timestamp_format,
        "separator": args.separator,
    }
    for key, value in overrides.items():
        if value is not None:
            logs[key] = value

    if args.tls_cert_file is not None or args.tls_key_file is not None:
        tls = logs.get("tls")
        tls = dict(tls) if isinstance(tls, dict) else {}
        if args.tls_cert_file is not None:
            tls["cert_file"] = args.tls_cert_file
        if args.tls_key_file is not None:
            tls["key_file"] = args.tls_key_file
        logs["tls"] = tls

    return ReceiverSettings.model_validate({**config_dict, "logs": logs})


def resolved_config(settings: ReceiverSettings) -> dict[str, Any]:
    """Return the configuration with defaults applied and the secret redacted."""
    logs = with_defaults(settings.logs).model_dump()
    if logs["secret"]:
        logs["secret"] = constants.REDACTED
    return {"logs": logs}


def main() -> int:
    """Main function."""
    args = parse_args()

    configure_logging(args.log_level, args.rich_logs)

    logger.info("Checking Cloudflare receiver configuration")

    try:
        config_dict = {}
        if args.config:
            config_dict = load_config_file(args.config)

        settings = build_settings(args, config_dict)
        outcome = validate(settings)

        if not outcome.ok:
            logger.error("Invalid config, %d problem(s) found", len(outcome.problems))
            for problem in outcome.problems:
                logger.error("%s", problem.message)
            return 1

        if args.print_config_and_exit:
            logger.info("Printing resolved configuration")
            print(json.dumps(resolved_config(settings), indent=2, sort_keys=True))
            return 0

        logger.info("Configuration is valid (endpoint: %s)", settings.logs.endpoint)

    except ConfigFileError as e:
        logger.error("Invalid config file: %s", e)
        return 1
    except ValidationError as e:
        logger.error(
            "Invalid config\n"
            + "\n".join(
                [
                    f"{'.'.join([str(loc) for loc in err['loc']])}: {err['msg']} (got {err['input']})"
                    for err in e.errors()
                ]
            )
        )
        return 1

    return 0


def cli() -> None:
    """Console script entrypoint."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
