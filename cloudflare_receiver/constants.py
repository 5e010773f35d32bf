# Defaults applied by the consumers of LogsSettings, never by the validator
DEFAULT_TIMESTAMP_FIELD = "EdgeStartTimestamp"
DEFAULT_TIMESTAMP_FORMAT = "rfc3339"
DEFAULT_SEPARATOR = "."

# Order matters: it is the order listed in error messages
TIMESTAMP_FORMATS = ("unix", "unixnano", "rfc3339")

ERR_NO_ENDPOINT = "an endpoint must be specified"
ERR_NO_CERT = "tls was configured, but no cert file was specified"
ERR_NO_KEY = "tls was configured, but no key file was specified"

SECRET_ENV_VAR = "CLOUDFLARE_RECEIVER_SECRET"
REDACTED = "[REDACTED]"

# Reasons reported by the host:port address parser
ERR_MISSING_PORT = "missing port in address"
ERR_TOO_MANY_COLONS = "too many colons in address"
ERR_MISSING_BRACKET = "missing ']' in address"
ERR_UNEXPECTED_OPEN_BRACKET = "unexpected '[' in address"
ERR_UNEXPECTED_CLOSE_BRACKET = "unexpected ']' in address"
