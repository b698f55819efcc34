"""SDK error types and the process exit codes they map to."""

from __future__ import annotations

# argparse usage errors also exit with 1 or 2; input errors we catch ourselves use 1.
EXIT_CLI_INPUT_ERROR = 1
EXIT_JSON_PARSING_ERROR = 3
EXIT_FILE_IO_ERROR = 4
EXIT_HTTP_ERROR = 5
EXIT_CLI_GENERAL_ERROR = 7
EXIT_NOT_FOUND = 8
EXIT_SIGNATURE_INVALID = 9
EXIT_INTERNAL_ERROR = 99


class HznSDKError(RuntimeError):
    """Base SDK error."""

    exit_code = EXIT_INTERNAL_ERROR


class InputError(HznSDKError):
    """Invalid command-line or caller input."""

    exit_code = EXIT_CLI_INPUT_ERROR


class CredentialError(InputError):
    """No usable exchange credentials were found."""


class ParseError(HznSDKError):
    """JSON could not be parsed or did not match the expected shape."""

    exit_code = EXIT_JSON_PARSING_ERROR


class FileIOError(HznSDKError):
    """A file or stdin could not be read."""

    exit_code = EXIT_FILE_IO_ERROR


class HTTPError(HznSDKError):
    """HTTP-layer failure."""

    exit_code = EXIT_HTTP_ERROR


class TransportError(HTTPError):
    """The REST API could not be reached."""


class StatusError(HTTPError):
    """The REST API answered with a status code outside the acceptable set."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GeneralError(HznSDKError):
    """Generic command failure."""

    exit_code = EXIT_CLI_GENERAL_ERROR


class NotFoundError(HznSDKError):
    """Requested resource does not exist."""

    exit_code = EXIT_NOT_FOUND


class SignatureInvalidError(HznSDKError):
    """Signature validation failed."""

    exit_code = EXIT_SIGNATURE_INVALID


class InternalError(HznSDKError):
    """Unexpected internal failure."""

    exit_code = EXIT_INTERNAL_ERROR
