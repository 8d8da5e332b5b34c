"""Exception hierarchy for restgen.

All exceptions inherit from :class:`RestgenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`restgen.exit_codes`.
The top-level error handler in :func:`restgen.app.main` catches
``RestgenError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Generation is all-or-nothing: every error below aborts the whole run and no
partial output is written.

Subclass hierarchy::

    RestgenError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- ConfigError            (exit 1)
    +-- SpecParseError         (exit 7)
    +-- ModPathParseError      (exit 9)
    +-- GenerationError        (exit 8)
        +-- TemplateMismatchError
        +-- VerbSelectionError
        +-- UnmappedTypeError
"""

from __future__ import annotations

from typing import Optional

from restgen.exit_codes import (
    EXIT_GENERATION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MOD_PATH_ERROR,
    EXIT_SPEC_PARSE_ERROR,
)


class RestgenError(Exception):
    """Base exception for all restgen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`restgen.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(RestgenError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(RestgenError):
    """Raised for configuration problems (missing or invalid ``restgen.json``)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecParseError(RestgenError):
    """Raised when a descriptor document is malformed.

    Covers unreadable files, invalid JSON/YAML, missing or mistyped fields
    and path templates that cannot be parsed.
    """

    exit_code = EXIT_SPEC_PARSE_ERROR


class ModPathParseError(RestgenError):
    """Raised when an endpoint name cannot be split into identifier segments."""

    exit_code = EXIT_MOD_PATH_ERROR


class GenerationError(RestgenError):
    """Base class for failures detected while generating code.

    Args:
        message: Human-readable error description.
        endpoint: Name of the endpoint being generated, when known. It is
            prefixed to the message so the offending descriptor is always
            identifiable.
    """

    exit_code = EXIT_GENERATION_ERROR

    def __init__(self, message: str, endpoint: Optional[str] = None):
        if endpoint:
            message = f"{endpoint}: {message}"
        super().__init__(message)
        self.endpoint = endpoint


class TemplateMismatchError(GenerationError):
    """Raised when the number of parameters does not match a template's holes."""


class VerbSelectionError(GenerationError):
    """Raised when an endpoint declares no HTTP method at all."""


class UnmappedTypeError(GenerationError):
    """Raised when a declared parameter type has no host mapping and no fallback."""
