"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~restgen.exceptions.RestgenError` subclass.
Build scripts can inspect the exit code to determine the failure class
without parsing stderr.

Example::

    $ restgen generate --spec ./spec
    $ echo $?
    7   # EXIT_SPEC_PARSE_ERROR -- a descriptor document was malformed
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SPEC_PARSE_ERROR = 7
"""A descriptor document could not be loaded or parsed."""

EXIT_GENERATION_ERROR = 8
"""Code generation failed (template mismatch, verb selection, unmapped type)."""

EXIT_MOD_PATH_ERROR = 9
"""An endpoint name could not be decomposed into module-path segments."""
