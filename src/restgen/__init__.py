"""restgen -- compile REST API endpoint descriptors into request-building source code.

This package reads a directory of endpoint descriptor documents (one endpoint
per file: path templates, HTTP methods, url parts and an optional body) and
emits source code that assembles request URLs and typed request objects.

Typical workflow::

    restgen generate --spec ./spec --output requests.py
    restgen generate --spec ./spec --target rust --strategy format

The pipeline is a deterministic batch compiler: identical descriptors and an
identical generation policy produce byte-identical output.

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    ir: Target-agnostic intermediate representation of generated code.
    config: Project configuration loading and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
