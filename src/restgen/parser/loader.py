"""Load endpoint descriptor documents from a directory, file, URL or stdin.

This module handles all I/O for fetching raw descriptor documents and
converting them into Python dictionaries.  It supports both JSON and YAML
formats with automatic format detection.

A descriptor *document* maps one (or, for bundles, several) endpoint names to
their descriptors::

    {"indices.put_alias": {"methods": ["PUT"], "url": {...}, "body": {...}}}

The public function is :func:`load_spec_documents`.  After loading, the
documents should be passed to
:func:`~restgen.parser.extractor.extract_endpoints`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from restgen.exceptions import SpecParseError

logger = logging.getLogger(__name__)

SPEC_SUFFIXES = (".json", ".yaml", ".yml")
"""File extensions picked up when loading a spec directory."""


def load_spec_documents(source: str) -> list[tuple[str, dict[str, Any]]]:
    """Load every descriptor document found at *source*.

    Directories are read file by file in sorted file-name order so that the
    endpoint order (and therefore the generated output) never depends on the
    file system's listing order.

    Args:
        source: A directory, a single file, an ``http(s)`` URL of a bundle
            document, or ``'-'`` for stdin.

    Returns:
        A list of ``(origin, document)`` pairs, where *origin* identifies the
        file or URL for error messages.

    Raises:
        SpecParseError: If the source cannot be loaded or any document cannot
            be parsed.  Loading is all-or-nothing.
    """
    if source == "-":
        return [("stdin", _load_from_stdin())]
    if source.startswith(("http://", "https://")):
        return [(source, _load_from_url(source))]

    path = Path(source)
    if path.is_dir():
        return _load_from_dir(path)
    return [(str(path), _load_from_file(path))]


def _load_from_dir(directory: Path) -> list[tuple[str, dict[str, Any]]]:
    """Load all descriptor files in *directory* (non-recursive)."""
    files = sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in SPEC_SUFFIXES
    )
    if not files:
        raise SpecParseError(f"No descriptor files found in {directory}")

    logger.debug("Loading %d descriptor files from %s", len(files), directory)
    return [(str(p), _load_from_file(p)) for p in files]


def _load_from_stdin() -> dict[str, Any]:
    """Read a descriptor document from stdin.

    Raises:
        SpecParseError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _parse_content(content, origin="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a bundle document from *url*. Supports JSON and YAML responses.

    Raises:
        SpecParseError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, origin=url, hint=hint)


def _load_from_file(path: Path) -> dict[str, Any]:
    """Load one descriptor document from a local file.

    Raises:
        SpecParseError: If the file cannot be read or content cannot be parsed.
    """
    if not path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    suffix = path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, origin=str(path), hint=hint)


def _parse_content(content: str, origin: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw string content.
        origin: File or URL the content came from, used in error messages.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        SpecParseError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
            if not isinstance(result, dict):
                raise SpecParseError(
                    f"Failed to parse {origin}: document must be an object (got "
                    f"{type(result).__name__})"
                )
            return result
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SpecParseError(f"Failed to parse {origin}: invalid JSON: {exc}") from exc

    try:
        result = yaml.safe_load(content)
        if not isinstance(result, dict):
            raise SpecParseError(
                f"Failed to parse {origin}: document must be an object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = f"Failed to parse {origin} as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecParseError(msg)
