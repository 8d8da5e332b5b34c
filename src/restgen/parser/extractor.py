"""Extract endpoints from raw descriptor documents.

This module walks the dictionaries returned by
:func:`~restgen.parser.loader.load_spec_documents` and builds one
:class:`~restgen.models.Endpoint` per descriptor.

The single public entry point is :func:`extract_endpoints`.  Internally it
delegates to private helpers that each handle one section of a descriptor:

* ``_extract_methods`` -- the ``methods`` array, kept in declaration order.
* ``_extract_paths`` -- ``url.paths`` (or the legacy single ``url.path``),
  each parsed into a :class:`~restgen.models.UrlPath`.
* ``_extract_parts`` -- the ``url.parts`` map, with declared type names
  converted to :class:`~restgen.models.SpecType`.
* ``_extract_body`` -- the optional ``body`` object.

Every error names the document (file or URL) it came from.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from restgen.exceptions import SpecParseError
from restgen.models import (
    BodySpec,
    Endpoint,
    HttpMethod,
    SpecType,
    SpecTypeKind,
    UrlPath,
)
from restgen.parser.template import parse_url_path

logger = logging.getLogger(__name__)

_TYPE_NAMES: dict[str, SpecTypeKind] = {
    "boolean": SpecTypeKind.BOOL,
    "bool": SpecTypeKind.BOOL,
    "long": SpecTypeKind.LONG,
    "integer": SpecTypeKind.INT,
    "int": SpecTypeKind.INT,
    "short": SpecTypeKind.SHORT,
    "byte": SpecTypeKind.BYTE,
    "double": SpecTypeKind.DOUBLE,
    "float": SpecTypeKind.FLOAT,
    "string": SpecTypeKind.STR,
    "str": SpecTypeKind.STR,
    "text": SpecTypeKind.STR,
    "binary": SpecTypeKind.BIN,
    "bin": SpecTypeKind.BIN,
}


def extract_endpoints(documents: list[tuple[str, dict[str, Any]]]) -> list[Endpoint]:
    """Extract every endpoint declared across *documents*.

    Endpoints are returned in document order, and within a document in
    key order, so the result is reproducible for a given input.

    Args:
        documents: ``(origin, document)`` pairs as returned by
            :func:`~restgen.parser.loader.load_spec_documents`.

    Returns:
        The extracted endpoints.

    Raises:
        SpecParseError: If any descriptor is malformed or an endpoint name is
            declared twice.
    """
    endpoints: list[Endpoint] = []
    seen: dict[str, str] = {}

    for origin, document in documents:
        for name, descriptor in document.items():
            if name in seen:
                raise SpecParseError(
                    f"Endpoint '{name}' in {origin} is already declared in {seen[name]}"
                )
            seen[name] = origin
            endpoints.append(extract_endpoint(name, descriptor, origin))

    logger.debug("Extracted %d endpoints from %d documents", len(endpoints), len(documents))
    return endpoints


def extract_endpoint(name: str, descriptor: Any, origin: str = "<memory>") -> Endpoint:
    """Build a single :class:`~restgen.models.Endpoint` from its descriptor dict.

    Raises:
        SpecParseError: If the descriptor is structurally invalid.
    """
    where = f"endpoint '{name}' in {origin}"
    if not isinstance(descriptor, dict):
        raise SpecParseError(f"Failed to parse {where}: descriptor must be an object")

    url = descriptor.get("url")
    if not isinstance(url, dict):
        raise SpecParseError(f"Failed to parse {where}: missing 'url' object")

    try:
        paths = _extract_paths(url)
    except SpecParseError as exc:
        raise SpecParseError(f"Failed to parse {where}: {exc}") from exc

    return Endpoint(
        name=name,
        documentation=_extract_documentation(descriptor.get("documentation")),
        methods=tuple(_extract_methods(descriptor.get("methods"), where)),
        paths=tuple(paths),
        parts=_extract_parts(url.get("parts"), where),
        body=_extract_body(descriptor.get("body"), where),
        origin=origin,
    )


def _extract_documentation(value: Any) -> str:
    """Documentation is either a plain string or ``{"url": ..., "description": ...}``."""
    if value is None:
        return ""
    if isinstance(value, dict):
        return str(value.get("url") or value.get("description") or "")
    return str(value)


def _extract_methods(value: Any, where: str) -> list[HttpMethod]:
    """Read the ``methods`` array, dropping duplicates but keeping declaration order."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise SpecParseError(f"Failed to parse {where}: 'methods' must be a list")

    methods: list[HttpMethod] = []
    for raw in value:
        try:
            method = HttpMethod(str(raw).upper())
        except ValueError:
            raise SpecParseError(
                f"Failed to parse {where}: unsupported HTTP method {raw!r}"
            ) from None
        if method not in methods:
            methods.append(method)
    return methods


def _extract_paths(url: dict[str, Any]) -> list[UrlPath]:
    """Read ``url.paths`` (falling back to ``url.path``) and parse each template."""
    raw_paths = url.get("paths")
    if raw_paths is None:
        single = url.get("path")
        raw_paths = [single] if single is not None else []
    if not isinstance(raw_paths, list):
        raise SpecParseError("'url.paths' must be a list")
    if not raw_paths:
        raise SpecParseError("no url paths declared")

    paths: list[UrlPath] = []
    for raw in raw_paths:
        if not isinstance(raw, str):
            raise SpecParseError(f"path template must be a string (got {raw!r})")
        paths.append(parse_url_path(raw))
    return paths


def _extract_parts(value: Any, where: str) -> dict[str, SpecType]:
    """Read ``url.parts`` into a name -> :class:`SpecType` map."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SpecParseError(f"Failed to parse {where}: 'url.parts' must be an object")

    parts: dict[str, SpecType] = {}
    for part_name, part in value.items():
        declared = part.get("type") if isinstance(part, dict) else part
        parts[part_name] = spec_type_from_name(declared)
    return parts


def spec_type_from_name(declared: Optional[Any]) -> SpecType:
    """Convert a declared type name to a :class:`~restgen.models.SpecType`.

    Known scalar names map to their kind; any other non-empty name becomes
    ``OTHER(name)``.  A missing or empty name yields ``OTHER`` without a
    name, which the type mapper rejects.

    Example::

        >>> spec_type_from_name("long").kind
        <SpecTypeKind.LONG: 'long'>
        >>> spec_type_from_name("list")
        SpecType(kind=<SpecTypeKind.OTHER: 'other'>, name='list')
    """
    if declared is None or not str(declared).strip():
        return SpecType(kind=SpecTypeKind.OTHER)
    name = str(declared).strip()
    kind = _TYPE_NAMES.get(name.lower())
    if kind is not None:
        return SpecType(kind=kind)
    return SpecType(kind=SpecTypeKind.OTHER, name=name)


def _extract_body(value: Any, where: str) -> Optional[BodySpec]:
    """Read the optional ``body`` object; ``null`` means no payload slot."""
    if value is None:
        return None
    if not isinstance(value, dict):
        raise SpecParseError(f"Failed to parse {where}: 'body' must be an object or null")
    return BodySpec(
        required=bool(value.get("required", False)),
        description=str(value.get("description") or ""),
    )
