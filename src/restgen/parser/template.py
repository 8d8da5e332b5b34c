"""Parse path templates and endpoint names.

A path template such as ``/{index}/_alias/{name}`` is split into an ordered
sequence of :class:`~restgen.models.LiteralSegment` and
:class:`~restgen.models.ParamSegment` values.  From those segments the
generators derive everything they need:

* the parameter names in order of appearance (the path's *shape*),
* the literal fragments between the holes,
* a *hole template* for single-pass formatting, where the base address
  always fills the first ``{}``::

      >>> hole_template(parse_url_path("/{index}/_alias/{name}").segments)
      '{}/{}/_alias/{}'

Endpoint names (``cluster.put_settings``) are decomposed into module-path
segments by :func:`parse_mod_path`.
"""

from __future__ import annotations

import re
from typing import Sequence

from restgen.exceptions import ModPathParseError, SpecParseError
from restgen.models import LiteralSegment, ParamSegment, Segment, UrlPath

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def parse_segments(template: str) -> list[Segment]:
    """Split *template* into literal and parameter segments.

    Adjacent holes (``{a}{b}``) yield two consecutive parameter segments
    with no literal between them.  A template without any hole yields a
    single literal segment, so the empty template yields one empty literal.

    Args:
        template: Raw path template, e.g. ``"/{index}/_alias/{name}"``.
            A leading ``/`` is not required.

    Returns:
        The segments in template order.

    Raises:
        SpecParseError: On an unterminated ``{``, a stray ``}``, an empty or
            invalid parameter name, or a parameter used twice.
    """
    segments: list[Segment] = []
    seen: set[str] = set()
    literal: list[str] = []
    pos = 0

    while pos < len(template):
        char = template[pos]
        if char == "}":
            raise SpecParseError(
                f"Unbalanced '}}' at offset {pos} in path template {template!r}"
            )
        if char != "{":
            literal.append(char)
            pos += 1
            continue

        end = template.find("}", pos + 1)
        if end == -1:
            raise SpecParseError(
                f"Unterminated '{{' at offset {pos} in path template {template!r}"
            )
        name = template[pos + 1:end]
        if not name:
            raise SpecParseError(f"Empty parameter name in path template {template!r}")
        if not _IDENT_RE.match(name):
            raise SpecParseError(
                f"Invalid parameter name {name!r} in path template {template!r}"
            )
        if name in seen:
            raise SpecParseError(
                f"Parameter {name!r} appears more than once in path template {template!r}"
            )
        seen.add(name)

        if literal:
            segments.append(LiteralSegment(text="".join(literal)))
            literal = []
        segments.append(ParamSegment(name=name))
        pos = end + 1

    if literal or not segments:
        segments.append(LiteralSegment(text="".join(literal)))
    return segments


def parse_url_path(template: str) -> UrlPath:
    """Parse *template* into a :class:`~restgen.models.UrlPath`."""
    return UrlPath(template=template, segments=tuple(parse_segments(template)))


def parse_path_params(template: str) -> list[str]:
    """Return the parameter names of *template* in order of appearance.

    Example::

        >>> parse_path_params("/{index}/_alias/{name}")
        ['index', 'name']
    """
    return list(parse_url_path(template).params)


def parse_path_parts(template: str) -> list[str]:
    """Return the literal fragments of *template* in order.

    Example::

        >>> parse_path_parts("/{index}/_alias/{name}")
        ['/', '/_alias/']
    """
    return list(parse_url_path(template).literals)


def hole_template(segments: Sequence[Segment]) -> str:
    """Build the single-pass formatting template for *segments*.

    The first ``{}`` is reserved for the base address; every parameter
    segment contributes one further ``{}``.  Literal text never contains
    braces because the parser rejects them, so no escaping is required.
    """
    pieces = ["{}"]
    for segment in segments:
        if isinstance(segment, LiteralSegment):
            pieces.append(segment.text)
        else:
            pieces.append("{}")
    return "".join(pieces)


def parse_fmt(template: str) -> str:
    """Return the hole template for a raw path *template*."""
    return hole_template(parse_segments(template))


def parse_mod_path(name: str) -> list[str]:
    """Decompose an endpoint name into module-path segments.

    Example::

        >>> parse_mod_path("cluster.put_settings")
        ['cluster', 'put_settings']

    Raises:
        ModPathParseError: If *name* is empty or any dot-separated token is
            not a valid identifier.
    """
    if not name:
        raise ModPathParseError("Endpoint name is empty")
    tokens = name.split(".")
    for token in tokens:
        if not _IDENT_RE.match(token):
            raise ModPathParseError(
                f"Cannot use {token!r} from endpoint name {name!r} as an identifier"
            )
    return tokens
