"""Map declared descriptor types to host types.

**Mapping rules:**

* The fixed scalar kinds map directly: ``bool`` to ``BOOL``, ``long`` to
  ``I64``, ``int`` to ``I32``, ``short`` to ``I16``, ``byte`` to ``U8``,
  ``double`` and ``float`` to ``F32``, ``str`` to ``TEXT`` and ``bin`` to
  ``BYTES``.
* ``OTHER(name)`` falls back to an opaque wrapper type named after the
  declared name in PascalCase (``list`` -> ``List``, ``date-time`` ->
  ``DateTime``).
* Anything else -- including ``OTHER`` without a usable name -- is an
  :class:`~restgen.exceptions.UnmappedTypeError`.  Types are never dropped
  silently.

Printers turn :class:`~restgen.models.HostType` into concrete target
syntax; this module knows nothing about any target language.
"""

from __future__ import annotations

import re
from typing import Optional

from restgen.exceptions import UnmappedTypeError
from restgen.models import HostKind, HostType, SpecType, SpecTypeKind


_SCALAR_MAP: dict[SpecTypeKind, HostKind] = {
    SpecTypeKind.BOOL: HostKind.BOOL,
    SpecTypeKind.LONG: HostKind.I64,
    SpecTypeKind.INT: HostKind.I32,
    SpecTypeKind.SHORT: HostKind.I16,
    SpecTypeKind.BYTE: HostKind.U8,
    SpecTypeKind.DOUBLE: HostKind.F32,
    SpecTypeKind.FLOAT: HostKind.F32,
    SpecTypeKind.STR: HostKind.TEXT,
    SpecTypeKind.BIN: HostKind.BYTES,
}

TEXT = HostType(kind=HostKind.TEXT)
"""The host type of undeclared path parameters."""

_WORD_RE = re.compile(r"[A-Za-z0-9]+")


def map_type(spec_type: SpecType, endpoint: Optional[str] = None) -> HostType:
    """Map *spec_type* to its :class:`~restgen.models.HostType`.

    Args:
        spec_type: The declared type.
        endpoint: Endpoint being generated, only used in error messages.

    Raises:
        UnmappedTypeError: If the type has no mapping and no fallback.

    Example::

        >>> map_type(SpecType(kind=SpecTypeKind.LONG))
        HostType(kind=<HostKind.I64: 'i64'>, name=None)
        >>> map_type(SpecType(kind=SpecTypeKind.OTHER, name="list"))
        HostType(kind=<HostKind.OPAQUE: 'opaque'>, name='List')
    """
    kind = _SCALAR_MAP.get(spec_type.kind)
    if kind is not None:
        return HostType(kind=kind)

    if spec_type.kind == SpecTypeKind.OTHER:
        wrapper = pascal_case(spec_type.name or "")
        if wrapper and not wrapper[0].isdigit():
            return HostType(kind=HostKind.OPAQUE, name=wrapper)
        raise UnmappedTypeError(
            f"declared type {spec_type.name!r} cannot be turned into a type name",
            endpoint=endpoint,
        )

    raise UnmappedTypeError(
        f"no host mapping for type kind '{spec_type.kind.value}'", endpoint=endpoint
    )


def pascal_case(name: str) -> str:
    """Convert ``snake_case``, ``dot.case`` or ``kebab-case`` to PascalCase.

    Example::

        >>> pascal_case("indices.put_alias")
        'IndicesPutAlias'
        >>> pascal_case("date-time")
        'DateTime'
    """
    return "".join(word[:1].upper() + word[1:] for word in _WORD_RE.findall(name))
