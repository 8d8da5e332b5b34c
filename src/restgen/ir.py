"""Target-agnostic intermediate representation of generated code.

The generators never produce source text directly.  They build a small tree
of the nodes below, and one printer per target language
(:mod:`restgen.emit.python`, :mod:`restgen.emit.rust`) turns the tree into
text.  The node set is deliberately narrow: it covers exactly what URL
builders and request descriptors need.

Expressions
    :class:`Lit`, :class:`Name`, :class:`SelfRef`, :class:`Attr`,
    :class:`Length`, :class:`Add`, :class:`Call`, :class:`Format`,
    :class:`Convert`, :class:`Construct`, :class:`EnumMember`,
    :class:`Some`, :class:`BufferNew`, :class:`BufferFinish`

Statements
    :class:`Let`, :class:`BufferPush`, :class:`Return`

Declarations
    :class:`Function`, :class:`Record`, :class:`WrapperType`,
    :class:`OpaqueType`, :class:`Prelude`, :class:`Namespace`,
    :class:`Module`

Types
    :class:`HostRef`, :class:`NamedType`, :class:`SelfType`
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union

from restgen.models import HostType


# --- Types ---


@dataclass(frozen=True)
class HostRef:
    """A host type, e.g. text; ``borrowed`` marks by-reference parameters."""

    host: HostType
    borrowed: bool = False


@dataclass(frozen=True)
class NamedType:
    """A generated or shared type referenced by name."""

    name: str
    borrowed: bool = False
    optional: bool = False


@dataclass(frozen=True)
class SelfType:
    """The enclosing record type."""


TypeRef = Union[HostRef, NamedType, SelfType]


# --- Expressions ---


@dataclass(frozen=True)
class Lit:
    """A string, integer or ``None`` literal."""

    value: Union[str, int, None]


@dataclass(frozen=True)
class Name:
    """A parameter or local variable."""

    ident: str


@dataclass(frozen=True)
class SelfRef:
    """The receiver of a method."""


@dataclass(frozen=True)
class Attr:
    value: "Expr"
    attr: str


@dataclass(frozen=True)
class Length:
    """The runtime length of a text value."""

    value: "Expr"


@dataclass(frozen=True)
class Add:
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class Call:
    """A call of a free function by name."""

    func: str
    args: tuple["Expr", ...] = ()


@dataclass(frozen=True)
class Format:
    """A single formatting call filling the ``{}`` holes of ``template`` in order."""

    template: str
    args: tuple["Expr", ...] = ()


@dataclass(frozen=True)
class Convert:
    """Conversion of a value into a named type."""

    type_name: str
    value: "Expr"


@dataclass(frozen=True)
class Construct:
    """Construction of a record from named field values."""

    type: TypeRef
    fields: tuple[tuple[str, "Expr"], ...] = ()


@dataclass(frozen=True)
class EnumMember:
    enum: str
    member: str


@dataclass(frozen=True)
class Some:
    """A present optional value."""

    value: "Expr"


@dataclass(frozen=True)
class BufferNew:
    """A text buffer allocated once with an exact ``capacity``."""

    capacity: "Expr"


@dataclass(frozen=True)
class BufferFinish:
    """The text accumulated in a buffer."""

    buffer: "Expr"


Expr = Union[
    Lit, Name, SelfRef, Attr, Length, Add, Call, Format, Convert,
    Construct, EnumMember, Some, BufferNew, BufferFinish,
]


# --- Statements ---


@dataclass(frozen=True)
class Let:
    name: str
    value: Expr
    mutable: bool = False


@dataclass(frozen=True)
class BufferPush:
    """Append ``value`` to ``buffer``."""

    buffer: str
    value: Expr


@dataclass(frozen=True)
class Return:
    value: Expr


Stmt = Union[Let, BufferPush, Return]


# --- Declarations ---


class FnKind(str, enum.Enum):
    """Free function, associated constructor or method taking the receiver."""

    FREE = "free"
    CTOR = "ctor"
    METHOD = "method"


@dataclass(frozen=True)
class Param:
    name: str
    type: TypeRef
    default_none: bool = False


@dataclass(frozen=True)
class Function:
    name: str
    params: tuple[Param, ...]
    returns: TypeRef
    body: tuple[Stmt, ...]
    kind: FnKind = FnKind.FREE
    doc: str = ""


@dataclass(frozen=True)
class Field:
    name: str
    type: TypeRef


@dataclass(frozen=True)
class Record:
    """A request descriptor type with its constructors and methods."""

    name: str
    fields: tuple[Field, ...]
    functions: tuple[Function, ...] = ()
    doc: str = ""


@dataclass(frozen=True)
class WrapperType:
    """A text wrapper for a url part, convertible from each of ``hosts``."""

    name: str
    hosts: tuple[HostType, ...] = ()
    doc: str = ""


@dataclass(frozen=True)
class OpaqueType:
    """A text wrapper built from an undeclared (``OTHER``) type name."""

    name: str
    doc: str = ""


@dataclass(frozen=True)
class Prelude:
    """The fixed shared types every target defines (url, body, request, method)."""


Item = Union[Function, Record, WrapperType, OpaqueType, Prelude]


@dataclass(frozen=True)
class Namespace:
    """A top-level namespace; ``uses`` names the namespaces it depends on."""

    name: str
    items: tuple[Item, ...] = ()
    uses: tuple[str, ...] = ()


@dataclass(frozen=True)
class Module:
    """A complete generated source file."""

    namespaces: tuple[Namespace, ...]
    banner: tuple[str, ...] = field(default_factory=tuple)
