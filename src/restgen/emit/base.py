"""Printer base class shared by every target language.

A printer turns a :class:`~restgen.ir.Module` into source text.  The walk
over namespaces and declarations is the same for every target; subclasses
supply the syntax of types, expressions, statements and declarations, plus
the identifier escaping rules of their language.

The fixed shared types (``Url``, ``Body``, ``HttpRequest``, ``HttpMethod``
and friends) and the text wrapper types are rendered from Jinja2 templates
under ``emit/templates/<target>/``.
"""

from __future__ import annotations

import abc
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from restgen import ir

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``emit/templates/``)."""

INDENT = "    "


def create_jinja_env() -> Environment:
    """Create the Jinja2 environment for the per-target templates.

    Source templates must never be HTML-escaped, so autoescape is disabled
    for the ``.py.j2`` and ``.rs.j2`` extensions.  Block trimming keeps the
    template markup out of the rendered code.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("py.j2", "rs.j2")),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def indent(text: str, levels: int = 1) -> str:
    """Indent every non-empty line of *text*."""
    prefix = INDENT * levels
    return "\n".join(prefix + line if line else line for line in text.split("\n"))


class Printer(abc.ABC):
    """Base class for target language printers.

    Subclasses must set :attr:`target`, :attr:`keywords` and
    :attr:`extension`, and implement the ``print_*`` hooks.
    """

    target: str = ""
    extension: str = ""
    keywords: frozenset[str] = frozenset()
    separator: str = "\n\n"
    """Text between top-level chunks."""

    def __init__(self) -> None:
        self._env = create_jinja_env()

    # -- identifiers --------------------------------------------------------

    def ident(self, name: str) -> str:
        """Return *name* escaped so it is a legal identifier in the target."""
        if name in self.keywords:
            return self.escape_keyword(name)
        return name

    @abc.abstractmethod
    def escape_keyword(self, name: str) -> str:
        """Turn the reserved word *name* into a usable identifier."""

    # -- module walk --------------------------------------------------------

    def print_module(self, module: ir.Module, comment_markers: bool = True) -> str:
        """Print *module* as a complete source file ending in one newline."""
        chunks: list[str] = []
        if comment_markers and module.banner:
            chunks.append(self.print_banner(module.banner))
        header = self.print_header()
        if header:
            chunks.append(header)
        for namespace in module.namespaces:
            chunks.append(self.print_namespace(namespace))
        return self.separator.join(chunk.strip("\n") for chunk in chunks) + "\n"

    def print_items(self, items: tuple[ir.Item, ...]) -> list[str]:
        """Print every declaration of a namespace, in order."""
        printed = []
        for item in items:
            if isinstance(item, ir.Function):
                printed.append(self.print_function(item))
            elif isinstance(item, ir.Record):
                printed.append(self.print_record(item))
            elif isinstance(item, ir.WrapperType):
                printed.append(self.print_wrapper(item))
            elif isinstance(item, ir.OpaqueType):
                printed.append(self.print_opaque(item))
            elif isinstance(item, ir.Prelude):
                printed.append(self.render(f"{self.target}/prelude.{self.extension}.j2"))
            else:
                raise TypeError(f"Cannot print {type(item).__name__}")
        return [chunk.strip("\n") for chunk in printed]

    def render(self, template: str, **context: Any) -> str:
        """Render one of this target's templates."""
        return self._env.get_template(template).render(**context)

    def print_header(self) -> str:
        """File header printed after the banner (imports and the like)."""
        return ""

    @abc.abstractmethod
    def print_banner(self, lines: tuple[str, ...]) -> str: ...

    @abc.abstractmethod
    def print_namespace(self, namespace: ir.Namespace) -> str: ...

    @abc.abstractmethod
    def print_function(self, function: ir.Function, record: str = "") -> str: ...

    @abc.abstractmethod
    def print_record(self, record: ir.Record) -> str: ...

    @abc.abstractmethod
    def print_wrapper(self, wrapper: ir.WrapperType) -> str: ...

    @abc.abstractmethod
    def print_opaque(self, opaque: ir.OpaqueType) -> str: ...
