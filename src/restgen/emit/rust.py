"""Print the generated-code IR as a Rust source file.

The ``requests`` and ``params`` namespaces become ``pub mod`` blocks and
``requests`` glob-imports ``params``.  Every type is owned: ``Url`` and the
url part wrappers hold a ``String`` and deref to ``str``, so URL functions
borrow them and constructors hand back a self-contained request.  PushStyle
URL functions allocate with ``String::with_capacity`` and append with
``push_str``.

Identifiers that are Rust keywords get a leading underscore (``type`` ->
``_type``).
"""

from __future__ import annotations

from restgen import ir
from restgen.emit.base import INDENT, Printer, indent
from restgen.models import HostKind, HostType


RUST_KEYWORDS = frozenset({
    "as", "async", "await", "break", "const", "continue", "crate", "dyn",
    "else", "enum", "extern", "false", "fn", "for", "if", "impl", "in",
    "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
    "self", "Self", "static", "struct", "super", "trait", "true", "type",
    "unsafe", "use", "where", "while", "abstract", "become", "box", "do",
    "final", "macro", "override", "priv", "typeof", "unsized", "virtual",
    "yield", "try",
})

_HOST_TYPES: dict[HostKind, str] = {
    HostKind.BOOL: "bool",
    HostKind.I64: "i64",
    HostKind.I32: "i32",
    HostKind.I16: "i16",
    HostKind.U8: "u8",
    HostKind.F32: "f32",
    HostKind.TEXT: "String",
    HostKind.BYTES: "Vec<u8>",
}

_BORROWED_HOST_TYPES: dict[HostKind, str] = {
    HostKind.TEXT: "&str",
    HostKind.BYTES: "&[u8]",
}

DERIVES = "#[derive(Debug, PartialEq, Clone)]"


class RustPrinter(Printer):
    """Printer for Rust (2018 edition and later) source."""

    target = "rust"
    extension = "rs"
    keywords = RUST_KEYWORDS

    def escape_keyword(self, name: str) -> str:
        return "_" + name

    # -- file layout --------------------------------------------------------

    def print_banner(self, lines: tuple[str, ...]) -> str:
        return "/*\n{}\n*/".format("\n".join(lines))

    def print_namespace(self, namespace: ir.Namespace) -> str:
        chunks = [
            "\n".join(f"use super::{self.ident(use)}::*;" for use in namespace.uses)
        ] if namespace.uses else []
        chunks.extend(self.print_items(namespace.items))
        body = indent("\n\n".join(chunks))
        return f"pub mod {self.ident(namespace.name)} {{\n{body}\n}}"

    # -- declarations -------------------------------------------------------

    def print_function(self, function: ir.Function, record: str = "") -> str:
        params = [f"{self.ident(p.name)}: {self.type_ref(p.type)}" for p in function.params]
        if function.kind == ir.FnKind.METHOD:
            params.insert(0, "self")

        lines = _doc_lines(function.doc)
        lines.append(
            "pub fn {}({}) -> {} {{".format(
                self.ident(function.name), ", ".join(params), self.type_ref(function.returns)
            )
        )
        lines.append(indent("\n".join(self.stmt(s) for s in function.body)))
        lines.append("}")
        return "\n".join(lines)

    def print_record(self, record: ir.Record) -> str:
        name = self.ident(record.name)
        lines = _doc_lines(record.doc)
        lines.append(DERIVES)
        lines.append(f"pub struct {name} {{")
        for fld in record.fields:
            lines.append(f"{INDENT}pub {self.ident(fld.name)}: {self.type_ref(fld.type)},")
        lines.append("}")

        if record.functions:
            functions = "\n\n".join(self.print_function(f, name) for f in record.functions)
            lines.append("")
            lines.append(f"impl {name} {{\n{indent(functions)}\n}}")
        return "\n".join(lines)

    def print_wrapper(self, wrapper: ir.WrapperType) -> str:
        conversions = []
        for host in wrapper.hosts:
            if host.kind == HostKind.TEXT:
                continue
            conversions.append({"type": self._host(host), "expr": _conversion(host)})
        return self.render("rust/wrapper.rs.j2", name=self.ident(wrapper.name),
                           conversions=conversions, doc=wrapper.doc)

    def print_opaque(self, opaque: ir.OpaqueType) -> str:
        return self.render("rust/wrapper.rs.j2", name=self.ident(opaque.name),
                           conversions=[], doc=opaque.doc)

    # -- types --------------------------------------------------------------

    def type_ref(self, ref: ir.TypeRef) -> str:
        if isinstance(ref, ir.HostRef):
            if ref.borrowed and ref.host.kind in _BORROWED_HOST_TYPES:
                return _BORROWED_HOST_TYPES[ref.host.kind]
            prefix = "&" if ref.borrowed and ref.host.kind == HostKind.OPAQUE else ""
            return prefix + self._host(ref.host)
        if isinstance(ref, ir.NamedType):
            name = self.ident(ref.name)
            if ref.optional:
                return f"Option<{name}>"
            return f"&{name}" if ref.borrowed else name
        return "Self"

    def _host(self, host: HostType) -> str:
        if host.kind == HostKind.OPAQUE:
            return self.ident(host.name or "")
        return _HOST_TYPES[host.kind]

    # -- statements and expressions ----------------------------------------

    def stmt(self, stmt: ir.Stmt) -> str:
        if isinstance(stmt, ir.Let):
            mut = "mut " if stmt.mutable else ""
            return f"let {mut}{self.ident(stmt.name)} = {self.expr(stmt.value)};"
        if isinstance(stmt, ir.BufferPush):
            return f"{self.ident(stmt.buffer)}.push_str({self.expr(stmt.value)});"
        if isinstance(stmt, ir.Return):
            return self.expr(stmt.value)
        raise TypeError(f"Cannot print statement {type(stmt).__name__}")

    def expr(self, expr: ir.Expr) -> str:
        if isinstance(expr, ir.Lit):
            if isinstance(expr.value, str):
                return _string_literal(expr.value)
            return "None" if expr.value is None else str(expr.value)
        if isinstance(expr, ir.Name):
            return self.ident(expr.ident)
        if isinstance(expr, ir.SelfRef):
            return "self"
        if isinstance(expr, ir.Attr):
            return f"{self.expr(expr.value)}.{self.ident(expr.attr)}"
        if isinstance(expr, ir.Length):
            if isinstance(expr.value, ir.Lit) and isinstance(expr.value.value, str):
                # String::len counts UTF-8 bytes
                return str(len(expr.value.value.encode("utf-8")))
            return f"{self.expr(expr.value)}.len()"
        if isinstance(expr, ir.Add):
            return f"{self.expr(expr.left)} + {self.expr(expr.right)}"
        if isinstance(expr, ir.Call):
            return f"{self.ident(expr.func)}({self._args(expr.args)})"
        if isinstance(expr, ir.Format):
            return f"format!({_string_literal(expr.template)}, {self._args(expr.args)})"
        if isinstance(expr, ir.Convert):
            return f"{self.ident(expr.type_name)}::from({self.expr(expr.value)})"
        if isinstance(expr, ir.Construct):
            fields = []
            for key, value in expr.fields:
                printed = self.expr(value)
                key = self.ident(key)
                fields.append(f"{key}," if printed == key else f"{key}: {printed},")
            return "{} {{\n{}\n}}".format(self.type_ref(expr.type), indent("\n".join(fields)))
        if isinstance(expr, ir.EnumMember):
            return f"{self.ident(expr.enum)}::{expr.member.capitalize()}"
        if isinstance(expr, ir.Some):
            return f"Some({self.expr(expr.value)})"
        if isinstance(expr, ir.BufferNew):
            return f"String::with_capacity({self.expr(expr.capacity)})"
        if isinstance(expr, ir.BufferFinish):
            return self.expr(expr.buffer)
        raise TypeError(f"Cannot print expression {type(expr).__name__}")

    def _args(self, args: tuple[ir.Expr, ...]) -> str:
        return ", ".join(self.expr(a) for a in args)


_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _conversion(host: HostType) -> str:
    """Rust expression turning ``value`` of *host* type into a ``String``."""
    if host.kind == HostKind.BYTES:
        return "String::from_utf8_lossy(&value).into_owned()"
    if host.kind == HostKind.OPAQUE:
        return "value.0"
    return "value.to_string()"


def _doc_lines(doc: str) -> list[str]:
    if not doc:
        return []
    return [f"/// {line}".rstrip() for line in doc.splitlines()]


def _string_literal(text: str) -> str:
    """Rust string literal for *text*."""
    out = []
    for char in text:
        if char in "\"\\":
            out.append("\\" + char)
        elif char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif ord(char) < 0x20:
            out.append(f"\\u{{{ord(char):x}}}")
        else:
            out.append(char)
    return "\"" + "".join(out) + "\""
