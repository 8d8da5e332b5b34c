"""Print the generated-code IR as a Python module.

The whole output is one importable module.  The ``requests`` and ``params``
namespaces become comment-delimited sections, request records become frozen
dataclasses with ``classmethod`` constructors, and every wrapper type is a
``str`` subclass.  PushStyle URL functions assemble the URL in a
``UrlBuffer`` from the prelude, which refuses to overflow its capacity and
to finish before it is exactly full.

Identifiers that are Python keywords get a trailing underscore (``class``
-> ``class_``), the same rule :pep:`8` recommends for parameters.
"""

from __future__ import annotations

import json
import keyword

from restgen import ir
from restgen.emit.base import Printer, indent
from restgen.models import HostKind, HostType


_HOST_TYPES: dict[HostKind, str] = {
    HostKind.BOOL: "bool",
    HostKind.I64: "int",
    HostKind.I32: "int",
    HostKind.I16: "int",
    HostKind.U8: "int",
    HostKind.F32: "float",
    HostKind.TEXT: "str",
    HostKind.BYTES: "bytes",
}


class PythonPrinter(Printer):
    """Printer for Python 3 source."""

    target = "python"
    extension = "py"
    # ``len`` is called by the generated url functions.
    keywords = frozenset(keyword.kwlist) | {"len"}
    separator = "\n\n\n"

    def escape_keyword(self, name: str) -> str:
        return name + "_"

    # -- file layout --------------------------------------------------------

    def print_banner(self, lines: tuple[str, ...]) -> str:
        return "\n".join(f"# {line}" if line else "#" for line in lines)

    def print_header(self) -> str:
        return self.render("python/header.py.j2")

    def print_namespace(self, namespace: ir.Namespace) -> str:
        chunks = [f"# --- {namespace.name} ---"]
        chunks.extend(self.print_items(namespace.items))
        return self.separator.join(chunks)

    # -- declarations -------------------------------------------------------

    def print_function(self, function: ir.Function, record: str = "") -> str:
        params = [self._param(p, record) for p in function.params]
        lines = []
        if function.kind == ir.FnKind.CTOR:
            lines.append("@classmethod")
            params.insert(0, "cls")
        elif function.kind == ir.FnKind.METHOD:
            params.insert(0, "self")

        returns = self.type_ref(function.returns, record)
        lines.append(f"def {self.ident(function.name)}({', '.join(params)}) -> {returns}:")

        body = []
        if function.doc:
            body.append(_docstring(function.doc))
        body.extend(self.stmt(s) for s in function.body)
        lines.append(indent("\n".join(body)))
        return "\n".join(lines)

    def print_record(self, record: ir.Record) -> str:
        name = self.ident(record.name)
        body = []
        if record.doc:
            body.append(_docstring(record.doc) + "\n")
        for fld in record.fields:
            line = f"{self.ident(fld.name)}: {self.type_ref(fld.type, name)}"
            if isinstance(fld.type, ir.NamedType) and fld.type.optional:
                line += " = None"
            body.append(line)
        for function in record.functions:
            body.append("\n" + self.print_function(function, name))

        return "@dataclass(frozen=True)\nclass {}:\n{}".format(name, indent("\n".join(body)))

    def print_wrapper(self, wrapper: ir.WrapperType) -> str:
        accepts = ["str"]
        for host in wrapper.hosts:
            type_name = self._host(host)
            if type_name not in accepts:
                accepts.append(type_name)
        return self.render(
            "python/wrapper.py.j2",
            name=self.ident(wrapper.name),
            accepts=accepts,
            doc=wrapper.doc or f"Url part value, built from {', '.join(accepts)}.",
        )

    def print_opaque(self, opaque: ir.OpaqueType) -> str:
        return self.render(
            "python/wrapper.py.j2",
            name=self.ident(opaque.name),
            accepts=["str"],
            doc=opaque.doc or f"Text form of a ``{opaque.name}`` value.",
        )

    # -- types --------------------------------------------------------------

    def type_ref(self, ref: ir.TypeRef, record: str = "") -> str:
        if isinstance(ref, ir.HostRef):
            return self._host(ref.host)
        if isinstance(ref, ir.NamedType):
            name = self.ident(ref.name)
            return f"Optional[{name}]" if ref.optional else name
        return record

    def _host(self, host: HostType) -> str:
        if host.kind == HostKind.OPAQUE:
            return self.ident(host.name or "")
        return _HOST_TYPES[host.kind]

    def _param(self, param: ir.Param, record: str) -> str:
        text = f"{self.ident(param.name)}: {self.type_ref(param.type, record)}"
        if param.default_none:
            text += " = None"
        return text

    # -- statements and expressions ----------------------------------------

    def stmt(self, stmt: ir.Stmt) -> str:
        if isinstance(stmt, ir.Let):
            return f"{self.ident(stmt.name)} = {self.expr(stmt.value)}"
        if isinstance(stmt, ir.BufferPush):
            return f"{self.ident(stmt.buffer)}.push({self.expr(stmt.value)})"
        if isinstance(stmt, ir.Return):
            return f"return {self.expr(stmt.value)}"
        raise TypeError(f"Cannot print statement {type(stmt).__name__}")

    def expr(self, expr: ir.Expr) -> str:
        if isinstance(expr, ir.Lit):
            if isinstance(expr.value, str):
                return json.dumps(expr.value)
            return repr(expr.value)
        if isinstance(expr, ir.Name):
            return self.ident(expr.ident)
        if isinstance(expr, ir.SelfRef):
            return "self"
        if isinstance(expr, ir.Attr):
            return f"{self.expr(expr.value)}.{self.ident(expr.attr)}"
        if isinstance(expr, ir.Length):
            if isinstance(expr.value, ir.Lit) and isinstance(expr.value.value, str):
                return str(len(expr.value.value))
            return f"len({self.expr(expr.value)})"
        if isinstance(expr, ir.Add):
            return f"{self.expr(expr.left)} + {self.expr(expr.right)}"
        if isinstance(expr, ir.Call):
            return f"{self.ident(expr.func)}({self._args(expr.args)})"
        if isinstance(expr, ir.Format):
            return f"{json.dumps(expr.template)}.format({self._args(expr.args)})"
        if isinstance(expr, ir.Convert):
            return f"{self.ident(expr.type_name)}({self.expr(expr.value)})"
        if isinstance(expr, ir.Construct):
            if isinstance(expr.type, ir.SelfType):
                type_name = "cls"
            else:
                type_name = self.type_ref(expr.type)
            fields = ", ".join(f"{self.ident(k)}={self.expr(v)}" for k, v in expr.fields)
            return f"{type_name}({fields})"
        if isinstance(expr, ir.EnumMember):
            return f"{self.ident(expr.enum)}.{expr.member}"
        if isinstance(expr, ir.Some):
            return self.expr(expr.value)
        if isinstance(expr, ir.BufferNew):
            return f"UrlBuffer({self.expr(expr.capacity)})"
        if isinstance(expr, ir.BufferFinish):
            return f"{self.expr(expr.buffer)}.finish()"
        raise TypeError(f"Cannot print expression {type(expr).__name__}")

    def _args(self, args: tuple[ir.Expr, ...]) -> str:
        return ", ".join(self.expr(a) for a in args)


def _docstring(text: str) -> str:
    """Single-line docstring; quotes and backslashes are escaped."""
    text = " ".join(text.split()).replace("\\", "\\\\").replace('"', '\\"')
    return f'"""{text}"""'
