"""Generate URL builder code for a path template.

Two strategies assemble the final URL from a base address and the path
parameters.  Both are functionally equivalent; the choice is a generation
policy, not a property of the template.

**FormatStyle** -- one formatting call over a hole template whose first hole
is the base address::

    url = "{}/{}/_alias/{}".format(base, index, name)

**PushStyle** -- allocate a buffer sized by an exact sum, then append every
fragment strictly in template order::

    url_fmtd = UrlBuffer(len(base) + 1 + len(index) + 8 + len(name))
    url_fmtd.push(base)
    url_fmtd.push("/")
    url_fmtd.push(index)
    url_fmtd.push("/_alias/")
    url_fmtd.push(name)

The capacity is computed from literal lengths known at generation time plus
the runtime length of ``base`` and of every parameter, so the generated code
allocates exactly once whatever the parameter values are.

Parameter arity is validated here, at generation time: a builder whose
parameter count does not match its holes raises
:class:`~restgen.exceptions.TemplateMismatchError`.
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from restgen import ir
from restgen.exceptions import TemplateMismatchError
from restgen.generator.type_mapper import TEXT
from restgen.models import (
    FormatStyle,
    LiteralSegment,
    ParamSegment,
    PushStyle,
    Segment,
    UrlPath,
    UrlStrategy,
)
from restgen.parser.template import hole_template

BASE_PARAM = "base"
"""Name of the base address parameter of every URL builder."""

BUFFER_NAME = "url_fmtd"
"""Name of the buffer variable in PushStyle builders."""

URL_TYPE = "Url"


def build_url_builder(
    url_path: UrlPath,
    strategy: UrlStrategy = UrlStrategy.PUSH,
    params: Optional[Sequence[str]] = None,
    endpoint: Optional[str] = None,
) -> Union[FormatStyle, PushStyle]:
    """Build the URL builder for *url_path* with the chosen *strategy*.

    Args:
        url_path: The parsed path template.
        strategy: ``FORMAT`` or ``PUSH``.
        params: Argument names bound to the holes in template order.
            Defaults to the template's own parameter names.
        endpoint: Endpoint being generated, only used in error messages.

    Returns:
        A :class:`~restgen.models.FormatStyle` or
        :class:`~restgen.models.PushStyle`.

    Raises:
        TemplateMismatchError: If ``len(params)`` differs from the number of
            holes in the template.

    Example::

        >>> builder = build_url_builder(parse_url_path("/{index}/_alias/{name}"))
        >>> builder.capacity("host", ["i", "n"])
        15
        >>> builder.render("host", ["i", "n"])
        'host/i/_alias/n'
    """
    holes = url_path.params
    names = tuple(params) if params is not None else holes
    if len(names) != len(holes):
        raise TemplateMismatchError(
            f"path template {url_path.template!r} has {len(holes)} parameter holes "
            f"but {len(names)} parameters were supplied",
            endpoint=endpoint,
        )

    segments = _rebind(url_path.segments, names)
    if strategy == UrlStrategy.FORMAT:
        return FormatStyle(template=hole_template(segments), params=names)
    return PushStyle(segments=segments, params=names)


def validate_builder(
    builder: Union[FormatStyle, PushStyle],
    endpoint: Optional[str] = None,
) -> None:
    """Check that *builder* binds exactly one parameter per hole.

    Raises:
        TemplateMismatchError: On any arity mismatch.
    """
    if isinstance(builder, FormatStyle):
        holes = builder.template.count("{}") - 1
        where = f"format template {builder.template!r}"
    else:
        holes = sum(1 for s in builder.segments if isinstance(s, ParamSegment))
        where = "push segments"
    if holes != len(builder.params):
        raise TemplateMismatchError(
            f"{where} has {holes} parameter holes but binds {len(builder.params)} parameters",
            endpoint=endpoint,
        )


def url_function_ir(
    name: str,
    builder: Union[FormatStyle, PushStyle],
    param_types: dict[str, str],
    endpoint: Optional[str] = None,
    doc: str = "",
) -> ir.Function:
    """Lower *builder* into an IR function ``name(base, *params) -> Url``.

    Args:
        name: Function name.
        builder: The URL builder to lower.
        param_types: Wrapper type name for every builder parameter.
        endpoint: Endpoint being generated, only used in error messages.
        doc: Optional doc comment for the function.

    Raises:
        TemplateMismatchError: If the builder's arity is inconsistent.
    """
    validate_builder(builder, endpoint)

    params = [ir.Param(BASE_PARAM, ir.HostRef(TEXT, borrowed=True))]
    params.extend(
        ir.Param(p, ir.NamedType(param_types[p], borrowed=True)) for p in builder.params
    )

    if isinstance(builder, FormatStyle):
        body = _format_body(builder)
    else:
        body = _push_body(builder)

    return ir.Function(
        name=name,
        params=tuple(params),
        returns=ir.NamedType(URL_TYPE),
        body=body,
        doc=doc,
    )


def capacity_expr(builder: PushStyle) -> ir.Expr:
    """Build the exact capacity sum of *builder* as an IR expression.

    Literal fragments stay as ``Length(Lit(text))``; each printer folds them
    into a constant in the length unit of its target (characters for
    Python, UTF-8 bytes for Rust).
    """
    terms: list[ir.Expr] = [ir.Length(ir.Name(BASE_PARAM))]
    for segment in builder.segments:
        if isinstance(segment, LiteralSegment):
            if segment.text:
                terms.append(ir.Length(ir.Lit(segment.text)))
        else:
            terms.append(ir.Length(ir.Name(segment.name)))

    expr = terms[0]
    for term_expr in terms[1:]:
        expr = ir.Add(expr, term_expr)
    return expr


def _format_body(builder: FormatStyle) -> tuple[ir.Stmt, ...]:
    args = (ir.Name(BASE_PARAM),) + tuple(ir.Name(p) for p in builder.params)
    return (ir.Return(ir.Convert(URL_TYPE, ir.Format(builder.template, args))),)


def _push_body(builder: PushStyle) -> tuple[ir.Stmt, ...]:
    stmts: list[ir.Stmt] = [
        ir.Let(BUFFER_NAME, ir.BufferNew(capacity_expr(builder)), mutable=True),
        ir.BufferPush(BUFFER_NAME, ir.Name(BASE_PARAM)),
    ]
    for segment in builder.segments:
        if isinstance(segment, LiteralSegment):
            if segment.text:
                stmts.append(ir.BufferPush(BUFFER_NAME, ir.Lit(segment.text)))
        else:
            stmts.append(ir.BufferPush(BUFFER_NAME, ir.Name(segment.name)))
    stmts.append(ir.Return(ir.Convert(URL_TYPE, ir.BufferFinish(ir.Name(BUFFER_NAME)))))
    return tuple(stmts)


def _rebind(segments: Sequence[Segment], names: Sequence[str]) -> tuple[Segment, ...]:
    """Rename parameter segments to *names*, in order."""
    rebound: list[Segment] = []
    remaining = iter(names)
    for segment in segments:
        if isinstance(segment, ParamSegment):
            name = next(remaining)
            rebound.append(segment if segment.name == name else ParamSegment(name=name))
        else:
            rebound.append(segment)
    return tuple(rebound)
