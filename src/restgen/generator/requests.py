"""Generate request descriptors for normalized endpoints.

One :class:`~restgen.models.RequestDescriptor` is built per (endpoint, path
shape) pair.  Everything about a descriptor follows from three inputs: the
endpoint's single method, the shape and whether a body is declared.

**Naming:**

* Record type: the PascalCase endpoint name plus ``Request``
  (``indices.put_alias`` -> ``IndicesPutAliasRequest``).
* Constructor: the shape's parameter names joined with ``_``
  (``index_name``), or ``new`` for a shapeless path.  In generated code the
  constructor is called ``for_index_name`` (or ``new``).
* URL function: the snake_case endpoint name plus ``_url`` and, for a
  non-empty shape, ``_`` plus the constructor name
  (``indices_put_alias_url_index_name``).
* Wrapper types: one per url part, named after the part in PascalCase
  (``index`` -> ``Index``).  Names that would shadow a shared type get a
  ``Part`` suffix (``url`` -> ``UrlPart``).

Alongside the descriptors every call returns a
:class:`~restgen.models.TypeAccumulator` of the shared types it references;
the pipeline merges those once, after every endpoint has been generated.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from restgen import ir
from restgen.exceptions import GenerationError, VerbSelectionError
from restgen.generator.type_mapper import TEXT, map_type, pascal_case
from restgen.generator.url_builder import (
    BASE_PARAM,
    BUFFER_NAME,
    build_url_builder,
    url_function_ir,
)
from restgen.models import (
    Endpoint,
    GenerationPolicy,
    HostKind,
    HostType,
    ParamRole,
    RequestDescriptor,
    RequestParam,
    TypeAccumulator,
)
from restgen.parser.template import parse_mod_path

logger = logging.getLogger(__name__)

SHARED_TYPE_NAMES = frozenset({"Url", "Body", "HttpRequest", "HttpMethod", "UrlBuffer"})
"""Types every generated module defines in its ``params`` namespace."""

BODY_PARAM = "body"
BODY_TYPE = "Body"
REQUEST_TYPE = "HttpRequest"
METHOD_TYPE = "HttpMethod"
SHAPELESS_CTOR = "new"
INTO_REQUEST = "into_http_request"

# Identifiers used by the generated functions themselves.
_RESERVED_PARAMS = frozenset({BASE_PARAM, BODY_PARAM, BUFFER_NAME, "cls"})


def shared_type_name(name: str) -> str:
    """Return the generated type name for a url part or ``OTHER`` type name.

    Example::

        >>> shared_type_name("index")
        'Index'
        >>> shared_type_name("url")
        'UrlPart'
    """
    type_name = pascal_case(name)
    if type_name in SHARED_TYPE_NAMES:
        return type_name + "Part"
    return type_name


def build_request_descriptors(
    endpoint: Endpoint,
    policy: Optional[GenerationPolicy] = None,
) -> tuple[list[RequestDescriptor], TypeAccumulator]:
    """Build the request descriptors of a normalized *endpoint*.

    Args:
        endpoint: An endpoint with a single method and one path per shape.
        policy: Generation policy; only the URL strategy is read here.

    Returns:
        The descriptors in path order and the types they reference.

    Raises:
        VerbSelectionError: If the endpoint has not been normalized to one
            method.
        ModPathParseError: If the endpoint name is not a valid module path.
        GenerationError: If a url part would shadow a generated parameter
            or cannot be turned into a type name.
        UnmappedTypeError: If a url part's declared type has no mapping.
    """
    policy = policy or GenerationPolicy()
    if len(endpoint.methods) != 1:
        raise VerbSelectionError(
            f"expected exactly one method, found {len(endpoint.methods)}",
            endpoint=endpoint.name,
        )
    tokens = parse_mod_path(endpoint.name)

    snake_name = "_".join(tokens)
    type_name = "".join(pascal_case(token) for token in tokens) + "Request"
    strategy = policy.strategy_for(endpoint.name)

    accumulator = _accumulate_types(endpoint)
    body = endpoint.body

    descriptors: list[RequestDescriptor] = []
    ctor_paths: dict[str, str] = {}
    for path in endpoint.paths:
        shape = path.params
        for name in shape:
            if name in _RESERVED_PARAMS:
                raise GenerationError(
                    f"url part '{name}' in {path.template!r} collides with a generated parameter",
                    endpoint=endpoint.name,
                )

        ctor_name = "_".join(shape) if shape else SHAPELESS_CTOR
        ctor_function = f"for_{ctor_name}" if shape else SHAPELESS_CTOR
        if ctor_function in ctor_paths:
            raise GenerationError(
                f"paths {ctor_paths[ctor_function]!r} and {path.template!r} both produce "
                f"the constructor '{ctor_function}'",
                endpoint=endpoint.name,
            )
        ctor_paths[ctor_function] = path.template
        url_function = f"{snake_name}_url_{ctor_name}" if shape else f"{snake_name}_url"

        params = [RequestParam(name=BASE_PARAM, role=ParamRole.BASE, type_name=HostKind.TEXT.value)]
        params.extend(
            RequestParam(name=name, role=ParamRole.PATH, type_name=shared_type_name(name))
            for name in shape
        )
        if body is not None:
            params.append(RequestParam(name=BODY_PARAM, role=ParamRole.BODY, type_name=BODY_TYPE))

        descriptors.append(
            RequestDescriptor(
                endpoint=endpoint.name,
                type_name=type_name,
                ctor_name=ctor_name,
                params=tuple(params),
                url_builder=build_url_builder(path, strategy, endpoint=endpoint.name),
                url_function=url_function,
                path=path.template,
                method=endpoint.method,
                has_body=body is not None,
                body_required=body.required if body is not None else False,
                documentation=endpoint.documentation,
            )
        )

    logger.debug(
        "%s: %d request descriptor(s), strategy %s",
        endpoint.name, len(descriptors), strategy.value,
    )
    return descriptors, accumulator


def _accumulate_types(endpoint: Endpoint) -> TypeAccumulator:
    """Collect wrapper and opaque types for every part of *endpoint*.

    Declared parts keep their mapped host type; path parameters without a
    declaration are plain text.
    """
    names = list(endpoint.parts)
    for path in endpoint.paths:
        names.extend(name for name in path.params if name not in endpoint.parts)

    wrappers: dict[str, frozenset[HostType]] = {}
    opaque: set[str] = set()
    for name in names:
        wrapper = shared_type_name(name)
        if not wrapper or wrapper[0].isdigit():
            raise GenerationError(
                f"url part {name!r} cannot be turned into a type name",
                endpoint=endpoint.name,
            )

        spec_type = endpoint.parts.get(name)
        host = map_type(spec_type, endpoint=endpoint.name) if spec_type else TEXT
        if host.kind == HostKind.OPAQUE:
            host = HostType(kind=HostKind.OPAQUE, name=shared_type_name(host.name or ""))
            opaque.add(host.name)

        wrappers[wrapper] = wrappers.get(wrapper, frozenset()) | {host}

    return TypeAccumulator(wrappers=wrappers, opaque=frozenset(opaque))


# --- IR lowering ---


def request_items_ir(descriptors: Sequence[RequestDescriptor]) -> list[ir.Item]:
    """Lower the descriptors of one endpoint into IR declarations.

    The items come in emission order: every URL function, then the record
    type carrying the constructors and the request conversion.
    """
    if not descriptors:
        return []

    items: list[ir.Item] = []
    for descriptor in descriptors:
        param_types = {
            p.name: p.type_name for p in descriptor.params if p.role == ParamRole.PATH
        }
        items.append(
            url_function_ir(
                descriptor.url_function,
                descriptor.url_builder,
                param_types,
                endpoint=descriptor.endpoint,
                doc=_url_doc(descriptor),
            )
        )

    first = descriptors[0]
    fields = [ir.Field("url", ir.NamedType("Url"))]
    if first.has_body:
        fields.append(ir.Field(BODY_PARAM, _body_type(first)))

    functions = [_ctor_ir(descriptor) for descriptor in descriptors]
    functions.append(_into_request_ir(first))

    items.append(
        ir.Record(
            name=first.type_name,
            fields=tuple(fields),
            functions=tuple(functions),
            doc=first.documentation,
        )
    )
    return items


def ctor_function_name(descriptor: RequestDescriptor) -> str:
    """Name of the generated constructor for *descriptor*."""
    if not any(p.role == ParamRole.PATH for p in descriptor.params):
        return SHAPELESS_CTOR
    return f"for_{descriptor.ctor_name}"


def _url_doc(descriptor: RequestDescriptor) -> str:
    shape = [p.name for p in descriptor.params if p.role == ParamRole.PATH]
    if not shape:
        return f"Url of a `{descriptor.endpoint}` request."
    return f"Url of a `{descriptor.endpoint}` request for {', '.join(shape)}."


def _body_type(descriptor: RequestDescriptor) -> ir.NamedType:
    return ir.NamedType(BODY_TYPE, optional=not descriptor.body_required)


def _ctor_ir(descriptor: RequestDescriptor) -> ir.Function:
    params: list[ir.Param] = []
    args: list[ir.Expr] = []
    fields: list[tuple[str, ir.Expr]] = []

    for param in descriptor.params:
        if param.role == ParamRole.BASE:
            params.append(ir.Param(param.name, ir.HostRef(TEXT, borrowed=True)))
            args.append(ir.Name(param.name))
        elif param.role == ParamRole.PATH:
            params.append(ir.Param(param.name, ir.NamedType(param.type_name, borrowed=True)))
            args.append(ir.Name(param.name))
        else:
            optional = not descriptor.body_required
            params.append(ir.Param(param.name, _body_type(descriptor), default_none=optional))

    fields.append(("url", ir.Call(descriptor.url_function, tuple(args))))
    if descriptor.has_body:
        fields.append((BODY_PARAM, ir.Name(BODY_PARAM)))

    return ir.Function(
        name=ctor_function_name(descriptor),
        params=tuple(params),
        returns=ir.SelfType(),
        body=(ir.Return(ir.Construct(ir.SelfType(), tuple(fields))),),
        kind=ir.FnKind.CTOR,
        doc=f"Request `{descriptor.endpoint}` at `{descriptor.path}`.",
    )


def _into_request_ir(descriptor: RequestDescriptor) -> ir.Function:
    receiver = ir.SelfRef()
    if not descriptor.has_body:
        body: ir.Expr = ir.Lit(None)
    elif descriptor.body_required:
        body = ir.Some(ir.Attr(receiver, BODY_PARAM))
    else:
        body = ir.Attr(receiver, BODY_PARAM)

    fields = (
        ("method", ir.EnumMember(METHOD_TYPE, descriptor.method.value)),
        ("url", ir.Attr(receiver, "url")),
        ("body", body),
        ("headers", ir.Call("default_headers")),
    )
    return ir.Function(
        name=INTO_REQUEST,
        params=(),
        returns=ir.NamedType(REQUEST_TYPE),
        body=(ir.Return(ir.Construct(ir.NamedType(REQUEST_TYPE), fields)),),
        kind=ir.FnKind.METHOD,
    )
