"""Canonical Pydantic models shared across all restgen modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in ``restgen.json``:
    :class:`DerivedEndpointRule`, :class:`GenerationPolicy` and
    :class:`GeneratorConfig`.

**Descriptor models** -- produced by the extractor and rewritten by the
normalizer:
    :class:`HttpMethod`, :class:`SpecType`, :class:`BodySpec`,
    :class:`LiteralSegment`, :class:`ParamSegment`, :class:`UrlPath` and
    :class:`Endpoint`.

**Generation models** -- produced by the generator and consumed by the
emitter:
    :class:`HostType`, :class:`FormatStyle`, :class:`PushStyle`,
    :class:`RequestParam`, :class:`RequestDescriptor` and
    :class:`TypeAccumulator`.

Descriptor and generation models are frozen: passes return updated copies
via ``model_copy`` instead of mutating shared instances.
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration Models ---


class UrlStrategy(str, enum.Enum):
    """URL assembly strategy used by the generated builder functions.

    ``FORMAT`` emits a single formatting call over a hole template; ``PUSH``
    precomputes the exact output length and appends every fragment in order.
    """

    FORMAT = "format"
    PUSH = "push"


class Target(str, enum.Enum):
    """Target languages with a registered printer."""

    PYTHON = "python"
    RUST = "rust"


class HttpMethod(str, enum.Enum):
    """HTTP methods an endpoint descriptor may declare."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"


class DerivedEndpointRule(BaseModel):
    """Declarative recipe for cloning an endpoint into a simplified variant.

    Example::

        DerivedEndpointRule(source="search", target="simple_search")
        # -> a GET-only copy of ``search`` without a body
    """

    source: str = Field(description="Name of the endpoint to clone")
    target: str = Field(description="Name of the derived endpoint")
    method: HttpMethod = Field(
        default=HttpMethod.GET, description="The single method the clone keeps"
    )
    clear_body: bool = Field(
        default=True, description="Drop the body spec from the clone"
    )


class GenerationPolicy(BaseModel):
    """Every knob that influences the generated text.

    Two runs over the same descriptors with equal policies produce
    byte-identical output.
    """

    strategy: UrlStrategy = Field(
        default=UrlStrategy.PUSH, description="Default URL assembly strategy"
    )
    strategy_overrides: dict[str, UrlStrategy] = Field(
        default_factory=dict,
        description="Per-endpoint strategy, keyed by endpoint name",
    )
    verb_order: Optional[list[HttpMethod]] = Field(
        default=None,
        description="Tie-break order when several methods but no POST are declared; "
        "declaration order is used when unset",
    )
    derived: list[DerivedEndpointRule] = Field(default_factory=list)

    def strategy_for(self, endpoint_name: str) -> UrlStrategy:
        """Return the URL strategy for *endpoint_name*."""
        return self.strategy_overrides.get(endpoint_name, self.strategy)


class GeneratorConfig(BaseModel):
    """Project configuration persisted at ``./restgen.json``.

    Loaded by :func:`~restgen.config.load_project_config`. Every field can be
    overridden from the command line; see
    :func:`~restgen.config.resolve_config` for the precedence chain.
    """

    spec: str = Field(
        default="./spec", description="Directory, file or URL holding descriptors"
    )
    output: str = Field(default="-", description="Output file path, '-' for stdout")
    target: Target = Target.PYTHON
    comment_markers: bool = Field(
        default=True, description="Wrap the generated banner in a comment block"
    )
    policy: GenerationPolicy = Field(default_factory=GenerationPolicy)


# --- Descriptor Models ---


class SpecTypeKind(str, enum.Enum):
    """Scalar categories a url part may be declared with."""

    BOOL = "bool"
    LONG = "long"
    INT = "int"
    SHORT = "short"
    BYTE = "byte"
    DOUBLE = "double"
    FLOAT = "float"
    STR = "str"
    BIN = "bin"
    OTHER = "other"


class SpecType(BaseModel):
    """A declared parameter type; ``name`` is only meaningful for ``OTHER``."""

    model_config = ConfigDict(frozen=True)

    kind: SpecTypeKind
    name: Optional[str] = None


class BodySpec(BaseModel):
    """Request body requirements of an endpoint."""

    model_config = ConfigDict(frozen=True)

    required: bool = False
    description: str = ""


class LiteralSegment(BaseModel):
    """Fixed text between parameter holes of a path template."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    text: str


class ParamSegment(BaseModel):
    """A ``{name}`` hole of a path template."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["param"] = "param"
    name: str


Segment = Annotated[Union[LiteralSegment, ParamSegment], Field(discriminator="kind")]


class UrlPath(BaseModel):
    """A raw path template together with its parsed segments.

    Parameters appear in :attr:`segments` in the same left-to-right order as
    their ``{name}`` occurrences in :attr:`template`. Built by
    :func:`~restgen.parser.template.parse_url_path`.
    """

    model_config = ConfigDict(frozen=True)

    template: str
    segments: tuple[Segment, ...] = ()

    @property
    def params(self) -> tuple[str, ...]:
        """The path's *shape*: parameter names in template order."""
        return tuple(s.name for s in self.segments if isinstance(s, ParamSegment))

    @property
    def literals(self) -> tuple[str, ...]:
        """The literal fragments in template order."""
        return tuple(s.text for s in self.segments if isinstance(s, LiteralSegment))


class Endpoint(BaseModel):
    """One named API operation.

    Created by :func:`~restgen.parser.extractor.extract_endpoints`. Only the
    normalizer produces modified copies (single verb, deduplicated paths,
    derived clones); everything downstream treats endpoints as read-only.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    documentation: str = ""
    methods: tuple[HttpMethod, ...] = ()
    paths: tuple[UrlPath, ...] = ()
    parts: dict[str, SpecType] = Field(default_factory=dict)
    body: Optional[BodySpec] = None
    origin: Optional[str] = Field(
        default=None, description="Spec file the endpoint was read from"
    )

    @property
    def method(self) -> HttpMethod:
        """The endpoint's single method once it has been normalized."""
        if len(self.methods) != 1:
            raise ValueError(f"Endpoint '{self.name}' has not been normalized")
        return self.methods[0]


# --- Generation Models ---


class HostKind(str, enum.Enum):
    """Target-independent host representations produced by the type mapper."""

    BOOL = "bool"
    I64 = "i64"
    I32 = "i32"
    I16 = "i16"
    U8 = "u8"
    F32 = "f32"
    TEXT = "text"
    BYTES = "bytes"
    OPAQUE = "opaque"


_HOST_KIND_ORDER = {kind: index for index, kind in enumerate(HostKind)}


class HostType(BaseModel):
    """A host type; ``name`` holds the wrapper type name for ``OPAQUE``."""

    model_config = ConfigDict(frozen=True)

    kind: HostKind
    name: Optional[str] = None

    def sort_key(self) -> tuple[int, str]:
        """Stable ordering key so emitted conversions never depend on set order."""
        return (_HOST_KIND_ORDER[self.kind], self.name or "")


class FormatStyle(BaseModel):
    """A URL builder that fills a hole template in one formatting call.

    :attr:`template` always starts with the base-address hole, e.g.
    ``"{}/{}/_alias/{}"`` for ``/{index}/_alias/{name}``.
    """

    model_config = ConfigDict(frozen=True)

    style: Literal["format"] = "format"
    template: str
    params: tuple[str, ...] = ()

    def render(self, base: str, values: Sequence[str]) -> str:
        """Evaluate the builder the way the generated code does."""
        return self.template.format(base, *values)


class PushStyle(BaseModel):
    """A URL builder that appends ``base``, literals and params into an exact buffer."""

    model_config = ConfigDict(frozen=True)

    style: Literal["push"] = "push"
    segments: tuple[Segment, ...] = ()
    params: tuple[str, ...] = ()

    def capacity_terms(self) -> list[Union[int, str]]:
        """Return the capacity sum as terms in template order.

        Integers are literal lengths in characters, known at generation time;
        strings name a value whose length is only known when the generated
        code runs. The first term is always ``"base"``. Empty literals
        contribute no term.
        """
        terms: list[Union[int, str]] = ["base"]
        for segment in self.segments:
            if isinstance(segment, LiteralSegment):
                if segment.text:
                    terms.append(len(segment.text))
            else:
                terms.append(segment.name)
        return terms

    def capacity(self, base: str, values: Sequence[str]) -> int:
        """Evaluate the capacity expression for concrete runtime values."""
        bound = dict(zip(self.params, values))
        bound["base"] = base
        return sum(t if isinstance(t, int) else len(bound[t]) for t in self.capacity_terms())

    def render(self, base: str, values: Sequence[str]) -> str:
        """Evaluate the append sequence for concrete runtime values."""
        bound = dict(zip(self.params, values))
        pieces = [base]
        for segment in self.segments:
            if isinstance(segment, LiteralSegment):
                pieces.append(segment.text)
            else:
                pieces.append(bound[segment.name])
        return "".join(pieces)


GeneratedUrlBuilder = Annotated[Union[FormatStyle, PushStyle], Field(discriminator="style")]


class ParamRole(str, enum.Enum):
    """Position class of a request constructor parameter."""

    BASE = "base"
    PATH = "path"
    BODY = "body"


class RequestParam(BaseModel):
    """One constructor parameter: its identifier, role and wrapper type name."""

    model_config = ConfigDict(frozen=True)

    name: str
    role: ParamRole
    type_name: str


class RequestDescriptor(BaseModel):
    """The constructor/type/conversion bundle for one (endpoint, shape) pair.

    Fully determined by the endpoint's verb, the path shape and body
    presence.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str
    type_name: str
    ctor_name: str
    params: tuple[RequestParam, ...]
    url_builder: GeneratedUrlBuilder
    url_function: str
    path: str = ""
    method: HttpMethod
    has_body: bool = False
    body_required: bool = False
    documentation: str = ""


class TypeAccumulator(BaseModel):
    """Shared types referenced by the generated requests.

    Each generation pass returns its own accumulator; the pipeline merges
    them once at the end to decide which shared types to emit.

    Attributes:
        wrappers: Wrapper type name (e.g. ``"Index"``) mapped to every host
            type the underlying url part was declared with.
        opaque: Names of opaque types built from ``OTHER`` declarations.
    """

    model_config = ConfigDict(frozen=True)

    wrappers: dict[str, frozenset[HostType]] = Field(default_factory=dict)
    opaque: frozenset[str] = frozenset()

    def merge(self, other: TypeAccumulator) -> TypeAccumulator:
        """Return a new accumulator holding the union of both."""
        wrappers = dict(self.wrappers)
        for name, hosts in other.wrappers.items():
            wrappers[name] = wrappers.get(name, frozenset()) | hosts
        return TypeAccumulator(wrappers=wrappers, opaque=self.opaque | other.opaque)
