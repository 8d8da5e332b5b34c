"""Drive the whole generation chain for a set of endpoints.

:func:`generate` normalizes the endpoints, builds the request descriptors of
every endpoint, merges the per-endpoint type accumulators once and assembles
the target-agnostic :class:`~restgen.ir.Module` that a printer turns into
source text.

The module always has two namespaces:

* ``requests`` -- per endpoint, in input order: the URL function of every
  shape followed by the request record.  It uses ``params``.
* ``params`` -- the shared prelude types, then one wrapper per referenced
  url part and one opaque type per referenced ``OTHER`` type, each sorted
  by name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from restgen import ir
from restgen.exceptions import GenerationError
from restgen.generator.normalizer import normalize_endpoints
from restgen.generator.requests import (
    SHARED_TYPE_NAMES,
    build_request_descriptors,
    request_items_ir,
)
from restgen.models import (
    Endpoint,
    GenerationPolicy,
    HostKind,
    RequestDescriptor,
    TypeAccumulator,
)

logger = logging.getLogger(__name__)

BANNER = ("This code is automatically generated",)

REQUESTS_NAMESPACE = "requests"
PARAMS_NAMESPACE = "params"


@dataclass
class GenerationResult:
    """Everything one generation run produced.

    Attributes:
        endpoints: The normalized endpoints, in emission order.
        descriptors: Request descriptors keyed by endpoint name.
        types: The merged accumulator of referenced shared types.
        module: The IR handed to the emitter.
    """

    endpoints: list[Endpoint]
    descriptors: dict[str, list[RequestDescriptor]] = field(default_factory=dict)
    types: TypeAccumulator = field(default_factory=TypeAccumulator)
    module: ir.Module = field(default_factory=lambda: ir.Module(namespaces=()))


def generate(
    endpoints: Sequence[Endpoint],
    policy: Optional[GenerationPolicy] = None,
) -> GenerationResult:
    """Run normalization and generation over *endpoints*.

    Args:
        endpoints: Extracted, not yet normalized endpoints.
        policy: Generation policy; defaults to :class:`GenerationPolicy()`.

    Returns:
        A :class:`GenerationResult`.  Equal inputs always produce equal
        results.

    Raises:
        GenerationError: If any endpoint cannot be generated; the error
            names the endpoint.
        SpecParseError: If a derived endpoint rule is invalid.
    """
    policy = policy or GenerationPolicy()
    normalized = normalize_endpoints(endpoints, policy)

    result = GenerationResult(endpoints=normalized)
    accumulators: dict[str, TypeAccumulator] = {}
    request_items: list[ir.Item] = []

    for endpoint in normalized:
        descriptors, accumulator = build_request_descriptors(endpoint, policy)
        result.descriptors[endpoint.name] = descriptors
        accumulators[endpoint.name] = accumulator
        request_items.extend(request_items_ir(descriptors))

    _check_name_clashes(result.descriptors, accumulators)

    types = TypeAccumulator()
    for accumulator in accumulators.values():
        types = types.merge(accumulator)
    result.types = types

    result.module = ir.Module(
        namespaces=(
            ir.Namespace(REQUESTS_NAMESPACE, tuple(request_items), uses=(PARAMS_NAMESPACE,)),
            ir.Namespace(PARAMS_NAMESPACE, tuple(shared_type_items(types))),
        ),
        banner=BANNER,
    )
    logger.debug(
        "Generated %d endpoint(s), %d wrapper type(s), %d opaque type(s)",
        len(normalized), len(types.wrappers), len(types.opaque),
    )
    return result


def shared_type_items(types: TypeAccumulator) -> list[ir.Item]:
    """Build the ``params`` namespace declarations for *types*.

    An opaque type sharing its name with a wrapper is not emitted twice:
    the wrapper already is that text type, so it drops the conversion from
    itself.
    """
    items: list[ir.Item] = [ir.Prelude()]

    for name in sorted(types.wrappers):
        hosts = sorted(
            (h for h in types.wrappers[name] if not (h.kind == HostKind.OPAQUE and h.name == name)),
            key=lambda h: h.sort_key(),
        )
        items.append(ir.WrapperType(name, tuple(hosts)))

    for name in sorted(types.opaque - set(types.wrappers)):
        items.append(ir.OpaqueType(name))

    return items


def _check_name_clashes(
    descriptors: dict[str, list[RequestDescriptor]],
    accumulators: dict[str, TypeAccumulator],
) -> None:
    """Reject two generated declarations that would share one name.

    Record types and URL functions belong to exactly one endpoint and must
    not reuse a prelude type name.  Wrapper and opaque types may be shared
    by several endpoints but must not reuse a record name.

    Raises:
        GenerationError: Naming the endpoint whose declaration clashes and
            the owner of the name it clashes with.
    """
    owners: dict[str, str] = {name: "a shared prelude type" for name in SHARED_TYPE_NAMES}
    for endpoint, items in descriptors.items():
        names = {d.type_name for d in items} | {d.url_function for d in items}
        for name in sorted(names):
            if name in owners:
                raise GenerationError(
                    f"generated name '{name}' is already used by {owners[name]}",
                    endpoint=endpoint,
                )
            owners[name] = f"endpoint '{endpoint}'"

    for endpoint, accumulator in accumulators.items():
        for name in sorted(set(accumulator.wrappers) | accumulator.opaque):
            if name in owners:
                raise GenerationError(
                    f"url part type '{name}' is already used by {owners[name]}",
                    endpoint=endpoint,
                )
