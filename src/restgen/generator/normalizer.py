"""Normalize endpoints before code generation.

Three passes turn extracted endpoints into the canonical form the generators
expect:

1. **Derived endpoint synthesis** -- :func:`synthesize_derived` clones an
   endpoint under a new name with a forced single method and, optionally, no
   body (``search`` -> GET-only ``simple_search``).  Rules are declared in
   :attr:`~restgen.models.GenerationPolicy.derived` and applied first, so the
   clones go through the remaining passes like any other endpoint.
2. **Verb selection** -- :func:`select_verb` reduces the method set to one
   method: the only one, else ``POST`` when declared, else the first method
   in declaration order (or in the policy's ``verb_order``).
3. **Path dedup** -- :func:`dedup_paths` keeps one path per shape (ordered
   parameter names), the last declared one winning.

Every pass returns new :class:`~restgen.models.Endpoint` copies.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from restgen.exceptions import SpecParseError, VerbSelectionError
from restgen.models import (
    DerivedEndpointRule,
    Endpoint,
    GenerationPolicy,
    HttpMethod,
    UrlPath,
)

logger = logging.getLogger(__name__)


def choose_method(
    methods: Sequence[HttpMethod],
    verb_order: Optional[Sequence[HttpMethod]] = None,
) -> HttpMethod:
    """Pick one method out of *methods*.

    Args:
        methods: Declared methods, in declaration order.
        verb_order: Optional explicit tie-break order.  Methods missing from
            it rank after the listed ones, in declaration order.

    Returns:
        The selected method.

    Raises:
        VerbSelectionError: If *methods* is empty.

    Example::

        >>> choose_method([HttpMethod.GET, HttpMethod.POST])
        <HttpMethod.POST: 'POST'>
        >>> choose_method([HttpMethod.PUT, HttpMethod.GET])
        <HttpMethod.PUT: 'PUT'>
    """
    if not methods:
        raise VerbSelectionError("no HTTP method declared")
    if len(methods) == 1:
        return methods[0]
    if HttpMethod.POST in methods:
        return HttpMethod.POST
    if verb_order:
        rank = {method: index for index, method in enumerate(verb_order)}
        return min(methods, key=lambda m: rank.get(m, len(rank)))
    return methods[0]


def select_verb(
    endpoint: Endpoint,
    verb_order: Optional[Sequence[HttpMethod]] = None,
) -> Endpoint:
    """Return a copy of *endpoint* declaring exactly one method.

    Raises:
        VerbSelectionError: If the endpoint declares no method; the error
            names the endpoint and its spec file.
    """
    try:
        method = choose_method(endpoint.methods, verb_order)
    except VerbSelectionError as exc:
        raise VerbSelectionError(str(exc), endpoint=_identity(endpoint)) from None
    return endpoint.model_copy(update={"methods": (method,)})


def dedup_paths(endpoint: Endpoint) -> Endpoint:
    """Return a copy of *endpoint* with one path per distinct shape.

    Paths that differ only in literal text (``/{index}/_alias/{name}`` and
    ``/{index}/_aliases/{name}``) collapse to the last one declared.  The
    surviving paths are ordered by shape, so the shapeless path (if any)
    comes first.
    """
    by_shape: dict[tuple[str, ...], UrlPath] = {}
    for path in endpoint.paths:
        by_shape[path.params] = path

    deduped = tuple(by_shape[shape] for shape in sorted(by_shape))
    if len(deduped) != len(endpoint.paths):
        logger.debug(
            "%s: collapsed %d paths into %d shapes",
            endpoint.name, len(endpoint.paths), len(deduped),
        )
    return endpoint.model_copy(update={"paths": deduped})


def synthesize_derived(endpoints: Sequence[Endpoint], rule: DerivedEndpointRule) -> Endpoint:
    """Clone the endpoint named by ``rule.source`` into a simplified variant.

    The clone keeps the documentation, paths and parts, declares only
    ``rule.method`` and drops its body when ``rule.clear_body`` is set.

    Raises:
        SpecParseError: If no endpoint is named ``rule.source`` or an
            endpoint named ``rule.target`` already exists.
    """
    source: Optional[Endpoint] = None
    for endpoint in endpoints:
        if endpoint.name == rule.target:
            raise SpecParseError(
                f"Derived endpoint '{rule.target}' conflicts with a declared endpoint"
            )
        if endpoint.name == rule.source:
            source = endpoint

    if source is None:
        raise SpecParseError(
            f"Derived endpoint '{rule.target}' refers to unknown endpoint '{rule.source}'"
        )

    update: dict = {"name": rule.target, "methods": (rule.method,)}
    if rule.clear_body:
        update["body"] = None
    return source.model_copy(update=update)


def normalize_endpoints(
    endpoints: Sequence[Endpoint],
    policy: Optional[GenerationPolicy] = None,
) -> list[Endpoint]:
    """Run every normalization pass over *endpoints*.

    Derived endpoints are appended after the declared ones, in rule order.

    Args:
        endpoints: Extracted endpoints.
        policy: Generation policy; defaults to :class:`GenerationPolicy()`.

    Returns:
        New endpoints, each with a single method and deduplicated paths.
    """
    policy = policy or GenerationPolicy()

    all_endpoints = list(endpoints)
    for rule in policy.derived:
        all_endpoints.append(synthesize_derived(all_endpoints, rule))

    return [
        dedup_paths(select_verb(endpoint, policy.verb_order))
        for endpoint in all_endpoints
    ]


def _identity(endpoint: Endpoint) -> str:
    """Endpoint name plus spec file, for error messages."""
    if endpoint.origin:
        return f"{endpoint.name} ({endpoint.origin})"
    return endpoint.name
