"""Tests for restgen.generator.pipeline."""

from __future__ import annotations

from typing import Callable

import pytest

from restgen import ir
from restgen.exceptions import GenerationError
from restgen.generator import generate
from restgen.generator.pipeline import BANNER, shared_type_items
from restgen.models import (
    DerivedEndpointRule,
    Endpoint,
    GenerationPolicy,
    HostKind,
    HostType,
    TypeAccumulator,
)

LIST = HostType(kind=HostKind.OPAQUE, name="List")
TEXT = HostType(kind=HostKind.TEXT)


class TestGenerate:
    def test_descriptors_per_endpoint(self, fixture_endpoints: list[Endpoint]) -> None:
        result = generate(fixture_endpoints)
        assert list(result.descriptors) == [e.name for e in result.endpoints]
        assert len(result.descriptors["search"]) == 3
        assert len(result.descriptors["indices.put_alias"]) == 1

    def test_types_merged_once(self, fixture_endpoints: list[Endpoint]) -> None:
        types = generate(fixture_endpoints).types
        assert types.wrappers == {
            "Id": frozenset({TEXT}),
            "Index": frozenset({TEXT, LIST}),
            "Name": frozenset({TEXT}),
            "Type": frozenset({TEXT, LIST}),
        }
        assert types.opaque == frozenset({"List"})

    def test_module_layout(self, fixture_endpoints: list[Endpoint]) -> None:
        module = generate(fixture_endpoints).module
        requests, params = module.namespaces
        assert module.banner == BANNER
        assert requests.name == "requests"
        assert requests.uses == ("params",)
        assert params.name == "params"
        assert params.uses == ()

    def test_requests_namespace_order(self, fixture_endpoints: list[Endpoint]) -> None:
        requests = generate(fixture_endpoints).module.namespaces[0]
        records = [i.name for i in requests.items if isinstance(i, ir.Record)]
        assert records == [
            "ClusterPutSettingsRequest",
            "GetRequest",
            "IndicesDeleteRequest",
            "IndicesPutAliasRequest",
            "SearchRequest",
        ]

    def test_params_namespace_order(self, fixture_endpoints: list[Endpoint]) -> None:
        params = generate(fixture_endpoints).module.namespaces[1]
        assert isinstance(params.items[0], ir.Prelude)
        assert [i.name for i in params.items[1:]] == ["Id", "Index", "Name", "Type", "List"]

    def test_derived_endpoint_is_generated(self, fixture_endpoints: list[Endpoint]) -> None:
        policy = GenerationPolicy(derived=[DerivedEndpointRule(source="search", target="simple_search")])
        result = generate(fixture_endpoints, policy)
        descriptors = result.descriptors["simple_search"]
        assert descriptors[0].type_name == "SimpleSearchRequest"
        assert all(not d.has_body for d in descriptors)

    def test_is_deterministic(self, fixture_endpoints: list[Endpoint]) -> None:
        first = generate(fixture_endpoints)
        second = generate(list(fixture_endpoints))
        assert first.module == second.module
        assert first.descriptors == second.descriptors

    def test_empty_input(self) -> None:
        result = generate([])
        assert result.endpoints == []
        assert result.module.namespaces[0].items == ()
        assert result.module.namespaces[1].items == (ir.Prelude(),)


class TestNameClashes:
    def test_record_named_like_prelude_type_raises(self, make_endpoint: Callable[..., Endpoint]) -> None:
        with pytest.raises(
            GenerationError,
            match="^http: generated name 'HttpRequest' is already used by a shared prelude type",
        ):
            generate([make_endpoint("http", ["GET"], ["/_http"])])

    def test_endpoints_with_same_generated_names_raise(
        self, make_endpoint: Callable[..., Endpoint]
    ) -> None:
        endpoints = [
            make_endpoint("a.b_c", ["GET"], ["/_x"]),
            make_endpoint("a_b.c", ["GET"], ["/_y"]),
        ]
        with pytest.raises(
            GenerationError,
            match=r"^a_b\.c: generated name 'ABCRequest' is already used by endpoint 'a\.b_c'",
        ):
            generate(endpoints)

    def test_url_part_type_named_like_record_raises(
        self, make_endpoint: Callable[..., Endpoint]
    ) -> None:
        with pytest.raises(
            GenerationError,
            match="^index: url part type 'IndexRequest' is already used by endpoint 'index'",
        ):
            generate([make_endpoint("index", ["GET"], ["/{index_request}"])])

    def test_shared_wrappers_do_not_clash(self, fixture_endpoints: list[Endpoint]) -> None:
        result = generate(fixture_endpoints)
        assert "Index" in result.types.wrappers


class TestSharedTypeItems:
    def test_hosts_sorted(self) -> None:
        types = TypeAccumulator(wrappers={"Index": frozenset({LIST, TEXT})}, opaque=frozenset({"List"}))
        items = shared_type_items(types)
        assert items[1] == ir.WrapperType("Index", (TEXT, LIST))
        assert items[2] == ir.OpaqueType("List")

    def test_opaque_named_like_wrapper_emitted_once(self) -> None:
        time = HostType(kind=HostKind.OPAQUE, name="Time")
        types = TypeAccumulator(wrappers={"Time": frozenset({time})}, opaque=frozenset({"Time"}))
        items = shared_type_items(types)
        assert items[1:] == [ir.WrapperType("Time", ())]
