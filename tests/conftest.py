"""Shared test fixtures for restgen.

Provides reusable fixtures for loading the descriptor fixtures, isolating
config lookup, managing output state and importing generated Python source.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Iterator

import pytest

from restgen.models import BodySpec, Endpoint, HttpMethod
from restgen.output import reset_output
from restgen.parser import extract_endpoints, load_spec_documents, parse_url_path
from restgen.parser.extractor import spec_type_from_name


FIXTURES_DIR = Path(__file__).parent / "fixtures"
SPEC_DIR = FIXTURES_DIR / "spec"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory with no config file in reach.

    Also points ``XDG_DATA_HOME`` into *tmp_path* so crash logs never land
    in the real home directory.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("RESTGEN_CONFIG", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    return tmp_path


# ---------------------------------------------------------------------------
# Descriptor fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def spec_dir() -> Path:
    """The directory of fixture descriptor files."""
    return SPEC_DIR


@pytest.fixture
def fixture_endpoints() -> list[Endpoint]:
    """Every endpoint declared in the fixture directory, extracted but not normalized."""
    return extract_endpoints(load_spec_documents(str(SPEC_DIR)))


@pytest.fixture
def make_endpoint() -> Callable[..., Endpoint]:
    """Factory building an :class:`Endpoint` from plain values.

    Example::

        endpoint = make_endpoint("indices.put_alias", ["PUT"],
                                 ["/{index}/_alias/{name}"],
                                 parts={"index": "list"}, body=True)
    """

    def _make(
        name: str = "ping",
        methods: list[str] | None = None,
        paths: list[str] | None = None,
        parts: dict[str, str] | None = None,
        body: Any = None,
        documentation: str = "",
    ) -> Endpoint:
        spec_parts = {part: spec_type_from_name(declared) for part, declared in (parts or {}).items()}
        if body is True:
            body = BodySpec(required=True)
        elif body is False:
            body = BodySpec(required=False)
        return Endpoint(
            name=name,
            documentation=documentation,
            methods=tuple(HttpMethod(m) for m in (methods or ["GET"])),
            paths=tuple(parse_url_path(p) for p in (paths or ["/"])),
            parts=spec_parts,
            body=body,
        )

    return _make


# ---------------------------------------------------------------------------
# Generated source
# ---------------------------------------------------------------------------


@pytest.fixture
def load_generated(tmp_path: Path) -> Iterator[Callable[..., ModuleType]]:
    """Write generated Python source to disk and import it as a module."""
    loaded: list[str] = []

    def _load(source: str, name: str = "generated_requests") -> ModuleType:
        path = tmp_path / f"{name}.py"
        path.write_text(source, encoding="utf-8")
        spec = importlib.util.spec_from_file_location(name, path)
        assert spec is not None and spec.loader is not None
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        loaded.append(name)
        spec.loader.exec_module(module)
        return module

    yield _load

    for name in loaded:
        sys.modules.pop(name, None)
