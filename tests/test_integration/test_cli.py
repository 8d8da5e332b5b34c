"""End-to-end tests of the restgen CLI (generate and inspect commands)."""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest
from typer.testing import CliRunner

from restgen import __version__
from restgen.app import app

runner = CliRunner()

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def bad_spec_dir(tmp_path: Path) -> Path:
    """A descriptor directory whose only endpoint cannot be generated."""
    spec = tmp_path / "bad_spec"
    spec.mkdir()
    descriptor = {"odd": {"methods": ["GET"], "url": {"paths": ["/{body}"]}}}
    (spec / "odd.json").write_text(json.dumps(descriptor))
    return spec


# ---------------------------------------------------------------------------
# Root options
# ---------------------------------------------------------------------------


class TestRoot:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"restgen {__version__}" in result.output

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "generate" in _strip_ansi(result.output)


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


class TestGenerate:
    def test_python_to_stdout(self, isolated_config: Path, spec_dir: Path) -> None:
        result = runner.invoke(app, ["generate", "--spec", str(spec_dir)])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("# This code is automatically generated")
        assert "class IndicesPutAliasRequest:" in result.output
        compile(result.output, "<generated>", "exec")

    def test_rust_target(self, isolated_config: Path, spec_dir: Path) -> None:
        result = runner.invoke(app, ["generate", "-s", str(spec_dir), "--target", "rust"])
        assert result.exit_code == 0, result.output
        assert "pub mod requests {" in result.output

    def test_format_strategy(self, isolated_config: Path, spec_dir: Path) -> None:
        result = runner.invoke(app, ["generate", "-s", str(spec_dir), "--strategy", "format"])
        assert result.exit_code == 0, result.output
        assert '"{}/_search".format(base)' in result.output
        assert "UrlBuffer(len(" not in result.output

    def test_no_markers(self, isolated_config: Path, spec_dir: Path) -> None:
        result = runner.invoke(app, ["generate", "-s", str(spec_dir), "--no-markers"])
        assert result.exit_code == 0, result.output
        assert "automatically generated" not in result.output

    def test_output_file(self, isolated_config: Path, spec_dir: Path) -> None:
        target = isolated_config / "gen" / "requests.py"
        result = runner.invoke(
            app, ["--no-color", "generate", "-s", str(spec_dir), "-o", str(target)]
        )
        assert result.exit_code == 0, result.output
        assert "Wrote 5 endpoint(s)" in result.output
        assert target.read_text(encoding="utf-8").startswith("# This code")

    def test_quiet_output_file(self, isolated_config: Path, spec_dir: Path) -> None:
        target = isolated_config / "requests.py"
        result = runner.invoke(app, ["-q", "generate", "-s", str(spec_dir), "-o", str(target)])
        assert result.exit_code == 0
        assert "Wrote" not in result.output
        assert target.exists()

    def test_output_is_identical_across_runs(self, isolated_config: Path, spec_dir: Path) -> None:
        first = runner.invoke(app, ["generate", "-s", str(spec_dir), "-t", "rust"])
        second = runner.invoke(app, ["generate", "-s", str(spec_dir), "-t", "rust"])
        assert first.output == second.output

    def test_missing_spec_exits_7(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--no-color", "generate", "-s", "missing"])
        assert result.exit_code == 7
        assert "Error:" in result.output

    def test_generation_error_exits_8(self, isolated_config: Path, bad_spec_dir: Path) -> None:
        target = isolated_config / "requests.py"
        result = runner.invoke(
            app, ["--no-color", "generate", "-s", str(bad_spec_dir), "-o", str(target)]
        )
        assert result.exit_code == 8
        assert "odd:" in result.output
        assert not target.exists()

    def test_no_endpoints_warns(self, isolated_config: Path) -> None:
        spec = isolated_config / "empty.json"
        spec.write_text("{}")
        result = runner.invoke(app, ["--no-color", "-q", "generate", "-s", str(spec)])
        assert result.exit_code == 0, result.output
        assert "Warning: No endpoints found" in result.output

    def test_generated_name_clash_exits_8(self, isolated_config: Path) -> None:
        spec = isolated_config / "http.json"
        spec.write_text(json.dumps({"http": {"methods": ["GET"], "url": {"paths": ["/_http"]}}}))
        result = runner.invoke(app, ["--no-color", "generate", "-s", str(spec)])
        assert result.exit_code == 8
        assert "'HttpRequest' is already used" in result.output

    def test_invalid_target_is_usage_error(self, isolated_config: Path, spec_dir: Path) -> None:
        result = runner.invoke(app, ["generate", "-s", str(spec_dir), "-t", "cobol"])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# Config file
# ---------------------------------------------------------------------------


class TestConfigFile:
    def test_project_config_is_used(self, isolated_config: Path, spec_dir: Path) -> None:
        (isolated_config / "restgen.json").write_text(json.dumps({
            "spec": str(spec_dir),
            "target": "rust",
            "policy": {"derived": [{"source": "search", "target": "simple_search"}]},
        }))
        result = runner.invoke(app, ["generate"])
        assert result.exit_code == 0, result.output
        assert "pub struct SimpleSearchRequest {" in result.output

    def test_cli_flag_beats_config(self, isolated_config: Path, spec_dir: Path) -> None:
        (isolated_config / "restgen.json").write_text(
            json.dumps({"spec": str(spec_dir), "target": "rust"})
        )
        result = runner.invoke(app, ["generate", "--target", "python"])
        assert result.exit_code == 0, result.output
        assert "pub mod" not in result.output

    def test_explicit_config_path(self, isolated_config: Path, spec_dir: Path) -> None:
        config = isolated_config / "custom.json"
        config.write_text(json.dumps({"spec": str(spec_dir), "comment_markers": False}))
        result = runner.invoke(app, ["--config", str(config), "generate"])
        assert result.exit_code == 0, result.output
        assert "automatically generated" not in result.output

    def test_invalid_config_exits_1(self, isolated_config: Path) -> None:
        (isolated_config / "restgen.json").write_text("{broken")
        result = runner.invoke(app, ["--no-color", "generate"])
        assert result.exit_code == 1
        assert "Invalid config" in result.output


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


class TestInspect:
    def test_endpoints_plain(self, isolated_config: Path, spec_dir: Path) -> None:
        result = runner.invoke(app, ["--plain", "inspect", "endpoints", "-s", str(spec_dir)])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "Name\tMethod\tPaths\tBody"
        assert "indices.put_alias\tPOST\t/{index}/_aliases/{name}\toptional" in lines
        assert "cluster.put_settings\tPUT\t/_cluster/settings\trequired" in lines
        assert "indices.delete\tDELETE\t/{index}\t-" in lines

    def test_endpoints_json(self, isolated_config: Path, spec_dir: Path) -> None:
        result = runner.invoke(app, ["--json", "inspect", "endpoints", "-s", str(spec_dir)])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.output)
        search = next(r for r in rows if r["Name"] == "search")
        assert search["Paths"] == "/_search, /{index}/_search, /{index}/{type}/_search"

    def test_endpoint_detail(self, isolated_config: Path, spec_dir: Path) -> None:
        result = runner.invoke(
            app, ["--plain", "inspect", "endpoint", "indices.put_alias", "-s", str(spec_dir)]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["endpoint"]["methods"] == ["POST"]
        (request,) = data["requests"]
        assert request["type"] == "IndicesPutAliasRequest"
        assert request["constructor"] == "index_name"
        assert request["capacity"] == ["base", 1, "index", 10, "name"]

    def test_unknown_endpoint_exits_2(self, isolated_config: Path, spec_dir: Path) -> None:
        result = runner.invoke(app, ["--no-color", "inspect", "endpoint", "nope", "-s", str(spec_dir)])
        assert result.exit_code == 2
        assert "Unknown endpoint 'nope'" in result.output
