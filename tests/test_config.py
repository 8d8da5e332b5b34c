"""Tests for restgen.config: data dir, config file lookup, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from restgen.config import (
    find_config_file,
    get_data_dir,
    load_project_config,
    resolve_config,
)
from restgen.exceptions import ConfigError
from restgen.models import GeneratorConfig, HttpMethod, Target, UrlStrategy


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Data directory
# ---------------------------------------------------------------------------


class TestDataDir:
    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("restgen.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_data_dir()
        assert result == tmp_path / ".local" / "share" / "restgen"
        assert result.is_dir()

    def test_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_data"
        monkeypatch.setattr("restgen.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(custom))

        assert get_data_dir() == custom / "restgen"

    def test_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("restgen.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_data_dir()
        assert result == tmp_path / ".restgen"
        assert result.is_dir()


# ---------------------------------------------------------------------------
# Config file lookup
# ---------------------------------------------------------------------------


class TestFindConfigFile:
    def test_none_when_missing(self, isolated_config: Path) -> None:
        assert find_config_file() is None

    def test_project_file(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "restgen.json", {})
        assert find_config_file() == isolated_config / "restgen.json"

    def test_env_var(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = isolated_config / "elsewhere.json"
        _write_json(path, {})
        _write_json(isolated_config / "restgen.json", {})
        monkeypatch.setenv("RESTGEN_CONFIG", str(path))
        assert find_config_file() == path

    def test_cli_path_beats_env_var(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        cli = isolated_config / "cli.json"
        env = isolated_config / "env.json"
        _write_json(cli, {})
        _write_json(env, {})
        monkeypatch.setenv("RESTGEN_CONFIG", str(env))
        assert find_config_file(str(cli)) == cli

    def test_missing_explicit_file_raises(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            find_config_file(str(isolated_config / "nope.json"))


class TestLoadProjectConfig:
    def test_returns_none_when_missing(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loads_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "restgen.json", {"target": "rust"})
        assert load_project_config() == {"target": "rust"}

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        (isolated_config / "restgen.json").write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_project_config()

    def test_non_object_raises(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "restgen.json", ["a"])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config == GeneratorConfig()
        assert config.spec == "./spec"
        assert config.output == "-"
        assert config.target == Target.PYTHON
        assert config.comment_markers is True
        assert config.policy.strategy == UrlStrategy.PUSH

    def test_file_values(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "restgen.json", {
            "spec": "api",
            "target": "rust",
            "policy": {
                "strategy": "format",
                "strategy_overrides": {"search": "push"},
                "verb_order": ["PUT", "GET"],
                "derived": [{"source": "search", "target": "simple_search"}],
            },
        })
        config = resolve_config()
        assert config.spec == "api"
        assert config.target == Target.RUST
        assert config.policy.strategy_for("search") == UrlStrategy.PUSH
        assert config.policy.strategy_for("get") == UrlStrategy.FORMAT
        assert config.policy.verb_order == [HttpMethod.PUT, HttpMethod.GET]
        assert config.policy.derived[0].method == HttpMethod.GET

    def test_cli_overrides_file(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "restgen.json", {
            "spec": "api", "output": "out.py", "target": "rust", "comment_markers": True,
        })
        config = resolve_config(
            cli_spec="other",
            cli_output="-",
            cli_target="python",
            cli_comment_markers=False,
        )
        assert config.spec == "other"
        assert config.output == "-"
        assert config.target == Target.PYTHON
        assert config.comment_markers is False

    def test_cli_strategy_keeps_other_policy_fields(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "restgen.json", {
            "policy": {"derived": [{"source": "search", "target": "simple_search"}]},
        })
        config = resolve_config(cli_strategy="format")
        assert config.policy.strategy == UrlStrategy.FORMAT
        assert len(config.policy.derived) == 1

    def test_explicit_config_file(self, isolated_config: Path) -> None:
        path = isolated_config / "conf" / "gen.json"
        _write_json(path, {"target": "rust"})
        assert resolve_config(cli_config=str(path)).target == Target.RUST

    def test_invalid_schema_raises(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "restgen.json", {"target": "cobol"})
        with pytest.raises(ConfigError, match="Invalid config"):
            resolve_config()

    def test_unknown_cli_target_raises(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Unknown target 'cobol'"):
            resolve_config(cli_target="cobol")

    def test_unknown_cli_strategy_raises(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Unknown URL strategy"):
            resolve_config(cli_strategy="scatter")

    def test_exit_code(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            resolve_config(cli_target="cobol")
        assert exc_info.value.exit_code == 1
