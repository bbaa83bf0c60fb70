from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from jsonschema import Draft202012Validator

from togglestack.core.config import ConfigManager
from togglestack.core.config.cache import get_cached_config, is_cached
from togglestack.core.config.domains import FlagsConfig, LoggingConfig, ResourcesConfig, ServerConfig
from togglestack.core.exceptions import SchemaValidationError
from togglestack.core.schemas.validation import load_schema
from togglestack.core.server_info import ServerInfo
from togglestack.data import get_data_path


def test_bundled_defaults() -> None:
    cfg = ConfigManager().load_config(validate=True)
    assert cfg["resources"]["namespace"] == "togglestack/toggles"
    assert cfg["resources"]["include_sys_path"] is True
    assert cfg["server"]["environment"] is None
    assert cfg["flags"]["overrides"] == {}
    assert cfg["logging"]["level"] == "WARNING"


def test_bundled_schemas_are_valid_draft_2020_12() -> None:
    for name in ("config/settings.schema.yaml", "toggles/toggle-config"):
        Draft202012Validator.check_schema(load_schema(name))
    assert get_data_path("config", "defaults.yaml").exists()


def test_settings_file_overrides_defaults(settings_file) -> None:
    path = settings_file("server:\n  environment: staging\nresources:\n  roots: [/opt/toggles]\n")
    mgr = ConfigManager(path)
    cfg = mgr.load_config()
    assert cfg["server"]["environment"] == "staging"
    assert cfg["resources"]["roots"] == ["/opt/toggles"]
    # Untouched keys keep their defaults.
    assert cfg["resources"]["namespace"] == "togglestack/toggles"


def test_settings_file_from_env_var(settings_file, monkeypatch: pytest.MonkeyPatch) -> None:
    path = settings_file("server:\n  environment: qa\n")
    monkeypatch.setenv("TOGGLESTACK_CONFIG_FILE", str(path))
    assert ConfigManager().settings_file == path
    assert ServerConfig().environment == "qa"


def test_settings_file_in_cwd_is_picked_up(tmp_path: Path) -> None:
    (tmp_path / "togglestack.yaml").write_text("logging:\n  level: debug\n", encoding="utf-8")
    mgr = ConfigManager(cwd=tmp_path)
    assert mgr.settings_file == tmp_path / "togglestack.yaml"
    assert LoggingConfig(mgr).level == "DEBUG"


def test_missing_explicit_settings_file_fails(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigManager(tmp_path / "nope.yaml").load_config()


def test_non_mapping_settings_file_fails(settings_file) -> None:
    with pytest.raises(ValueError, match="YAML mapping"):
        ConfigManager(settings_file("- just\n- a list\n")).load_config()


def test_invalid_yaml_fails(settings_file) -> None:
    with pytest.raises(yaml.YAMLError):
        ConfigManager(settings_file("server: [unclosed\n")).load_config()


def test_env_overrides_with_type_coercion() -> None:
    environ = {
        "TOGGLESTACK_server__environment": "production",
        "TOGGLESTACK_resources__include_sys_path": "false",
        "TOGGLESTACK_flags__overrides": '{"com.example.A": 0.5}',
        "TOGGLESTACK_TOGGLE_OVERRIDES": "ignored=1",
        "UNRELATED__key": "x",
    }
    mgr = ConfigManager(environ=environ)
    cfg = mgr.load_config()
    assert cfg["server"]["environment"] == "production"
    assert cfg["resources"]["include_sys_path"] is False
    assert cfg["flags"]["overrides"] == {"com.example.A": 0.5}
    assert "toggle" not in cfg
    assert mgr.get("server.environment") == "production"


def test_env_overrides_win_over_settings_file(settings_file) -> None:
    path = settings_file("server:\n  environment: staging\n")
    mgr = ConfigManager(path, environ={"TOGGLESTACK_server__environment": "prod"})
    assert ServerConfig(mgr).environment == "prod"


def test_coercion_helpers() -> None:
    mgr = ConfigManager(environ={})
    assert mgr._coerce_type("true") is True
    assert mgr._coerce_type("42") == 42
    assert mgr._coerce_type("0.25") == 0.25
    assert mgr._coerce_type("[1, 2]") == [1, 2]
    assert mgr._coerce_type(" text ") == "text"


def test_malformed_env_key_fails() -> None:
    with pytest.raises(ValueError, match="empty segment"):
        ConfigManager(environ={"TOGGLESTACK_server____environment": "x"}).load_config()


def test_schema_validation_rejects_bad_settings(settings_file) -> None:
    mgr = ConfigManager(settings_file("flags:\n  overrides:\n    com.example.A: 5\n"))
    with pytest.raises(SchemaValidationError) as excinfo:
        mgr.load_config(validate=True)
    assert excinfo.value.context["schema"] == "config/settings.schema.yaml"
    # Accessors read without validation.
    assert FlagsConfig(mgr).overrides == {"com.example.A": 5}


def test_get_with_default() -> None:
    mgr = ConfigManager(environ={})
    assert mgr.get("resources.namespace") == "togglestack/toggles"
    assert mgr.get("resources.nope", "fallback") == "fallback"
    assert mgr.get("server.environment.deeper") is None


def test_cache_follows_settings_file_edits(settings_file) -> None:
    path = settings_file("server:\n  environment: one\n")
    mgr = ConfigManager(path)
    first = get_cached_config(mgr)
    assert is_cached(mgr)
    assert get_cached_config(mgr) is first

    path.write_text("server:\n  environment: two-longer\n", encoding="utf-8")
    assert ConfigManager(path).load_config()["server"]["environment"] == "two-longer"


def test_resources_config_roots_from_pathsep_string(tmp_path: Path) -> None:
    import os

    a, b = tmp_path / "a", tmp_path / "b"
    mgr = ConfigManager(environ={"TOGGLESTACK_resources__roots": f"{a}{os.pathsep}{b}"})
    assert ResourcesConfig(mgr).roots == [a, b]
    mgr.load_config(validate=True)


def test_logging_config_path(settings_file, tmp_path: Path) -> None:
    mgr = ConfigManager(settings_file(f"logging:\n  path: {tmp_path / 'toggles.log'}\n"))
    assert LoggingConfig(mgr).path == tmp_path / "toggles.log"
    assert LoggingConfig(ConfigManager(environ={})).path is None


def test_deep_merge_replaces_lists_and_merges_mappings() -> None:
    from togglestack.core.utils.merge import deep_merge

    base = {"resources": {"roots": ["/a"], "namespace": "x"}, "server": {"environment": None}}
    merged = deep_merge(base, {"resources": {"roots": ["/b"]}, "logging": {"level": "INFO"}})
    assert merged == {
        "resources": {"roots": ["/b"], "namespace": "x"},
        "server": {"environment": None},
        "logging": {"level": "INFO"},
    }
    assert base["resources"]["roots"] == ["/a"]


@pytest.mark.parametrize("raw", ["01", "1.50", "true", "[eu]", " staging "])
def test_environment_override_is_not_type_coerced(raw: str) -> None:
    mgr = ConfigManager(environ={"TOGGLESTACK_server__environment": raw})
    assert mgr.load_config(validate=True)["server"]["environment"] == raw.strip()
    assert ServerInfo.from_settings(mgr).environment == raw.strip()


def test_environment_override_key_is_case_insensitive() -> None:
    mgr = ConfigManager(environ={"TOGGLESTACK_SERVER__ENVIRONMENT": "007"})
    assert ServerConfig(mgr).environment == "007"
