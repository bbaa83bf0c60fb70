from __future__ import annotations

import json
from pathlib import Path

import pytest

from togglestack import __version__
from togglestack.cli._dispatcher import build_parser, discover_commands, discover_domains, main
from helpers.configs import write_toggle_config

LIB = "com.example.lib"


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, str, str]:
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, out, err


def test_domains_and_commands_are_discovered() -> None:
    assert set(discover_domains()) == {"toggles", "config"}
    assert set(discover_commands("toggles")) == {"show", "locate"}
    assert set(discover_commands("config")) == {"show"}
    for info in discover_commands("toggles").values():
        assert info["summary"] and info["main"] and info["register_args"]


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_no_domain_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys)
    assert code == 0
    assert "toggles" in out and "config" in out


def test_toggles_show_json(resource_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    write_toggle_config(resource_root, LIB, {f"{LIB}.A": 0.5, f"{LIB}.B": 0.0})
    write_toggle_config(resource_root, f"{LIB}-service", {f"{LIB}.A": 1.0})

    code, out, _ = _run(capsys, "toggles", "show", LIB, "--root", str(resource_root), "--no-sys-path", "--json")

    assert code == 0
    payload = json.loads(out)
    assert payload["library"] == LIB
    assert payload["environment"] is None
    toggles = {t["id"]: t for t in payload["toggles"]}
    assert toggles[f"{LIB}.A"]["fraction"] == 1.0
    assert toggles[f"{LIB}.A"]["source"].endswith(f"{LIB}-service.json")
    assert toggles[f"{LIB}.B"]["fraction"] == 0.0
    assert isinstance(payload["checksum"], int)


def test_toggles_show_text_with_environment(resource_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    write_toggle_config(resource_root, LIB, {f"{LIB}.A": 0.5})
    write_toggle_config(resource_root, f"{LIB}-staging", {f"{LIB}.A": 0.25})

    code, out, _ = _run(
        capsys, "toggles", "show", LIB, "--env", "staging", "--root", str(resource_root), "--no-sys-path"
    )

    assert code == 0
    assert "environment: staging" in out
    assert f"{LIB}.A = 0.25" in out


def test_toggles_show_empty(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "toggles", "show", LIB, "--root", str(tmp_path), "--no-sys-path")
    assert code == 0
    assert "No toggles defined" in out


def test_toggles_show_invalid_name(capsys: pytest.CaptureFixture[str]) -> None:
    code, _, err = _run(capsys, "toggles", "show", "bad name", "--no-sys-path", "--json")
    assert code == 1
    payload = json.loads(err)
    assert payload["error"] == "toggles_show_error"
    assert payload["context"]["kind"] == "library name"


def test_toggles_show_ambiguous(make_root, capsys: pytest.CaptureFixture[str]) -> None:
    first, second = make_root("first"), make_root("second")
    write_toggle_config(first, LIB, {})
    write_toggle_config(second, LIB, {})

    code, _, err = _run(
        capsys, "toggles", "show", LIB, "--root", str(first), "--root", str(second), "--no-sys-path"
    )

    assert code == 1
    assert "Multiple toggle config resources found" in err


def test_toggles_locate(make_root, capsys: pytest.CaptureFixture[str]) -> None:
    first, second = make_root("first"), make_root("second")
    lib_path = write_toggle_config(first, LIB, {})
    env_a = write_toggle_config(first, f"{LIB}-service-prod", {})
    env_b = write_toggle_config(second, f"{LIB}-service-prod", {})

    code, out, _ = _run(
        capsys,
        "toggles",
        "locate",
        LIB,
        "--env",
        "PROD",
        "--root",
        str(first),
        "--root",
        str(second),
        "--no-sys-path",
        "--json",
    )

    assert code == 0
    payload = json.loads(out)
    configs = {c["config_name"]: c for c in payload["configs"]}
    assert list(configs) == [f"{LIB}-service-prod", f"{LIB}-service", f"{LIB}-prod", LIB]
    assert configs[f"{LIB}-service-prod"]["matches"] == [str(env_a), str(env_b)]
    assert configs[f"{LIB}-service-prod"]["ambiguous"] is True
    assert configs[LIB]["matches"] == [str(lib_path)]
    assert configs[f"{LIB}-prod"]["matches"] == []
    assert payload["roots"] == [str(first), str(second)]


def test_toggles_locate_text(resource_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "toggles", "locate", LIB, "--root", str(resource_root), "--no-sys-path")
    assert code == 0
    assert f"togglestack/toggles/configs/{LIB}.json" in out
    assert "not found" in out


def test_environment_from_settings(resource_root: Path, settings_file, capsys: pytest.CaptureFixture[str]) -> None:
    write_toggle_config(resource_root, f"{LIB}-qa", {f"{LIB}.A": 0.1})
    path = settings_file("server:\n  environment: qa\nresources:\n  include_sys_path: false\n")

    code, out, _ = _run(
        capsys, "toggles", "show", LIB, "--root", str(resource_root), "--config-file", str(path), "--json"
    )

    assert code == 0
    payload = json.loads(out)
    assert payload["environment"] == "qa"
    assert [t["id"] for t in payload["toggles"]] == [f"{LIB}.A"]


def test_config_show_json(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOGGLESTACK_server__environment", "staging")
    code, out, _ = _run(capsys, "config", "show", "--json")
    assert code == 0
    payload = json.loads(out)
    assert payload["server"]["environment"] == "staging"
    assert payload["resources"]["namespace"] == "togglestack/toggles"


def test_config_show_key_yaml(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "config", "show", "resources.namespace")
    assert code == 0
    assert out.strip() == "resources:\n  namespace: togglestack/toggles"


def test_config_show_missing_key(capsys: pytest.CaptureFixture[str]) -> None:
    code, _, err = _run(capsys, "config", "show", "resources.nope")
    assert code == 1
    assert "Key not found: resources.nope" in err


def test_bad_settings_file_fails_cleanly(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, _, err = _run(capsys, "config", "show", "--config-file", str(tmp_path / "missing.yaml"))
    assert code == 1
    assert "Failed to load settings" in err


def test_verbose_enables_debug_logging(resource_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    write_toggle_config(resource_root, LIB, {f"{LIB}.A": 0.5})
    code, _, err = _run(capsys, "-v", "toggles", "show", LIB, "--root", str(resource_root), "--no-sys-path")
    assert code == 0
    assert "Toggle config resource found for" in err


def test_toggles_locate_skips_environment_names_that_cannot_exist(
    resource_root: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code, out, _ = _run(
        capsys, "toggles", "locate", LIB, "--env", "EU West", "--root", str(resource_root), "--no-sys-path", "--json"
    )
    assert code == 0
    payload = json.loads(out)
    assert payload["environment"] == "EU West"
    assert [c["config_name"] for c in payload["configs"]] == [f"{LIB}-service", LIB]
