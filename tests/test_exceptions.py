from __future__ import annotations

import json
from pathlib import Path

from togglestack.core.exceptions import (
    AmbiguousConfigError,
    AmbiguousProviderError,
    ConfigParseError,
    InvalidNameError,
    TogglesError,
)


def test_to_json_error_is_serializable() -> None:
    err = AmbiguousConfigError("lib", [Path("/a/lib.json"), Path("/b/lib.json")])
    payload = err.to_json_error()
    assert payload["code"] == "AmbiguousConfigError"
    assert payload["context"]["locations"] == ["/a/lib.json", "/b/lib.json"]
    json.dumps(payload)


def test_context_is_copied() -> None:
    context = {"a": 1}
    err = TogglesError("boom", context=context)
    context["a"] = 2
    assert err.context == {"a": 1}
    assert TogglesError("plain").context == {}


def test_error_hierarchy() -> None:
    assert isinstance(InvalidNameError("x y"), ValueError)
    assert isinstance(ConfigParseError("lib", "/a/lib.json"), TogglesError)
    err = AmbiguousProviderError("lib", ["one", "two"])
    assert "one, two" in str(err)
