import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'togglestack' and tests/ importable for helpers
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from togglestack.core.providers.registry import ProviderRegistry
from togglestack.core.resources.locator import ResourceLocator
from helpers.cache_utils import reset_togglestack_caches


@pytest.fixture(autouse=True)
def _isolate_togglestack(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Fresh caches, no developer TOGGLESTACK_* settings, cwd without togglestack.yaml."""
    for key in list(os.environ):
        if key.startswith("TOGGLESTACK_"):
            monkeypatch.delenv(key, raising=False)
    work = tmp_path / "cwd"
    work.mkdir()
    monkeypatch.chdir(work)
    reset_togglestack_caches()
    yield
    reset_togglestack_caches()


@pytest.fixture
def make_root(tmp_path: Path):
    """Factory for empty resource roots under tmp_path."""

    def _make(name: str) -> Path:
        root = tmp_path / "roots" / name
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _make


@pytest.fixture
def resource_root(make_root) -> Path:
    return make_root("primary")


@pytest.fixture
def locator(resource_root: Path) -> ResourceLocator:
    """Locator over the single ``resource_root`` (no sys.path)."""
    return ResourceLocator([resource_root])


@pytest.fixture
def providers() -> ProviderRegistry:
    """Registry without entry point discovery."""
    return ProviderRegistry(discover=False)


@pytest.fixture
def settings_file(tmp_path: Path):
    """Write a YAML settings file and return its path."""

    def _write(content: str) -> Path:
        path = tmp_path / "togglestack.yaml"
        path.write_text(content, encoding="utf-8")
        return path

    return _write
