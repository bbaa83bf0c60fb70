from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping


class TogglesError(Exception):
    """Base exception for togglestack."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class InvalidNameError(TogglesError, ValueError):
    """Raised when a library name or toggle id contains disallowed characters."""

    def __init__(self, name: str, *, kind: str = "id") -> None:
        message = f"invalid characters in {kind}: {name!r} (allowed: A-Z, a-z, 0-9, '_', '-', '.')"
        TogglesError.__init__(self, message, context={"name": name, "kind": kind})
        ValueError.__init__(self, message)


class InvalidFractionError(TogglesError, ValueError):
    """Raised when a toggle fraction falls outside [0.0, 1.0]."""

    def __init__(self, toggle_id: str, fraction: Any) -> None:
        message = f"fraction for {toggle_id!r} must be between 0.0 and 1.0, got {fraction!r}"
        TogglesError.__init__(self, message, context={"id": toggle_id, "fraction": fraction})
        ValueError.__init__(self, message)


class ResourceLookupError(TogglesError):
    """Raised when enumerating resource roots fails."""


class AmbiguousConfigError(TogglesError):
    """Raised when more than one resource matches a single config name."""

    def __init__(self, config_name: str, locations: Iterable[Path]) -> None:
        locs = [str(p) for p in locations]
        super().__init__(
            f"Multiple toggle config resources found for {config_name}: {', '.join(locs)}",
            context={"config_name": config_name, "locations": locs},
        )


class ConfigParseError(TogglesError):
    """Raised when the single matching config resource cannot be parsed.

    The underlying failure is available as ``__cause__``.
    """

    def __init__(self, config_name: str, resource: Path | str) -> None:
        super().__init__(
            f"Failure parsing toggle config resource for {config_name}, from {resource}",
            context={"config_name": config_name, "resource": str(resource)},
        )


class AmbiguousProviderError(TogglesError):
    """Raised when several dynamic providers claim the same library name."""

    def __init__(self, library_name: str, providers: Iterable[str]) -> None:
        names = list(providers)
        super().__init__(
            f"Multiple dynamically loaded toggle maps found for {library_name}: {', '.join(names)}",
            context={"library_name": library_name, "providers": names},
        )


class ProviderLoadError(TogglesError):
    """Raised when a dynamic toggle map provider cannot be loaded."""


class SchemaValidationError(TogglesError, ValueError):
    """Raised when a payload does not satisfy its JSON schema."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TogglesError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "TogglesError",
    "InvalidNameError",
    "InvalidFractionError",
    "ResourceLookupError",
    "AmbiguousConfigError",
    "ConfigParseError",
    "AmbiguousProviderError",
    "ProviderLoadError",
    "SchemaValidationError",
]
