"""Registry of per-version function tables.

Each format version is described in ``config.json`` and implemented by a
module exposing a :class:`VersionHandler` subclass. A decode session picks one
handler up front and never mixes tables.
"""

from __future__ import annotations

import json
from importlib import import_module
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Tuple, Type

from ..opcodes import OpSpec

_CONFIG_PATH = Path(__file__).with_name("config.json")
_DATA = json.loads(_CONFIG_PATH.read_text(encoding="utf-8"))
_VERSIONS: Dict[str, Dict[str, Any]] = _DATA.get("versions", {})
DEFAULT_VERSION: str = _DATA.get("default", "v0")


class VersionHandler:
    """Interface implemented by version specific tables."""

    name: str = "unknown"

    def function_table(self) -> Dict[int, OpSpec]:  # pragma: no cover - overridden
        raise NotImplementedError

    def lookup(self, code: int) -> OpSpec | None:
        return self.function_table().get(code)

    @property
    def description(self) -> str:
        return _VERSIONS.get(self.name, {}).get("description", "")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


_HANDLER_REGISTRY: Dict[str, Type[VersionHandler]] = {}


def register_handler(handler: Type[VersionHandler]) -> None:
    """Register ``handler`` so it can later be retrieved by name."""

    _HANDLER_REGISTRY[handler.name] = handler


def canonical_name(version: str | int) -> str:
    """Map ``version`` (name, alias or integer flag) to its canonical name."""

    key = str(version).strip().lower()
    if key in _VERSIONS:
        return key
    for name, descriptor in _VERSIONS.items():
        if key in (alias.lower() for alias in descriptor.get("aliases", ())):
            return name
    raise KeyError(f"Unknown script version: {version!r}")


def get_handler(version: str | int = DEFAULT_VERSION) -> VersionHandler:
    """Return the handler implementing ``version``."""

    name = canonical_name(version)
    cls = _HANDLER_REGISTRY.get(name)
    if cls is None:
        descriptor = _VERSIONS[name]
        module = import_module(f"{__name__}.{descriptor['module']}")
        cls = _HANDLER_REGISTRY.get(name)
        if cls is None:
            candidate = getattr(module, "HANDLER", None)
            if isinstance(candidate, VersionHandler):
                return candidate
            raise KeyError(f"Module for {name!r} did not register a handler")
    return cls()


def iter_descriptors() -> Iterable[Tuple[str, Dict[str, Any]]]:
    """Yield ``(version, descriptor)`` pairs from the configuration."""

    return _VERSIONS.items()


def version_choices() -> Tuple[str, ...]:
    """Names and aliases accepted on the command line."""

    choices = []
    for name, descriptor in iter_descriptors():
        choices.append(name)
        choices.extend(descriptor.get("aliases", ()))
    return tuple(choices)


def iter_handlers() -> Iterator[VersionHandler]:
    for name, _ in iter_descriptors():
        yield get_handler(name)


__all__ = [
    "DEFAULT_VERSION",
    "OpSpec",
    "VersionHandler",
    "canonical_name",
    "get_handler",
    "iter_descriptors",
    "iter_handlers",
    "register_handler",
    "version_choices",
]
