"""Per-session settings shared by the library facade and the CLI."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict

from .pool import DEFAULT_ENCODING, normalise_encoding
from .versions import DEFAULT_VERSION, canonical_name


@dataclass(frozen=True)
class ScriptOptions:
    """Format version, text encodings and the pool overflow policy.

    ``output_encoding`` defaults to the input encoding. With
    ``allow_offset_overflow`` set, pool offsets above ``0xFFFF`` wrap the way
    the engine's 16-bit fields would instead of raising.
    """

    version: str = DEFAULT_VERSION
    encoding: str = DEFAULT_ENCODING
    output_encoding: str | None = None
    allow_offset_overflow: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "version", canonical_name(self.version))
        object.__setattr__(self, "encoding", normalise_encoding(self.encoding))
        if self.output_encoding is not None:
            object.__setattr__(self, "output_encoding", normalise_encoding(self.output_encoding))

    @property
    def effective_output_encoding(self) -> str:
        return self.output_encoding or self.encoding

    def with_changes(self, **changes: Any) -> "ScriptOptions":
        return replace(self, **changes)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "encoding": self.encoding,
            "output_encoding": self.effective_output_encoding,
            "allow_offset_overflow": self.allow_offset_overflow,
        }


__all__ = ["ScriptOptions"]
