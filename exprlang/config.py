from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MAX_DEPTH = 200
MAX_DEPTH_ENV = "EXPRLANG_MAX_DEPTH"


@dataclass(frozen=True)
class BuildOptions:
    """Limits applied while building the AST."""

    # Deepest expression nesting accepted before NestingDepthError.
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BuildOptions":
        env = os.environ if environ is None else environ
        raw = env.get(MAX_DEPTH_ENV, "").strip()
        if not raw:
            return cls()
        try:
            depth = int(raw)
        except ValueError:
            raise ValueError(f"{MAX_DEPTH_ENV} must be an integer, got {raw!r}") from None
        if depth < 1:
            raise ValueError(f"{MAX_DEPTH_ENV} must be at least 1, got {depth}")
        return cls(max_depth=depth)


DEFAULT_OPTIONS = BuildOptions()


__all__ = ["BuildOptions", "DEFAULT_OPTIONS", "DEFAULT_MAX_DEPTH", "MAX_DEPTH_ENV"]
