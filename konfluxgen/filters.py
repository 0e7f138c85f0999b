"""Regular-expression pattern sets used to select configs and images."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Tuple

from .errors import ConfigurationError


@dataclass(frozen=True)
class PatternSet:
    """Ordered, immutable collection of compiled regular expressions."""

    patterns: Tuple[re.Pattern[str], ...] = ()

    @classmethod
    def compile(cls, raw_patterns: Iterable[str], *, flag: str = "patterns") -> "PatternSet":
        compiled = []
        for raw in raw_patterns:
            try:
                compiled.append(re.compile(raw))
            except re.error as exc:
                raise ConfigurationError(
                    f"failed to create {flag!r} regular expressions: regex {raw!r} doesn't compile: {exc}"
                ) from exc
        return cls(tuple(compiled))

    def matches_any(self, text: str) -> bool:
        # Unanchored search; patterns anchor themselves with ^ and $.
        return any(pattern.search(text) for pattern in self.patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)


def should_include(path: str, includes: PatternSet, excludes: PatternSet) -> bool:
    """Return True when an include pattern matches and no exclude pattern does."""
    if not includes.matches_any(path):
        return False
    return not excludes.matches_any(path)


__all__ = ["PatternSet", "should_include"]
