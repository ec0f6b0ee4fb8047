# patterns.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence

from errors import ConfigurationError
from models import Device, PatternSet

logger = logging.getLogger(__name__)


class RegexEngine(Protocol):
    def compile(self, pattern: str) -> Any: ...

    def matches(self, matcher: Any, text: str) -> bool: ...


class ReEngine:
    """Default engine: `re` with unanchored search semantics."""

    def compile(self, pattern: str) -> re.Pattern[str]:
        try:
            return re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"invalid pattern {pattern!r}: {e}") from e

    def matches(self, matcher: re.Pattern[str], text: str) -> bool:
        return matcher.search(text) is not None


def _compile_all(engine: RegexEngine, label: str, patterns: Sequence[str]) -> List[Any]:
    out: List[Any] = []
    for p in patterns:
        try:
            out.append(engine.compile(p))
        except ConfigurationError as e:
            raise ConfigurationError(f"{label}: {e}") from e
    return out


@dataclass(frozen=True)
class DeviceFilter:
    engine: RegexEngine
    include_names: List[Any]
    include_descriptions: List[Any]
    exclude_names: List[Any]
    exclude_descriptions: List[Any]

    @classmethod
    def from_pattern_set(cls, pattern_set: PatternSet, engine: Optional[RegexEngine] = None) -> "DeviceFilter":
        """
        Compile every pattern up front so a bad pattern fails before any
        device is looked at.
        """
        eng = engine if engine is not None else ReEngine()
        return cls(
            engine=eng,
            include_names=_compile_all(eng, "include_names", pattern_set.include_names),
            include_descriptions=_compile_all(eng, "include_descriptions", pattern_set.include_descriptions),
            exclude_names=_compile_all(eng, "exclude_names", pattern_set.exclude_names),
            exclude_descriptions=_compile_all(eng, "exclude_descriptions", pattern_set.exclude_descriptions),
        )

    def _any(self, matchers: List[Any], text: str) -> bool:
        return any(self.engine.matches(m, text) for m in matchers)

    def wants_include(self, dev: Device) -> bool:
        if not self.include_names and not self.include_descriptions:
            return True
        return self._any(self.include_names, dev.name) or self._any(self.include_descriptions, dev.description)

    def wants_exclude(self, dev: Device) -> bool:
        return self._any(self.exclude_names, dev.name) or self._any(self.exclude_descriptions, dev.description)

    def is_eligible(self, dev: Device) -> bool:
        inc = self.wants_include(dev)
        exc = self.wants_exclude(dev)
        logger.debug("filter(%s): include=%s exclude=%s", dev.name, inc, exc)
        return inc and not exc


def is_eligible(device: Device, pattern_set: PatternSet, engine: Optional[RegexEngine] = None) -> bool:
    return DeviceFilter.from_pattern_set(pattern_set, engine).is_eligible(device)
