"""
Base class shared by the engine-specific finding normalizers.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from wcag_auditor.errors import MalformedEngineResult
from wcag_auditor.schemas.finding import Engine, Finding


@dataclass(frozen=True)
class NormalizeOptions:
    """Which records to keep and how to recognise compliance tags."""
    include_passes: bool = False
    include_incomplete: bool = True
    tag_prefixes: Tuple[str, ...] = ("wcag",)


class FindingNormalizer(ABC):
    """Turns one engine's raw result into an ordered list of Findings.

    Subclasses set ``engine`` and implement ``_normalize``. Normalization is
    pure: the same raw input always yields the same Findings in the same order.
    """

    engine: Engine

    def __init__(self, options: Optional[NormalizeOptions] = None):
        self.options = options or NormalizeOptions()

    def normalize(self, raw: Any) -> List[Finding]:
        if not isinstance(raw, Mapping):
            raise MalformedEngineResult(
                f"{self.engine.value} result must be an object, got {type(raw).__name__}"
            )
        return self._normalize(raw)

    @abstractmethod
    def _normalize(self, raw: Mapping) -> List[Finding]:
        ...

    def passed_rules(self, raw: Any) -> int:
        """Number of rules the engine reported as passing, if it reports them."""
        return 0

    def _require_list(self, raw: Mapping, key: str) -> list:
        """Top-level collection that must be present."""
        value = raw.get(key)
        if not isinstance(value, list):
            raise MalformedEngineResult(
                f"{self.engine.value} result is missing the '{key}' list"
            )
        return value

    def filter_tags(self, tags: Optional[Iterable[Any]]) -> Tuple[str, ...]:
        """Keep tags matching a compliance prefix, first occurrence wins."""
        prefixes = tuple(p.lower() for p in self.options.tag_prefixes)
        kept: List[str] = []
        for tag in tags or ():
            if not isinstance(tag, str):
                continue
            if tag.lower().startswith(prefixes) and tag not in kept:
                kept.append(tag)
        return tuple(kept)


def text_or_none(value: Any) -> Optional[str]:
    """Coerce optional raw text fields; empty strings become None."""
    if value is None:
        return None
    text = str(value)
    return text if text else None
