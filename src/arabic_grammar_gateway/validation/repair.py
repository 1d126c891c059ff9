"""
Shape repairer: pull near-miss closed-vocabulary values back into their set.

The model's vocabulary drifts in predictable ways: a synonym
("grammatical_case"), different casing or separators ("Part Of Speech"),
or the Arabic term ("حالة إعرابية"). Each ``RepairRule`` names a path to a
closed-vocabulary field, the allowed values and a versioned ``SynonymTable``.
For each string found at that path:

1. an allowed value is kept
2. a value equal to an allowed one after normalisation becomes that value
3. a value in the synonym table (exact, then normalised) becomes its target
4. anything else becomes the caller's default, when one is given

Without a default the value is left as is, and the validator rejects it.
Non-string values are never touched.

Paths are dotted keys; ``[]`` after a key means "every element of this
array", e.g. ``relatedConcepts[].type``.
"""

import copy
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import structlog

from arabic_grammar_gateway.monitoring.metrics import repairs_total

logger = structlog.get_logger(__name__)

_SEPARATORS = re.compile(r"[\s\-_]+")


def normalize_term(value: str) -> str:
    """Case-fold, trim and collapse runs of spaces, hyphens and underscores."""
    return _SEPARATORS.sub("_", value.strip().casefold()).strip("_")


@dataclass(frozen=True)
class SynonymTable:
    """
    Versioned synonym -> canonical value mapping for one concept domain.

    New drift classes are data changes: add entries and bump ``version``.
    """

    domain: str
    version: str
    mapping: Mapping[str, str]
    _normalized: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "mapping", MappingProxyType(dict(self.mapping)))
        object.__setattr__(
            self,
            "_normalized",
            MappingProxyType({normalize_term(k): v for k, v in self.mapping.items()}),
        )

    def lookup(self, value: str) -> str | None:
        """Canonical value for ``value``, trying an exact match first."""
        if value in self.mapping:
            return self.mapping[value]
        return self._normalized.get(normalize_term(value))


@dataclass(frozen=True)
class RepairRule:
    """One closed-vocabulary field to repair."""

    path: str
    allowed: frozenset[str]
    synonyms: SynonymTable
    _segments: tuple[tuple[str, bool], ...] = field(init=False, repr=False, compare=False)
    _normalized_allowed: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "allowed", frozenset(self.allowed))
        object.__setattr__(self, "_segments", parse_path(self.path))
        object.__setattr__(
            self,
            "_normalized_allowed",
            MappingProxyType({normalize_term(a): a for a in self.allowed}),
        )

    @property
    def segments(self) -> tuple[tuple[str, bool], ...]:
        return self._segments

    def resolve(self, value: str, default: str | None) -> tuple[str, str | None]:
        """
        Resolve one value.

        Returns:
            (new value, method) where method is None when nothing changed,
            otherwise one of "normalized", "synonym", "default"
        """
        if value in self.allowed:
            return value, None

        canonical = self._normalized_allowed.get(normalize_term(value))
        if canonical is not None:
            return canonical, "normalized"

        canonical = self.synonyms.lookup(value)
        if canonical is not None and canonical in self.allowed:
            return canonical, "synonym"

        if default is not None:
            return default, "default"
        return value, None


def parse_path(path: str) -> tuple[tuple[str, bool], ...]:
    """
    Split ``a[].b.c[]`` into ``(("a", True), ("b", False), ("c", True))``.

    Raises:
        ValueError: Empty path or empty segment
    """
    if not path:
        raise ValueError("Repair path must not be empty")
    segments = []
    for raw in path.split("."):
        is_array = raw.endswith("[]")
        key = raw[:-2] if is_array else raw
        if not key:
            raise ValueError(f"Invalid repair path segment in {path!r}")
        segments.append((key, is_array))
    return tuple(segments)


class ShapeRepairer:
    """
    Apply a set of repair rules to a parsed payload.

    The input is never mutated; ``repair`` works on a deep copy.
    """

    def __init__(self, rules: Iterable[RepairRule]):
        self.rules = tuple(rules)

    def repair(self, payload: Any, default: str | None = None) -> Any:
        """
        Return a corrected copy of ``payload``.

        Args:
            payload: Untyped JSON tree from the sanitizer
            default: Replacement for values no rule can place (usually the
                request's own category)
        """
        repaired = copy.deepcopy(payload)
        for rule in self.rules:
            self._apply(repaired, rule.segments, rule, default, rule.path)
        return repaired

    def _apply(
        self,
        node: Any,
        segments: tuple[tuple[str, bool], ...],
        rule: RepairRule,
        default: str | None,
        location: str,
    ) -> None:
        if not isinstance(node, dict):
            return
        (key, is_array), rest = segments[0], segments[1:]
        if key not in node:
            return

        value = node[key]
        if is_array:
            if not isinstance(value, list):
                return
            for index, item in enumerate(value):
                if rest:
                    self._apply(item, rest, rule, default, location)
                else:
                    value[index] = self._fix(item, rule, default, location)
        elif rest:
            self._apply(value, rest, rule, default, location)
        else:
            node[key] = self._fix(value, rule, default, location)

    def _fix(self, value: Any, rule: RepairRule, default: str | None, location: str) -> Any:
        if not isinstance(value, str):
            return value

        new_value, method = rule.resolve(value, default)
        if method is not None:
            repairs_total.labels(domain=rule.synonyms.domain, method=method).inc()
            logger.info(
                "Repaired closed-vocabulary value",
                path=location,
                original=value,
                repaired=new_value,
                method=method,
                table_version=rule.synonyms.version,
            )
        return new_value
