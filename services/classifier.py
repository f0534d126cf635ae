"""Threshold tables mapping a magnitude to a severity tier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterator, Sequence, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ThresholdTier(Generic[T]):
    upper_bound: float
    severity: T


@dataclass(frozen=True)
class ThresholdTable(Generic[T]):
    """Ordered tiers plus the implicit tier for values at or above every bound."""

    tiers: Tuple[ThresholdTier[T], ...]
    ceiling: T

    @classmethod
    def from_pairs(cls, pairs: Sequence[Tuple[float, T]], ceiling: T) -> "ThresholdTable[T]":
        return cls(
            tiers=tuple(ThresholdTier(upper_bound=bound, severity=severity) for bound, severity in pairs),
            ceiling=ceiling,
        )

    def __iter__(self) -> Iterator[ThresholdTier[T]]:
        return iter(self.tiers)


def classify(value: float, table: ThresholdTable[T]) -> T:
    """Return the severity of the first tier whose bound is strictly above ``value``."""
    for tier in table:
        if value < tier.upper_bound:
            return tier.severity
    return table.ceiling
