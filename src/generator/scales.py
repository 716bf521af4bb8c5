"""Scales — map data values and category labels onto pixel coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence


def value_domain(values: Iterable[float]) -> tuple[float, float]:
    """Domain spanning *values* and always including zero.

    An all-zero (or empty) domain is widened to ``[0, 1]`` so the scale never
    divides by zero.
    """
    vals = list(values)
    lo = min([0.0, *vals])
    hi = max([0.0, *vals])
    if lo == hi:
        return (0.0, 1.0)
    return (lo, hi)


@dataclass(frozen=True)
class LinearScale:
    """Continuous mapping from ``domain`` onto ``range``.

    Pass an inverted range (``(bottom, top)``) for vertical axes: pixel y
    grows downward while values grow upward.
    """
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return r0
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def ticks(self, count: int = 5) -> list[float]:
        """``count + 1`` evenly spaced values across the domain."""
        d0, d1 = self.domain
        if count <= 0:
            return [d0]
        step = (d1 - d0) / count
        return [d0 + step * i for i in range(count + 1)]


@dataclass(frozen=True)
class BandScale:
    """Divides ``range`` into one equal band per label.

    ``padding`` is the fraction of each band step left empty, split evenly on
    both sides of the band. A single label gets the full range minus padding.
    """
    labels: Sequence[str]
    range: tuple[float, float]
    padding: float = 0.2

    @property
    def step(self) -> float:
        r0, r1 = self.range
        return (r1 - r0) / max(len(self.labels), 1)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding)

    def start(self, index: int) -> float:
        return self.range[0] + self.step * index + self.step * self.padding / 2

    def center(self, index: int) -> float:
        return self.start(index) + self.bandwidth / 2

    def __len__(self) -> int:
        return len(self.labels)
