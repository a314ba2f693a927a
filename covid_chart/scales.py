from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta

# Day intervals tried, smallest first, when placing date ticks.
_DAY_STEPS = (1, 2, 3, 7, 14, 30, 61, 91, 182, 365)


def tick_step(start: float, stop: float, count: int) -> float:
    """Nice 1/2/5 x 10^k spacing giving roughly ``count`` ticks on [start, stop]."""
    span = abs(stop - start)
    if span == 0 or count <= 0:
        return 0.0
    raw = span / count
    power = 10 ** math.floor(math.log10(raw))
    error = raw / power
    if error >= math.sqrt(50):
        power *= 10
    elif error >= math.sqrt(10):
        power *= 5
    elif error >= math.sqrt(2):
        power *= 2
    return power


def linear_ticks(start: float, stop: float, count: int = 10) -> list[float]:
    step = tick_step(start, stop, count)
    if step == 0:
        return [start]
    lo, hi = min(start, stop), max(start, stop)
    if step >= 1:
        first, last = math.ceil(lo / step), math.floor(hi / step)
        return [i * step for i in range(first, last + 1)]
    # divide by the inverse so that 0.1-ish steps do not accumulate float error
    inverse = round(1 / step)
    first, last = math.ceil(lo * inverse), math.floor(hi * inverse)
    return [i / inverse for i in range(first, last + 1)]


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, position: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return (d0 + d1) / 2
        return d0 + (position - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: int = 10) -> list[float]:
        return linear_ticks(self.domain[0], self.domain[1], count)


@dataclass(frozen=True)
class TimeScale:
    domain: tuple[date, date]
    range: tuple[float, float]

    def _ordinal(self) -> LinearScale:
        return LinearScale((self.domain[0].toordinal(), self.domain[1].toordinal()), self.range)

    def __call__(self, value: date) -> float:
        return self._ordinal()(value.toordinal())

    def invert(self, position: float) -> float:
        """Fractional proleptic ordinal at ``position``."""
        return self._ordinal().invert(position)

    def ticks(self, count: int = 10) -> list[date]:
        start, stop = self.domain
        span = (stop - start).days
        if span <= 0:
            return [start]
        step = next((s for s in _DAY_STEPS if span / s <= count), _DAY_STEPS[-1])
        return [start + timedelta(days=offset) for offset in range(0, span + 1, step)]
