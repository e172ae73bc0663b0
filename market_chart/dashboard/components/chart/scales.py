# market_chart/dashboard/components/chart/scales.py
"""
Scale abstraction: domain value <-> pixel coordinate.

Chart elements always go through pixel_for(); nothing assumes a linear
mapping, so zoomed, inverted or logarithmic axes need no special casing.
"""

import math
from typing import Protocol


class Scale(Protocol):

    def pixel_for(self, value: float) -> float:
        ...

    def value_for(self, pixel: float) -> float:
        ...


class LinearScale:
    """
    Linear map from [domain_min, domain_max] onto [pixel_start, pixel_end].

    For a vertical price axis pass pixel_start=bottom, pixel_end=top so larger
    prices map to smaller pixel rows.
    """

    def __init__(self, domain_min: float, domain_max: float,
                 pixel_start: float, pixel_end: float):
        if domain_max == domain_min:
            raise ValueError("Scale domain must not be empty")
        self.domain_min = domain_min
        self.domain_max = domain_max
        self.pixel_start = pixel_start
        self.pixel_end = pixel_end

    @property
    def _ratio(self) -> float:
        return (self.pixel_end - self.pixel_start) / (self.domain_max - self.domain_min)

    def pixel_for(self, value: float) -> float:
        return self.pixel_start + (value - self.domain_min) * self._ratio

    def value_for(self, pixel: float) -> float:
        return self.domain_min + (pixel - self.pixel_start) / self._ratio

    def __repr__(self):
        return (f"LinearScale({self.domain_min}, {self.domain_max}, "
                f"{self.pixel_start}, {self.pixel_end})")


class LogScale(LinearScale):
    """Base-10 logarithmic scale; the domain must be strictly positive"""

    def __init__(self, domain_min: float, domain_max: float,
                 pixel_start: float, pixel_end: float):
        if domain_min <= 0 or domain_max <= 0:
            raise ValueError("Log scale domain must be positive")
        super().__init__(math.log10(domain_min), math.log10(domain_max),
                         pixel_start, pixel_end)

    def pixel_for(self, value: float) -> float:
        if value <= 0:
            return math.nan
        return super().pixel_for(math.log10(value))

    def value_for(self, pixel: float) -> float:
        return 10 ** super().value_for(pixel)

    def __repr__(self):
        return (f"LogScale({10 ** self.domain_min}, {10 ** self.domain_max}, "
                f"{self.pixel_start}, {self.pixel_end})")
