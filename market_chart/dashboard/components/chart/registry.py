# market_chart/dashboard/components/chart/registry.py
"""
Chart-type registry.

A chart type pairs a name with an item factory that turns one Dataset into
pyqtgraph items, plus the optional controller/element classes for custom
primitives such as the candlestick. Factories resolve pyqtgraph when they
are called, so the registry can be inspected without a display.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ....exceptions import ChartTypeError

logger = logging.getLogger(__name__)

# factory(dataset, options) -> list of graphics items
ItemFactory = Callable[..., list]


@dataclass(frozen=True)
class ChartTypeSpec:
    name: str
    factory: ItemFactory
    controller: Optional[type] = None
    element: Optional[type] = None


_REGISTRY: Dict[str, ChartTypeSpec] = {}


def register_chart_type(name: str, factory: ItemFactory,
                        controller: Optional[type] = None,
                        element: Optional[type] = None) -> ChartTypeSpec:
    """
    Register (or replace) a named chart type.

    Args:
        name: Dataset type string, e.g. 'candlestick'
        factory: Builds the graphics items for one dataset
        controller: Parses raw points and maps them to pixels
        element: Draws one parsed point

    Returns:
        The stored ChartTypeSpec
    """
    if name in _REGISTRY:
        logger.debug(f"Replacing chart type '{name}'")
    spec = ChartTypeSpec(name=name, factory=factory, controller=controller, element=element)
    _REGISTRY[name] = spec
    return spec


def get_chart_type(name: str) -> ChartTypeSpec:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise ChartTypeError(name, registered_chart_types()) from None


def registered_chart_types() -> List[str]:
    return sorted(_REGISTRY)


def _native(builder_name: str) -> ItemFactory:
    def factory(dataset, options):
        from . import renderer
        return getattr(renderer, builder_name)(dataset, options)

    factory.__name__ = builder_name
    return factory


# Built-in types drawn with native pyqtgraph items
register_chart_type('line', _native('build_line_items'))
register_chart_type('area', _native('build_area_items'))
register_chart_type('bar', _native('build_bar_items'))
